"""Display formatting for money and rates.

Rounding to cents happens here and nowhere else. Calculators hand back
unrounded Decimals; views call these helpers at the last moment.
"""

from decimal import ROUND_HALF_UP, Decimal

from fleet_finance.domain.value_objects import Money

CENT = Decimal("0.01")

_COMPACT_UNITS = (
    (Decimal("1000000000000"), "T"),
    (Decimal("1000000000"), "B"),
    (Decimal("1000000"), "M"),
    (Decimal("1000"), "K"),
)


def _as_decimal(amount: Money | Decimal | int | float) -> Decimal:
    if isinstance(amount, Money):
        return amount.amount
    if isinstance(amount, Decimal):
        return amount
    return Decimal(str(amount))


def _strip_zeros(value: Decimal) -> str:
    text = f"{value:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _round_two_significant(value: Decimal) -> Decimal:
    if value >= 10:
        return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    if value >= 1:
        return value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_currency(amount: Money | Decimal | int | float) -> str:
    """Format as US dollars, ``$#,##0.00``.

    >>> format_currency(Decimal("1234.5"))
    '$1,234.50'
    >>> format_currency(Decimal("-0.125"))
    '-$0.13'
    """
    value = _as_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_compact_currency(amount: Money | Decimal | int | float) -> str:
    """Short dollar figure for narrow layouts: ``$1.2K``, ``$165K``, ``$3.3M``."""
    value = _as_decimal(amount)
    sign = "-" if value < 0 else ""
    magnitude = abs(value)

    for index, (threshold, suffix) in enumerate(_COMPACT_UNITS):
        if magnitude >= threshold:
            scaled = _round_two_significant(magnitude / threshold)
            if scaled >= 1000 and index > 0:
                bigger, bigger_suffix = _COMPACT_UNITS[index - 1]
                scaled = _round_two_significant(magnitude / bigger)
                suffix = bigger_suffix
            return f"{sign}${_strip_zeros(scaled)}{suffix}"

    scaled = _round_two_significant(magnitude)
    if scaled >= 1000:
        return f"{sign}$1K"
    return f"{sign}${_strip_zeros(scaled)}"


def format_percentage(value: Decimal | int | float, places: int = 2) -> str:
    """Format a percentage figure (``7.99`` -> ``'7.99%'``)."""
    quantum = Decimal(1).scaleb(-places)
    rounded = _as_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{rounded:.{places}f}%"
