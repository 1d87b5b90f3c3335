"""Parsing of user-entered form text into calculator inputs.

Form fields arrive as text. Each parser here returns a ``ParseResult``
that either holds the parsed value or lists every problem found, so a
form can flag all bad fields at once instead of feeding NaN or a
negative amount into a displayed total.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Generic, TypeVar

from fleet_finance.domain.financing import MAX_TERM_MONTHS, FinancingQuote
from fleet_finance.domain.line_items import LineItem
from fleet_finance.domain.value_objects import HUNDRED, ZERO, to_decimal
from fleet_finance.exceptions import CalculationError, DomainError, InvalidInputError

T = TypeVar("T")


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    value: T | None = None
    errors: tuple[CalculationError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

    def unwrap(self) -> T:
        """Return the parsed value, or raise the first error."""
        if self.errors:
            raise self.errors[0]
        return self.value  # type: ignore[return-value]

    def messages(self) -> dict[str, str]:
        """Field name to message, for showing next to form inputs."""
        return {
            getattr(error, "field", "input"): error.message for error in self.errors
        }

    @classmethod
    def success(cls, value: T) -> "ParseResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, *errors: CalculationError) -> "ParseResult[T]":
        return cls(errors=tuple(errors))


def _clean(text: str) -> str:
    cleaned = text.strip()
    if cleaned.endswith("%"):
        cleaned = cleaned[:-1].rstrip()
    if cleaned.startswith("-$"):
        cleaned = "-" + cleaned[2:]
    elif cleaned.startswith("$"):
        cleaned = cleaned[1:]
    return cleaned.replace(",", "")


def parse_decimal(
    text: Any,
    field: str,
    *,
    minimum: Decimal | None = None,
    maximum: Decimal | None = None,
) -> ParseResult[Decimal]:
    """Parse a number typed into a form field.

    Accepts surrounding whitespace, a leading ``$``, thousands separators
    and a trailing ``%``. ``minimum`` and ``maximum`` are inclusive.
    """
    if isinstance(text, str):
        cleaned = _clean(text)
        if not cleaned:
            return ParseResult.failure(InvalidInputError(field, text, "is required"))
    else:
        cleaned = text

    try:
        value = to_decimal(cleaned, field)
    except InvalidInputError:
        return ParseResult.failure(InvalidInputError(field, text))

    if minimum is not None and value < minimum:
        return ParseResult.failure(
            DomainError(field, f"must be at least {minimum}", value)
        )
    if maximum is not None and value > maximum:
        return ParseResult.failure(
            DomainError(field, f"must be at most {maximum}", value)
        )
    return ParseResult.success(value)


def parse_whole_number(
    text: Any, field: str, *, minimum: int = 0, maximum: int | None = None
) -> ParseResult[int]:
    parsed = parse_decimal(text, field)
    if not parsed.ok:
        return ParseResult.failure(*parsed.errors)
    value = parsed.unwrap()
    if value != value.to_integral_value():
        return ParseResult.failure(
            InvalidInputError(field, text, "must be a whole number")
        )
    if value < minimum:
        return ParseResult.failure(
            DomainError(field, f"must be at least {minimum}", value)
        )
    if maximum is not None and value > maximum:
        return ParseResult.failure(
            DomainError(field, f"must be at most {maximum}", value)
        )
    return ParseResult.success(int(value))


def parse_quantity(text: Any) -> ParseResult[int]:
    return parse_whole_number(text, "quantity", minimum=0)


def parse_line_item(
    quantity: Any, unit_price: Any, tax_rate: Any, description: str = ""
) -> ParseResult[LineItem]:
    """Validate one invoice or bill line, collecting every field error."""
    results = {
        "quantity": parse_quantity(quantity),
        "unit_price": parse_decimal(unit_price, "unit_price", minimum=ZERO),
        "tax_rate": parse_decimal(tax_rate, "tax_rate", minimum=ZERO, maximum=HUNDRED),
    }
    errors = [error for result in results.values() for error in result.errors]
    if errors:
        return ParseResult.failure(*errors)
    return ParseResult.success(
        LineItem(
            quantity=Decimal(results["quantity"].unwrap()),
            unit_price=results["unit_price"].unwrap(),
            tax_rate=results["tax_rate"].unwrap(),
            description=description.strip(),
        )
    )


def parse_financing(
    price: Any, down_payment: Any, annual_rate: Any, term_months: Any
) -> ParseResult[FinancingQuote]:
    """Validate the payment estimator inputs.

    The down payment may not exceed the price; a larger down payment
    would mean a negative loan.
    """
    price_result = parse_decimal(price, "price", minimum=ZERO)
    down_result = parse_decimal(down_payment, "down_payment", minimum=ZERO)
    rate_result = parse_decimal(annual_rate, "annual_rate", minimum=ZERO)
    term_result = parse_whole_number(
        term_months, "term_months", minimum=1, maximum=MAX_TERM_MONTHS
    )

    errors: list[CalculationError] = [
        *price_result.errors,
        *down_result.errors,
        *rate_result.errors,
        *term_result.errors,
    ]
    if price_result.ok and price_result.unwrap() == ZERO:
        errors.insert(0, DomainError("price", "must be greater than zero", ZERO))
    if price_result.ok and down_result.ok:
        if down_result.unwrap() > price_result.unwrap():
            errors.append(
                DomainError(
                    "down_payment", "cannot exceed the price", down_result.unwrap()
                )
            )
    if errors:
        return ParseResult.failure(*errors)

    return ParseResult.success(
        FinancingQuote(
            price=price_result.unwrap(),
            down_payment=down_result.unwrap(),
            annual_rate=rate_result.unwrap(),
            term_months=term_result.unwrap(),
        )
    )
