"""Line-item totals for invoices and bills.

Receivables and payables share the same arithmetic:

    subtotal   = quantity * unit_price
    tax_amount = subtotal * tax_rate / 100
    total      = subtotal + tax_amount

All figures stay as unrounded Decimals; two-place rounding happens only
when a value is formatted for display (see ``fleet_finance.formatting``).
"""

from collections.abc import Iterable
from decimal import Decimal
from typing import Any

from fleet_finance.domain.line_items import DocumentTotals, LineItem, LineTotals
from fleet_finance.domain.value_objects import ZERO
from fleet_finance.logging_config import get_logger

logger = get_logger(__name__)


def compute_line(quantity: Any, unit_price: Any, tax_rate: Any) -> LineTotals:
    """Compute subtotal, tax and total for one line.

    Range checks are the caller's job (see ``services.validation``); this
    only refuses values that are not numbers and fractional quantities.

    Raises:
        InvalidInputError: If any argument is not a finite number, or the
            quantity is not a whole number.
    """
    item = LineItem(quantity=quantity, unit_price=unit_price, tax_rate=tax_rate)
    return totals_for(item)


def totals_for(item: LineItem) -> LineTotals:
    return LineTotals(
        subtotal=item.subtotal,
        tax_amount=item.tax_amount,
        total=item.total,
    )


def compute_aggregate(lines: Iterable[LineTotals]) -> DocumentTotals:
    """Sum per-line totals into document totals.

    Decimal addition is exact at these magnitudes, so the result does not
    depend on the order of ``lines``. An empty iterable gives zeros.
    """
    subtotal = ZERO
    tax = ZERO
    total = ZERO
    count = 0
    for line in lines:
        subtotal += line.subtotal
        tax += line.tax_amount
        total += line.total
        count += 1

    logger.debug(
        "document_totals_computed",
        line_count=count,
        subtotal=str(subtotal),
        tax=str(tax),
        total=str(total),
    )
    return DocumentTotals(subtotal=subtotal, tax=tax, total=total)


def compute_document_totals(items: Iterable[LineItem]) -> DocumentTotals:
    """Totals for a set of line items."""
    return compute_aggregate(totals_for(item) for item in items)


class LineItemForm:
    """Line items being edited on one invoice or bill form.

    The caller owns an instance for as long as the form is open. Totals are
    recomputed from the current lines on every call; nothing is cached.
    """

    def __init__(self, lines: Iterable[LineItem] | None = None) -> None:
        self._lines: list[LineItem] = (
            list(lines) if lines is not None else [LineItem.blank()]
        )

    @property
    def lines(self) -> tuple[LineItem, ...]:
        return tuple(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def add_line(self) -> LineItem:
        """Append a blank line carrying over the previous line's tax rate."""
        tax_rate = self._lines[-1].tax_rate if self._lines else ZERO
        line = LineItem.blank(tax_rate=tax_rate)
        self._lines.append(line)
        return line

    def update_line(self, index: int, **changes: Any) -> LineItem:
        """Replace fields on the line at ``index``.

        Raises:
            IndexError: If there is no such line.
            InvalidInputError: If a numeric field is not a number.
        """
        current = self._lines[index]
        fields: dict[str, Any] = {
            "quantity": current.quantity,
            "unit_price": current.unit_price,
            "tax_rate": current.tax_rate,
            "description": current.description,
        }
        unknown = set(changes) - set(fields)
        if unknown:
            raise TypeError(f"Unknown line item fields: {sorted(unknown)}")
        fields.update(changes)
        line = LineItem(**fields)
        self._lines[index] = line
        return line

    def remove_line(self, index: int) -> LineItem:
        return self._lines.pop(index)

    def line_totals(self) -> list[LineTotals]:
        return [totals_for(line) for line in self._lines]

    def totals(self) -> DocumentTotals:
        return compute_aggregate(self.line_totals())

