"""Invoice and bill line items and their derived totals."""

from dataclasses import dataclass
from decimal import Decimal

from fleet_finance.domain.value_objects import HUNDRED, ZERO, to_decimal
from fleet_finance.exceptions import InvalidInputError


@dataclass(frozen=True, slots=True)
class LineItem:
    """One billable entry on an invoice or bill.

    Only the three inputs are stored; subtotal, tax and total are derived on
    every access so they can never drift from the inputs.
    """

    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal
    description: str = ""

    def __post_init__(self) -> None:
        quantity = to_decimal(self.quantity, "quantity")
        if quantity != quantity.to_integral_value():
            raise InvalidInputError("quantity", self.quantity, "must be a whole number")
        object.__setattr__(self, "quantity", quantity)
        object.__setattr__(self, "unit_price", to_decimal(self.unit_price, "unit_price"))
        object.__setattr__(self, "tax_rate", to_decimal(self.tax_rate, "tax_rate"))

    @property
    def subtotal(self) -> Decimal:
        return self.quantity * self.unit_price

    @property
    def tax_amount(self) -> Decimal:
        return self.subtotal * self.tax_rate / HUNDRED

    @property
    def total(self) -> Decimal:
        return self.subtotal + self.tax_amount

    @classmethod
    def blank(cls, tax_rate: Decimal | int = 0) -> "LineItem":
        """A new form line: one unit at no cost."""
        return cls(quantity=Decimal("1"), unit_price=ZERO, tax_rate=tax_rate)


@dataclass(frozen=True, slots=True)
class LineTotals:
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal


@dataclass(frozen=True, slots=True)
class DocumentTotals:
    subtotal: Decimal
    tax: Decimal
    total: Decimal

    @classmethod
    def zero(cls) -> "DocumentTotals":
        return cls(subtotal=ZERO, tax=ZERO, total=ZERO)
