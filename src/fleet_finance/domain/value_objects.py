from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from fleet_finance.exceptions import InvalidInputError

ZERO = Decimal("0")
HUNDRED = Decimal("100")


class Currency(str, Enum):
    USD = "USD"
    CAD = "CAD"
    MXN = "MXN"
    EUR = "EUR"
    GBP = "GBP"


class DocumentKind(str, Enum):
    INVOICE = "invoice"
    BILL = "bill"


class DocumentStatus(str, Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"


class PaymentMethod(str, Enum):
    ACH = "ach"
    CHECK = "check"
    WIRE = "wire"
    CARD = "card"
    CASH = "cash"
    OTHER = "other"


def to_decimal(value: Any, field: str) -> Decimal:
    """Convert a numeric value to Decimal, rejecting anything that is not a finite number.

    Floats go through ``str`` so that ``0.1`` becomes ``Decimal("0.1")``
    rather than its binary expansion. Booleans are rejected even though
    they are ints.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidInputError(field, value)
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidInputError(field, value) from None
    else:
        raise InvalidInputError(field, value)
    if not result.is_finite():
        raise InvalidInputError(field, value, "must be a finite number")
    return result


@dataclass(frozen=True, slots=True)
class Money:
    amount: Decimal
    currency: Currency | str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", Decimal(str(self.amount)))

        if isinstance(self.currency, str) and not isinstance(self.currency, Currency):
            try:
                object.__setattr__(self, "currency", Currency[self.currency])
            except KeyError:
                raise ValueError(f"Invalid currency: {self.currency}")
        elif not isinstance(self.currency, Currency):
            raise ValueError(f"Invalid currency: {self.currency}")

    def __add__(self, other: "Money") -> "Money":
        if self.currency != other.currency:
            raise ValueError(f"Cannot add {self.currency} and {other.currency}")
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: "Money") -> "Money":
        if self.currency != other.currency:
            raise ValueError(f"Cannot subtract {self.currency} and {other.currency}")
        return Money(self.amount - other.amount, self.currency)

    def __mul__(self, factor: Decimal | int | float) -> "Money":
        return Money(self.amount * Decimal(str(factor)), self.currency)

    def __neg__(self) -> "Money":
        return Money(-self.amount, self.currency)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.amount == other.amount and self.currency == other.currency

    def __lt__(self, other: "Money") -> bool:
        if self.currency != other.currency:
            raise ValueError(f"Cannot compare {self.currency} and {other.currency}")
        return self.amount < other.amount

    def __le__(self, other: "Money") -> bool:
        return self == other or self < other

    @property
    def is_zero(self) -> bool:
        return self.amount == ZERO

    @property
    def is_positive(self) -> bool:
        return self.amount > ZERO

    @property
    def is_negative(self) -> bool:
        return self.amount < ZERO

    @classmethod
    def zero(cls, currency: Currency | str = "USD") -> "Money":
        return cls(ZERO, currency)


__all__ = [
    "Currency",
    "DocumentKind",
    "DocumentStatus",
    "HUNDRED",
    "Money",
    "PaymentMethod",
    "ZERO",
    "to_decimal",
]
