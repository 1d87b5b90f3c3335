"""Vehicle financing quotes, amortization results and debt schedules."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from fleet_finance.domain.value_objects import (
    HUNDRED,
    ZERO,
    Currency,
    Money,
    to_decimal,
)


# Fifty years of monthly payments
MAX_TERM_MONTHS = 600


@dataclass(frozen=True, slots=True)
class FinancingQuote:
    """Parameters of the payment estimator for one listed vehicle."""

    price: Decimal
    down_payment: Decimal
    annual_rate: Decimal
    term_months: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "price", to_decimal(self.price, "price"))
        object.__setattr__(
            self, "down_payment", to_decimal(self.down_payment, "down_payment")
        )
        object.__setattr__(
            self, "annual_rate", to_decimal(self.annual_rate, "annual_rate")
        )

    @property
    def loan_amount(self) -> Decimal:
        return self.price - self.down_payment


@dataclass(frozen=True, slots=True)
class AmortizationResult:
    monthly_payment: Decimal
    total_interest: Decimal
    total_cost: Decimal
    loan_amount: Decimal


@dataclass(frozen=True, slots=True)
class ScheduleRow:
    period: int
    payment: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal


@dataclass
class Debt:
    """An outstanding equipment or vehicle loan.

    Interest figures are the lender's, as reported on the statement; they
    are not derived from the payment schedule.
    """

    lender: str
    original_amount: Money
    current_balance: Money
    interest_rate: Decimal
    monthly_payment: Money
    remaining_payments: int
    description: str = ""
    start_date: date | None = None
    maturity_date: date | None = None
    next_payment_date: date | None = None
    total_interest_paid: Money = field(default_factory=Money.zero)
    total_interest_remaining: Money = field(default_factory=Money.zero)

    def __post_init__(self) -> None:
        # Unset interest figures take the currency of the loan
        for name in ("total_interest_paid", "total_interest_remaining"):
            value = getattr(self, name)
            if value.is_zero and value.currency != self.currency:
                setattr(self, name, Money.zero(self.currency))

    @property
    def currency(self) -> Currency:
        return self.current_balance.currency  # type: ignore[return-value]

    @property
    def principal_paid(self) -> Money:
        return self.original_amount - self.current_balance

    @property
    def total_paid(self) -> Money:
        """Principal repaid so far plus interest paid."""
        return self.principal_paid + self.total_interest_paid

    @property
    def percent_repaid(self) -> Decimal:
        if self.original_amount.is_zero:
            return ZERO
        return self.principal_paid.amount / self.original_amount.amount * HUNDRED


@dataclass(frozen=True)
class DebtScheduleSummary:
    total_debt: Money
    monthly_payments: Money
    total_interest_paid: Money
    total_interest_remaining: Money
    debt_count: int = 0

    @property
    def currency(self) -> Currency:
        return self.total_debt.currency  # type: ignore[return-value]
