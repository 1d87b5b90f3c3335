"""Fixed-rate loan amortization for the vehicle payment estimator.

The monthly payment uses the standard annuity formula

    payment = L * r * (1 + r)**n / ((1 + r)**n - 1)

with L the financed amount, r the monthly rate and n the number of
payments. A zero rate degenerates to straight-line repayment, L / n.
"""

from collections.abc import Iterable
from decimal import Decimal
from typing import Any

from fleet_finance.domain.financing import (
    MAX_TERM_MONTHS,
    AmortizationResult,
    Debt,
    DebtScheduleSummary,
    FinancingQuote,
    ScheduleRow,
)
from fleet_finance.domain.value_objects import HUNDRED, Currency, Money, to_decimal
from fleet_finance.exceptions import DomainError, InvalidInputError
from fleet_finance.logging_config import get_logger

logger = get_logger(__name__)

MONTHS_PER_YEAR = Decimal("12")


def _to_term(value: Any) -> int:
    term = to_decimal(value, "term_months")
    if term != term.to_integral_value():
        raise InvalidInputError("term_months", value, "must be a whole number of months")
    if term <= 0:
        raise DomainError("term_months", "must be greater than zero", value)
    if term > MAX_TERM_MONTHS:
        raise DomainError(
            "term_months", f"must be at most {MAX_TERM_MONTHS} months", value
        )
    return int(term)


def _to_rate(value: Any) -> Decimal:
    rate = to_decimal(value, "annual_rate")
    if rate < 0:
        raise DomainError("annual_rate", "cannot be negative", value)
    return rate


def monthly_rate(annual_rate_pct: Decimal) -> Decimal:
    return annual_rate_pct / HUNDRED / MONTHS_PER_YEAR


def monthly_payment(loan_amount: Decimal, rate: Decimal, term_months: int) -> Decimal:
    """Level payment retiring ``loan_amount`` over ``term_months`` at monthly ``rate``."""
    if rate == 0:
        return loan_amount / term_months
    growth = (1 + rate) ** term_months
    return loan_amount * (rate * growth) / (growth - 1)


def compute_amortization(
    price: Any, down_payment: Any, annual_rate_pct: Any, term_months: Any
) -> AmortizationResult:
    """Monthly payment, total interest and total cost of financing a purchase.

    Args:
        price: Purchase price, greater than zero.
        down_payment: Cash paid up front, between zero and ``price``.
        annual_rate_pct: Annual rate as a percentage (``7.99`` for 7.99%).
        term_months: Number of monthly payments, greater than zero.

    Raises:
        InvalidInputError: If an argument is not a number.
        DomainError: If an argument is outside its allowed range.
    """
    term = _to_term(term_months)
    rate_pct = _to_rate(annual_rate_pct)
    price_d = to_decimal(price, "price")
    down = to_decimal(down_payment, "down_payment")

    if price_d <= 0:
        raise DomainError("price", "must be greater than zero", price)
    if down < 0:
        raise DomainError("down_payment", "cannot be negative", down_payment)

    loan_amount = price_d - down
    if loan_amount < 0:
        raise DomainError("down_payment", "cannot exceed the price", down_payment)

    payment = monthly_payment(loan_amount, monthly_rate(rate_pct), term)
    total_cost = payment * term + down
    total_interest = total_cost - price_d

    logger.debug(
        "amortization_computed",
        loan_amount=str(loan_amount),
        annual_rate=str(rate_pct),
        term_months=term,
        monthly_payment=str(payment),
    )
    return AmortizationResult(
        monthly_payment=payment,
        total_interest=total_interest,
        total_cost=total_cost,
        loan_amount=loan_amount,
    )


def quote_financing(quote: FinancingQuote) -> AmortizationResult:
    return compute_amortization(
        quote.price, quote.down_payment, quote.annual_rate, quote.term_months
    )


def build_schedule(
    loan_amount: Any, annual_rate_pct: Any, term_months: Any
) -> list[ScheduleRow]:
    """Month-by-month payment schedule for a level-payment loan.

    Each row splits the payment into interest on the opening balance and
    principal. The last row pays off whatever balance is left, so the
    schedule always closes at exactly zero.

    Raises:
        InvalidInputError: If an argument is not a number.
        DomainError: If the amount or rate is negative, or the term is
            not between 1 and ``MAX_TERM_MONTHS``.
    """
    term = _to_term(term_months)
    rate_pct = _to_rate(annual_rate_pct)
    balance = to_decimal(loan_amount, "loan_amount")
    if balance < 0:
        raise DomainError("loan_amount", "cannot be negative", loan_amount)

    rate = monthly_rate(rate_pct)
    payment = monthly_payment(balance, rate, term)

    rows: list[ScheduleRow] = []
    for period in range(1, term + 1):
        interest = balance * rate
        if period == term:
            principal = balance
            row_payment = principal + interest
        else:
            principal = payment - interest
            row_payment = payment
        balance -= principal
        rows.append(
            ScheduleRow(
                period=period,
                payment=row_payment,
                principal=principal,
                interest=interest,
                balance=balance,
            )
        )
    return rows


def _summarize(debts: list[Debt], currency: Currency) -> DebtScheduleSummary:
    total_debt = Money.zero(currency)
    payments = Money.zero(currency)
    interest_paid = Money.zero(currency)
    interest_remaining = Money.zero(currency)

    for debt in debts:
        total_debt += debt.current_balance
        payments += debt.monthly_payment
        interest_paid += debt.total_interest_paid
        interest_remaining += debt.total_interest_remaining

    return DebtScheduleSummary(
        total_debt=total_debt,
        monthly_payments=payments,
        total_interest_paid=interest_paid,
        total_interest_remaining=interest_remaining,
        debt_count=len(debts),
    )


def summarize_debts_by_currency(
    debts: Iterable[Debt],
) -> dict[Currency, DebtScheduleSummary]:
    """One set of debt schedule totals per currency, in order of first appearance."""
    grouped: dict[Currency, list[Debt]] = {}
    for debt in debts:
        grouped.setdefault(debt.currency, []).append(debt)
    return {
        currency: _summarize(group, currency) for currency, group in grouped.items()
    }


def summarize_debts(
    debts: Iterable[Debt], currency: Currency | str = Currency.USD
) -> DebtScheduleSummary:
    """Totals for the debt schedule report.

    All debts must be in one currency; ``currency`` only matters for an
    empty list. Use ``summarize_debts_by_currency`` for a mixed book.

    Raises:
        DomainError: If the debts are in more than one currency.
    """
    by_currency = summarize_debts_by_currency(debts)
    if not by_currency:
        return _summarize([], Currency(currency))
    if len(by_currency) > 1:
        raise DomainError(
            "currency",
            "debts in more than one currency cannot share one total",
            ", ".join(c.value for c in by_currency),
        )
    return next(iter(by_currency.values()))


__all__ = [
    "MAX_TERM_MONTHS",
    "build_schedule",
    "compute_amortization",
    "monthly_payment",
    "monthly_rate",
    "quote_financing",
    "summarize_debts",
    "summarize_debts_by_currency",
]
