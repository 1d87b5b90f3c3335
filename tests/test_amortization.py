"""Tests for the vehicle financing and debt schedule calculations."""

from decimal import ROUND_HALF_UP, Decimal

import pytest

from fleet_finance.domain.financing import MAX_TERM_MONTHS, Debt, FinancingQuote
from fleet_finance.domain.value_objects import Currency, Money
from fleet_finance.exceptions import DomainError, InvalidInputError
from fleet_finance.services.amortization import (
    build_schedule,
    compute_amortization,
    monthly_rate,
    quote_financing,
    summarize_debts,
    summarize_debts_by_currency,
)

CENT = Decimal("0.01")


def cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


class TestComputeAmortization:
    @pytest.mark.parametrize(
        "principal,rate,term,expected",
        [
            (Decimal("100000"), Decimal("6"), 360, Decimal("599.55")),
            (Decimal("10000"), Decimal("12"), 12, Decimal("888.49")),
        ],
    )
    def test_matches_standard_annuity_tables(self, principal, rate, term, expected):
        result = compute_amortization(principal, 0, rate, term)

        assert cents(result.monthly_payment) == expected

    def test_truck_quote_at_default_terms(self):
        result = compute_amortization(Decimal("165000"), 0, Decimal("7.99"), 60)

        assert abs(result.monthly_payment - Decimal("3344.81")) < Decimal("0.05")
        assert result.total_cost == result.monthly_payment * 60
        assert result.total_interest == result.total_cost - Decimal("165000")
        assert result.loan_amount == Decimal("165000")

    def test_down_payment_counts_toward_total_cost(self):
        result = compute_amortization(Decimal("165000"), Decimal("15000"), Decimal("7.99"), 60)

        assert result.loan_amount == Decimal("150000")
        assert result.total_cost == result.monthly_payment * 60 + Decimal("15000")
        assert result.total_interest == result.total_cost - Decimal("165000")

    def test_zero_rate_is_straight_line(self):
        result = compute_amortization(Decimal("12000"), 0, 0, 48)

        assert result.monthly_payment == Decimal("250")
        assert result.total_interest == 0
        assert result.total_cost == Decimal("12000")

    def test_zero_rate_with_down_payment(self):
        result = compute_amortization(Decimal("90000"), Decimal("18000"), 0, 36)

        assert result.monthly_payment == Decimal("72000") / 36
        assert result.total_interest == 0

    def test_down_payment_equal_to_price_means_no_payment(self):
        result = compute_amortization(Decimal("85000"), Decimal("85000"), Decimal("7.99"), 60)

        assert result.loan_amount == 0
        assert result.monthly_payment == 0
        assert result.total_cost == Decimal("85000")
        assert result.total_interest == 0

    def test_positive_rate_always_costs_interest(self):
        result = compute_amortization(Decimal("50000"), 0, Decimal("0.5"), 72)

        assert result.total_interest > 0

    def test_is_deterministic(self):
        first = compute_amortization("165000", "10000", "7.99", "48")
        second = compute_amortization("165000", "10000", "7.99", "48")

        assert first == second

    @pytest.mark.parametrize("term", [0, -1, -60])
    @pytest.mark.parametrize(
        "price,down,rate",
        [
            (Decimal("165000"), Decimal("0"), Decimal("7.99")),
            (Decimal("50000"), Decimal("50000"), Decimal("0")),
            (Decimal("1"), Decimal("0.5"), Decimal("100")),
        ],
    )
    def test_non_positive_term_raises(self, price, down, rate, term):
        with pytest.raises(DomainError) as exc_info:
            compute_amortization(price, down, rate, term)

        assert exc_info.value.field == "term_months"

    def test_down_payment_above_price_raises(self):
        with pytest.raises(DomainError, match="cannot exceed the price"):
            compute_amortization(Decimal("50000"), Decimal("50000.01"), Decimal("7.99"), 60)

    def test_negative_down_payment_raises(self):
        with pytest.raises(DomainError) as exc_info:
            compute_amortization(Decimal("50000"), Decimal("-1"), Decimal("7.99"), 60)

        assert exc_info.value.field == "down_payment"

    def test_non_positive_price_raises(self):
        with pytest.raises(DomainError) as exc_info:
            compute_amortization(0, 0, Decimal("7.99"), 60)

        assert exc_info.value.field == "price"

    def test_negative_rate_raises(self):
        with pytest.raises(DomainError) as exc_info:
            compute_amortization(Decimal("50000"), 0, Decimal("-0.1"), 60)

        assert exc_info.value.field == "annual_rate"

    def test_fractional_term_is_invalid_input(self):
        with pytest.raises(InvalidInputError) as exc_info:
            compute_amortization(Decimal("50000"), 0, Decimal("7.99"), Decimal("60.5"))

        assert exc_info.value.field == "term_months"

    def test_non_numeric_price_is_invalid_input(self):
        with pytest.raises(InvalidInputError) as exc_info:
            compute_amortization("a lot", 0, Decimal("7.99"), 60)

        assert exc_info.value.field == "price"

    def test_quote_financing_uses_quote_fields(self):
        quote = FinancingQuote(
            price=Decimal("12000"),
            down_payment=Decimal("2400"),
            annual_rate=Decimal("0"),
            term_months=48,
        )

        result = quote_financing(quote)

        assert quote.loan_amount == Decimal("9600")
        assert result.monthly_payment == Decimal("200")

    def test_monthly_rate(self):
        assert monthly_rate(Decimal("12")) == Decimal("0.01")


class TestBuildSchedule:
    def test_closes_at_exactly_zero(self):
        rows = build_schedule(Decimal("10000"), Decimal("12"), 12)

        assert len(rows) == 12
        assert rows[-1].balance == 0
        assert [row.period for row in rows] == list(range(1, 13))

    def test_first_row_split(self):
        rows = build_schedule(Decimal("10000"), Decimal("12"), 12)

        first = rows[0]
        assert first.interest == Decimal("100")
        assert cents(first.payment) == Decimal("888.49")
        assert first.principal == first.payment - first.interest
        assert first.balance == Decimal("10000") - first.principal

    def test_principal_repays_the_loan(self):
        rows = build_schedule(Decimal("165000"), Decimal("7.99"), 60)

        repaid = sum((row.principal for row in rows), Decimal("0"))
        assert abs(repaid - Decimal("165000")) < Decimal("0.000001")

    def test_interest_matches_quote(self):
        rows = build_schedule(Decimal("165000"), Decimal("7.99"), 60)
        quote = compute_amortization(Decimal("165000"), 0, Decimal("7.99"), 60)

        interest = sum((row.interest for row in rows), Decimal("0"))
        assert abs(interest - quote.total_interest) < Decimal("0.000001")

    def test_balance_declines_every_month(self):
        rows = build_schedule(Decimal("50000"), Decimal("6.5"), 36)

        balances = [row.balance for row in rows]
        assert balances == sorted(balances, reverse=True)

    def test_zero_rate_schedule(self):
        rows = build_schedule(Decimal("1200"), 0, 12)

        assert all(row.interest == 0 for row in rows)
        assert all(row.payment == Decimal("100") for row in rows)

    def test_zero_term_raises(self):
        with pytest.raises(DomainError):
            build_schedule(Decimal("1000"), Decimal("5"), 0)

    def test_negative_amount_raises(self):
        with pytest.raises(DomainError) as exc_info:
            build_schedule(Decimal("-1000"), Decimal("5"), 12)

        assert exc_info.value.field == "loan_amount"

    def test_longest_allowed_term(self):
        rows = build_schedule(Decimal("1000"), Decimal("0"), MAX_TERM_MONTHS)

        assert len(rows) == MAX_TERM_MONTHS
        assert rows[-1].balance == 0

    def test_term_above_maximum_raises(self):
        with pytest.raises(DomainError) as exc_info:
            build_schedule(Decimal("1000"), Decimal("5"), 200000)

        assert exc_info.value.field == "term_months"

    def test_quote_term_above_maximum_raises(self):
        with pytest.raises(DomainError) as exc_info:
            compute_amortization(
                Decimal("50000"), Decimal("0"), Decimal("5"), MAX_TERM_MONTHS + 1
            )

        assert exc_info.value.field == "term_months"


class TestDebtSchedule:
    def test_total_paid_is_principal_plus_interest_paid(self, sample_debts):
        debt = sample_debts[0]

        assert debt.principal_paid == Money(Decimal("30000"))
        assert debt.total_paid == Money(Decimal("38500"))
        assert debt.percent_repaid == Decimal("20")

    def test_percent_repaid_of_zero_original_amount(self):
        debt = Debt(
            lender="Dealer",
            original_amount=Money.zero(),
            current_balance=Money.zero(),
            interest_rate=Decimal("0"),
            monthly_payment=Money.zero(),
            remaining_payments=0,
        )

        assert debt.percent_repaid == 0

    def test_summarize_debts_uses_reported_interest_remaining(self, sample_debts):
        summary = summarize_debts(sample_debts)

        assert summary.debt_count == 3
        assert summary.currency == Currency.USD
        assert summary.total_debt == Money(Decimal("335000"))
        assert summary.monthly_payments == Money(Decimal("8500"))
        assert summary.total_interest_paid == Money(Decimal("24200"))
        assert summary.total_interest_remaining == Money(Decimal("42700"))

    def test_summarize_no_debts(self):
        summary = summarize_debts([])

        assert summary.debt_count == 0
        assert summary.total_debt.is_zero
        assert summary.total_interest_remaining.is_zero

    def test_summarize_no_debts_in_requested_currency(self):
        assert summarize_debts([], currency="CAD").currency == Currency.CAD

    def test_summarize_single_foreign_currency(self):
        debt = Debt(
            lender="Banco del Norte",
            original_amount=Money(Decimal("900000"), "MXN"),
            current_balance=Money(Decimal("600000"), "MXN"),
            interest_rate=Decimal("11.5"),
            monthly_payment=Money(Decimal("21000"), "MXN"),
            remaining_payments=36,
            total_interest_remaining=Money(Decimal("156000"), "MXN"),
        )

        summary = summarize_debts([debt])

        assert summary.currency == Currency.MXN
        assert summary.total_debt == Money(Decimal("600000"), "MXN")
        assert summary.total_interest_paid == Money.zero("MXN")

    def test_mixed_currencies_raise(self, sample_debts):
        cad = Debt(
            lender="Prairie Equipment Credit",
            original_amount=Money(Decimal("80000"), "CAD"),
            current_balance=Money(Decimal("50000"), "CAD"),
            interest_rate=Decimal("6"),
            monthly_payment=Money(Decimal("1800"), "CAD"),
            remaining_payments=30,
        )

        with pytest.raises(DomainError) as exc_info:
            summarize_debts([*sample_debts, cad])

        assert exc_info.value.field == "currency"

    def test_summarize_by_currency_keeps_separate_totals(self, sample_debts):
        cad = Debt(
            lender="Prairie Equipment Credit",
            original_amount=Money(Decimal("80000"), "CAD"),
            current_balance=Money(Decimal("50000"), "CAD"),
            interest_rate=Decimal("6"),
            monthly_payment=Money(Decimal("1800"), "CAD"),
            remaining_payments=30,
            total_interest_remaining=Money(Decimal("4000"), "CAD"),
        )

        by_currency = summarize_debts_by_currency([cad, *sample_debts])

        assert list(by_currency) == [Currency.CAD, Currency.USD]
        assert by_currency[Currency.CAD].total_debt == Money(Decimal("50000"), "CAD")
        assert by_currency[Currency.CAD].debt_count == 1
        assert by_currency[Currency.USD].total_debt == Money(Decimal("335000"))
        assert by_currency[Currency.USD].debt_count == 3
