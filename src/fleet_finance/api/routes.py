"""API routes for Fleet Finance."""

from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, status

from fleet_finance.api.schemas import (
    AmortizationResponse,
    BalanceResponse,
    BillCreate,
    DebtInput,
    DebtRowResponse,
    DebtScheduleRequest,
    DebtScheduleResponse,
    DocumentResponse,
    DocumentTotalsResponse,
    FinancingRequest,
    HealthResponse,
    InvoiceCreate,
    LineItemInput,
    LineItemsRequest,
    LineItemsResponse,
    LineTotalsResponse,
    NumberLike,
    PaymentCreate,
    ScheduleRequest,
    ScheduleResponse,
    ScheduleRowResponse,
)
from fleet_finance.config import Settings
from fleet_finance.container import get_document_service, get_settings_dependency
from fleet_finance.domain.documents import (
    BillDraft,
    InvoiceDraft,
    PaymentDraft,
    SubmittedDocument,
)
from fleet_finance.domain.financing import Debt
from fleet_finance.domain.line_items import LineItem
from fleet_finance.domain.value_objects import Money, PaymentMethod
from fleet_finance.formatting import format_currency
from fleet_finance.services.amortization import (
    build_schedule,
    quote_financing,
    summarize_debts,
)
from fleet_finance.services.documents import DocumentService
from fleet_finance.services.line_items import compute_aggregate, totals_for
from fleet_finance.services.validation import (
    parse_decimal,
    parse_financing,
    parse_line_item,
)

health_router = APIRouter(tags=["health"])
calculator_router = APIRouter(prefix="/calculators", tags=["calculators"])
report_router = APIRouter(prefix="/reports", tags=["reports"])
invoice_router = APIRouter(prefix="/invoices", tags=["invoices"])
bill_router = APIRouter(prefix="/bills", tags=["bills"])

SettingsDep = Annotated[Settings, Depends(get_settings_dependency)]
DocumentServiceDep = Annotated[DocumentService, Depends(get_document_service)]


def _dec(value: Decimal) -> str:
    return format(value, "f")


def _parse_lines(lines: list[LineItemInput]) -> list[LineItem]:
    return [
        parse_line_item(
            line.quantity, line.unit_price, line.tax_rate, line.description
        ).unwrap()
        for line in lines
    ]


def _document_to_response(document: SubmittedDocument) -> DocumentResponse:
    return DocumentResponse(
        id=document.id,
        number=document.number,
        status=document.status.value,
        subtotal=_dec(document.subtotal),
        tax=_dec(document.tax),
        total=_dec(document.total),
        line_count=document.line_count,
    )


# Health endpoint
@health_router.get("/health", response_model=HealthResponse)
def health_check(settings: SettingsDep) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=settings.app_version)


# Calculator endpoints
@calculator_router.post("/line-items", response_model=LineItemsResponse)
def calculate_line_items(payload: LineItemsRequest) -> LineItemsResponse:
    """Per-line and document totals for an invoice or bill form."""
    line_totals = [totals_for(item) for item in _parse_lines(payload.lines)]
    totals = compute_aggregate(line_totals)
    return LineItemsResponse(
        lines=[
            LineTotalsResponse(
                subtotal=_dec(t.subtotal),
                tax_amount=_dec(t.tax_amount),
                total=_dec(t.total),
            )
            for t in line_totals
        ],
        totals=DocumentTotalsResponse(
            subtotal=_dec(totals.subtotal),
            tax=_dec(totals.tax),
            total=_dec(totals.total),
            formatted_total=format_currency(totals.total),
        ),
    )


@calculator_router.post("/amortization", response_model=AmortizationResponse)
def calculate_amortization(
    payload: FinancingRequest, settings: SettingsDep
) -> AmortizationResponse:
    """Monthly payment estimate for financing a vehicle."""
    quote = parse_financing(
        payload.price,
        payload.down_payment
        if payload.down_payment is not None
        else settings.default_down_payment,
        payload.annual_rate
        if payload.annual_rate is not None
        else settings.default_annual_rate,
        payload.term_months
        if payload.term_months is not None
        else settings.default_term_months,
    ).unwrap()
    result = quote_financing(quote)
    return AmortizationResponse(
        loan_amount=_dec(result.loan_amount),
        monthly_payment=_dec(result.monthly_payment),
        total_interest=_dec(result.total_interest),
        total_cost=_dec(result.total_cost),
        display={
            "down_payment": format_currency(quote.down_payment),
            "monthly_payment": format_currency(result.monthly_payment),
            "total_interest": format_currency(result.total_interest),
            "total_cost": format_currency(result.total_cost),
        },
    )


@calculator_router.post("/amortization/schedule", response_model=ScheduleResponse)
def calculate_schedule(
    payload: ScheduleRequest, settings: SettingsDep
) -> ScheduleResponse:
    """Month-by-month repayment schedule."""
    rate = (
        payload.annual_rate
        if payload.annual_rate is not None
        else settings.default_annual_rate
    )
    term = (
        payload.term_months
        if payload.term_months is not None
        else settings.default_term_months
    )
    rows = build_schedule(payload.loan_amount, rate, term)
    total_paid = sum((row.payment for row in rows), Decimal("0"))
    total_interest = sum((row.interest for row in rows), Decimal("0"))
    return ScheduleResponse(
        term_months=len(rows),
        total_paid=_dec(total_paid),
        total_interest=_dec(total_interest),
        rows=[
            ScheduleRowResponse(
                period=row.period,
                payment=_dec(row.payment),
                principal=_dec(row.principal),
                interest=_dec(row.interest),
                balance=_dec(row.balance),
            )
            for row in rows
        ],
    )


# Report endpoints
def _money(value: NumberLike, field: str, currency: str) -> Money:
    return Money(parse_decimal(value, field).unwrap(), currency)


def _debt_from_input(d: DebtInput) -> Debt:
    return Debt(
        lender=d.lender,
        description=d.description,
        original_amount=_money(d.original_amount, "original_amount", d.currency),
        current_balance=_money(d.current_balance, "current_balance", d.currency),
        interest_rate=parse_decimal(d.interest_rate, "interest_rate").unwrap(),
        monthly_payment=_money(d.monthly_payment, "monthly_payment", d.currency),
        remaining_payments=d.remaining_payments,
        start_date=d.start_date,
        maturity_date=d.maturity_date,
        next_payment_date=d.next_payment_date,
        total_interest_paid=_money(
            d.total_interest_paid, "total_interest_paid", d.currency
        ),
        total_interest_remaining=_money(
            d.total_interest_remaining, "total_interest_remaining", d.currency
        ),
    )


@report_router.post("/debt-schedule", response_model=DebtScheduleResponse)
def debt_schedule_report(payload: DebtScheduleRequest) -> DebtScheduleResponse:
    """Totals across outstanding vehicle and equipment loans in one currency."""
    debts = [_debt_from_input(d) for d in payload.debts]
    summary = summarize_debts(debts)
    return DebtScheduleResponse(
        currency=summary.currency.value,
        debt_count=summary.debt_count,
        total_debt=_dec(summary.total_debt.amount),
        monthly_payments=_dec(summary.monthly_payments.amount),
        total_interest_paid=_dec(summary.total_interest_paid.amount),
        total_interest_remaining=_dec(summary.total_interest_remaining.amount),
        debts=[
            DebtRowResponse(
                lender=debt.lender,
                description=debt.description,
                total_paid=_dec(debt.total_paid.amount),
                percent_repaid=_dec(debt.percent_repaid),
            )
            for debt in debts
        ],
    )


# Document endpoints
@invoice_router.post(
    "",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_invoice(
    payload: InvoiceCreate, service: DocumentServiceDep
) -> DocumentResponse:
    """Create an invoice (accounts receivable) with its line items."""
    draft = InvoiceDraft(
        customer_id=payload.customer_id,
        invoice_date=payload.invoice_date,
        due_date=payload.due_date,
        lines=_parse_lines(payload.lines),
        reference=payload.reference,
        notes=payload.notes,
        terms_and_conditions=payload.terms_and_conditions,
        tax_inclusive=payload.tax_inclusive,
    )
    return _document_to_response(service.submit_invoice(draft))


@invoice_router.post("/{invoice_id}/payments", response_model=BalanceResponse)
def record_invoice_payment(
    invoice_id: str, payload: PaymentCreate, service: DocumentServiceDep
) -> BalanceResponse:
    """Record a payment and update the invoice balance and status."""
    payment = PaymentDraft(
        invoice_id=invoice_id,
        amount=parse_decimal(payload.amount, "payment").unwrap(),
        payment_date=payload.payment_date,
        payment_method=PaymentMethod(payload.payment_method),
        reference_number=payload.reference_number,
        notes=payload.notes,
    )
    update = service.record_payment(
        payment,
        amount=parse_decimal(payload.invoice_amount, "invoice_amount").unwrap(),
        balance=parse_decimal(payload.balance, "balance").unwrap(),
    )
    return BalanceResponse(
        invoice_id=invoice_id,
        balance=_dec(update.balance),
        status=update.status.value,
    )


@bill_router.post(
    "",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_bill(payload: BillCreate, service: DocumentServiceDep) -> DocumentResponse:
    """Create a bill (accounts payable) with its line items."""
    draft = BillDraft(
        vendor_id=payload.vendor_id,
        bill_date=payload.bill_date,
        due_date=payload.due_date,
        lines=_parse_lines(payload.lines),
        notes=payload.notes,
    )
    return _document_to_response(service.submit_bill(draft))
