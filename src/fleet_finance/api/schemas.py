"""Pydantic v2 schemas for API request/response models.

Numeric inputs accept JSON numbers or strings and are parsed by
``fleet_finance.services.validation`` so that bad values come back with
the same INVALID_INPUT / DOMAIN_ERROR codes the calculators use. Money in
responses is serialised as decimal strings.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

NumberLike = str | int | float


class HealthResponse(BaseModel):
    status: str
    version: str


# Line items
class LineItemInput(BaseModel):
    """One invoice or bill line as entered on the form."""

    model_config = ConfigDict(str_strip_whitespace=True)

    description: str = ""
    quantity: NumberLike = 1
    unit_price: NumberLike = 0
    tax_rate: NumberLike = 0


class LineItemsRequest(BaseModel):
    lines: list[LineItemInput] = Field(default_factory=list)


class LineTotalsResponse(BaseModel):
    subtotal: str
    tax_amount: str
    total: str


class DocumentTotalsResponse(BaseModel):
    subtotal: str
    tax: str
    total: str
    formatted_total: str


class LineItemsResponse(BaseModel):
    lines: list[LineTotalsResponse]
    totals: DocumentTotalsResponse


# Financing
class FinancingRequest(BaseModel):
    """Payment estimator inputs. Omitted fields use the configured defaults."""

    price: NumberLike
    down_payment: NumberLike | None = None
    annual_rate: NumberLike | None = None
    term_months: NumberLike | None = None


class AmortizationResponse(BaseModel):
    loan_amount: str
    monthly_payment: str
    total_interest: str
    total_cost: str
    display: dict[str, str]


class ScheduleRequest(BaseModel):
    loan_amount: NumberLike
    annual_rate: NumberLike | None = None
    term_months: NumberLike | None = None


class ScheduleRowResponse(BaseModel):
    period: int
    payment: str
    principal: str
    interest: str
    balance: str


class ScheduleResponse(BaseModel):
    term_months: int
    total_paid: str
    total_interest: str
    rows: list[ScheduleRowResponse]


# Debt schedule
class DebtInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    lender: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    currency: str = Field(default="USD", pattern=r"^(USD|CAD|MXN|EUR|GBP)$")
    original_amount: NumberLike
    current_balance: NumberLike
    interest_rate: NumberLike
    monthly_payment: NumberLike
    remaining_payments: int = Field(..., ge=0)
    total_interest_paid: NumberLike = 0
    total_interest_remaining: NumberLike = 0
    start_date: date | None = None
    maturity_date: date | None = None
    next_payment_date: date | None = None


class DebtScheduleRequest(BaseModel):
    debts: list[DebtInput] = Field(default_factory=list)


class DebtRowResponse(BaseModel):
    lender: str
    description: str
    total_paid: str
    percent_repaid: str


class DebtScheduleResponse(BaseModel):
    currency: str
    debt_count: int
    total_debt: str
    monthly_payments: str
    total_interest_paid: str
    total_interest_remaining: str
    debts: list[DebtRowResponse] = Field(default_factory=list)


# Documents
class InvoiceCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    customer_id: str = Field(..., min_length=1)
    invoice_date: date
    due_date: date
    reference: str = ""
    notes: str = ""
    terms_and_conditions: str = ""
    tax_inclusive: bool = False
    lines: list[LineItemInput] = Field(..., min_length=1)


class BillCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    vendor_id: str = Field(..., min_length=1)
    bill_date: date
    due_date: date
    notes: str = ""
    lines: list[LineItemInput] = Field(..., min_length=1)


class DocumentResponse(BaseModel):
    id: str
    number: str
    status: str
    subtotal: str
    tax: str
    total: str
    line_count: int


class PaymentCreate(BaseModel):
    """A payment against an invoice.

    ``invoice_amount`` and ``balance`` are the invoice's figures as last
    read from the store; the new balance is derived from them.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    amount: NumberLike
    invoice_amount: NumberLike
    balance: NumberLike
    payment_date: date
    payment_method: str = Field(
        default="ach", pattern=r"^(ach|check|wire|card|cash|other)$"
    )
    reference_number: str = ""
    notes: str = ""


class BalanceResponse(BaseModel):
    invoice_id: str
    balance: str
    status: str
