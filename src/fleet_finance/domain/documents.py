"""Invoice, bill and payment drafts as captured by the entry forms."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from fleet_finance.domain.line_items import LineItem
from fleet_finance.domain.value_objects import DocumentStatus, PaymentMethod


@dataclass
class InvoiceDraft:
    customer_id: str
    invoice_date: date
    due_date: date
    lines: list[LineItem] = field(default_factory=list)
    reference: str = ""
    notes: str = ""
    terms_and_conditions: str = ""
    tax_inclusive: bool = False


@dataclass
class BillDraft:
    vendor_id: str
    bill_date: date
    due_date: date
    lines: list[LineItem] = field(default_factory=list)
    notes: str = ""


@dataclass
class PaymentDraft:
    invoice_id: str
    amount: Decimal
    payment_date: date
    payment_method: PaymentMethod = PaymentMethod.ACH
    reference_number: str = ""
    notes: str = ""


@dataclass(frozen=True)
class BalanceUpdate:
    """Remaining balance and status of a document after a payment."""

    balance: Decimal
    status: DocumentStatus


@dataclass(frozen=True)
class SubmittedDocument:
    id: str
    number: str
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    line_count: int
    status: DocumentStatus = DocumentStatus.PENDING
