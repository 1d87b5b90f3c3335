"""Invoice, bill and payment submission to the hosted document store.

Totals are always computed here from the draft's line items before a row
is written; the store receives the aggregate figures alongside each line.
Decimal values are sent as strings so no float rounding happens on the
way out.
"""

import random
import time
from collections.abc import Callable
from decimal import Decimal
from typing import Any

import structlog

from fleet_finance.domain.documents import (
    BalanceUpdate,
    BillDraft,
    InvoiceDraft,
    PaymentDraft,
    SubmittedDocument,
)
from fleet_finance.domain.line_items import LineItem
from fleet_finance.domain.value_objects import (
    DocumentKind,
    DocumentStatus,
    to_decimal,
)
from fleet_finance.exceptions import (
    DocumentStoreError,
    DocumentStoreNotConfiguredError,
    DomainError,
    EmptyDocumentError,
    PaymentExceedsBalanceError,
)
from fleet_finance.logging_config import get_logger
from fleet_finance.services.line_items import compute_aggregate, totals_for
from fleet_finance.store import DocumentStoreClient

logger = get_logger(__name__)

INVOICE_PREFIX = "INV"
BILL_PREFIX = "BILL"


def generate_document_number(
    prefix: str,
    *,
    clock: Callable[[], float] = time.time,
    rng: random.Random | None = None,
) -> str:
    """``PREFIX-######-###``: last six digits of the millisecond clock plus three random digits."""
    millis = str(int(clock() * 1000))[-6:].rjust(6, "0")
    suffix = (rng or random).randrange(1000)
    return f"{prefix}-{millis}-{suffix:03d}"


def apply_payment(amount: Any, balance: Any, payment: Any) -> BalanceUpdate:
    """Balance and status of a document after receiving ``payment``.

    Args:
        amount: The document's original total.
        balance: What is still owed before this payment.
        payment: The amount received.

    Raises:
        DomainError: If the payment is not positive.
        PaymentExceedsBalanceError: If the payment is more than the balance.
    """
    amount_d = to_decimal(amount, "amount")
    balance_d = to_decimal(balance, "balance")
    payment_d = to_decimal(payment, "payment")

    if payment_d <= 0:
        raise DomainError("payment", "must be greater than zero", payment)
    if payment_d > balance_d:
        raise PaymentExceedsBalanceError(str(balance_d), str(payment_d))

    new_balance = balance_d - payment_d
    if new_balance == 0:
        status = DocumentStatus.PAID
    elif new_balance < amount_d:
        status = DocumentStatus.PARTIAL
    else:
        status = DocumentStatus.PENDING
    return BalanceUpdate(balance=new_balance, status=status)


def _decimal_str(value: Decimal) -> str:
    return format(value, "f")


def line_rows(lines: list[LineItem], parent_column: str, parent_id: str) -> list[dict[str, Any]]:
    rows = []
    for line in lines:
        totals = totals_for(line)
        rows.append(
            {
                parent_column: parent_id,
                "description": line.description,
                "quantity": _decimal_str(line.quantity),
                "unit_price": _decimal_str(line.unit_price),
                "tax_rate": _decimal_str(line.tax_rate),
                "tax_amount": _decimal_str(totals.tax_amount),
                "subtotal": _decimal_str(totals.subtotal),
                "total": _decimal_str(totals.total),
            }
        )
    return rows


class DocumentService:
    """Writes invoices, bills and payments to the document store."""

    def __init__(
        self,
        store: DocumentStoreClient | None,
        company_id: str | None = None,
        *,
        number_factory: Callable[[str], str] = generate_document_number,
    ) -> None:
        self._store = store
        self._company_id = company_id
        self._number_factory = number_factory

    @property
    def store(self) -> DocumentStoreClient:
        if self._store is None:
            raise DocumentStoreNotConfiguredError()
        return self._store

    def _header(self, row: dict[str, Any]) -> dict[str, Any]:
        if self._company_id is not None:
            return {"company_id": self._company_id, **row}
        return row

    def _insert_one(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        created = self.store.insert(table, [self._header(row)])
        if not created or "id" not in created[0]:
            raise DocumentStoreError(
                f"Document store did not return the new {table} row", table=table
            )
        return created[0]

    def _submit(
        self,
        kind: DocumentKind,
        lines: list[LineItem],
        header_table: str,
        lines_table: str,
        parent_column: str,
        header: dict[str, Any],
        number_column: str,
        prefix: str,
    ) -> SubmittedDocument:
        if not lines:
            raise EmptyDocumentError(kind.value)

        totals = compute_aggregate(totals_for(line) for line in lines)
        number = self._number_factory(prefix)

        with structlog.contextvars.bound_contextvars(
            document_kind=kind.value, document_number=number
        ):
            row = {
                **header,
                number_column: number,
                "subtotal": _decimal_str(totals.subtotal),
                "tax_amount": _decimal_str(totals.tax),
                "amount": _decimal_str(totals.total),
                "balance": _decimal_str(totals.total),
                "status": DocumentStatus.PENDING.value,
            }
            created = self._insert_one(header_table, row)
            document_id = str(created["id"])
            try:
                self.store.insert(
                    lines_table, line_rows(lines, parent_column, document_id)
                )
            except DocumentStoreError:
                # Submission is all or nothing; drop the header that has no lines
                logger.warning("document_lines_rejected", document_id=document_id)
                self.store.delete(header_table, {"id": document_id})
                raise

            logger.info(
                "document_submitted",
                document_id=document_id,
                line_count=len(lines),
                total=str(totals.total),
            )

        return SubmittedDocument(
            id=document_id,
            number=number,
            subtotal=totals.subtotal,
            tax=totals.tax,
            total=totals.total,
            line_count=len(lines),
        )

    def submit_invoice(self, draft: InvoiceDraft) -> SubmittedDocument:
        """Create a receivable and its lines."""
        header = {
            "customer_id": draft.customer_id,
            "invoice_date": draft.invoice_date.isoformat(),
            "due_date": draft.due_date.isoformat(),
            "reference": draft.reference,
            "notes": draft.notes,
            "terms_and_conditions": draft.terms_and_conditions,
            "tax_inclusive": draft.tax_inclusive,
        }
        return self._submit(
            DocumentKind.INVOICE,
            draft.lines,
            header_table="accounts_receivable",
            lines_table="invoice_lines",
            parent_column="invoice_id",
            header=header,
            number_column="invoice_number",
            prefix=INVOICE_PREFIX,
        )

    def submit_bill(self, draft: BillDraft) -> SubmittedDocument:
        """Create a payable and its lines."""
        header = {
            "vendor_id": draft.vendor_id,
            "bill_date": draft.bill_date.isoformat(),
            "due_date": draft.due_date.isoformat(),
            "notes": draft.notes,
        }
        return self._submit(
            DocumentKind.BILL,
            draft.lines,
            header_table="accounts_payable",
            lines_table="bill_lines",
            parent_column="bill_id",
            header=header,
            number_column="bill_number",
            prefix=BILL_PREFIX,
        )

    def record_payment(
        self, payment: PaymentDraft, amount: Any, balance: Any
    ) -> BalanceUpdate:
        """Record a customer payment and update the receivable's balance.

        The balance check runs before anything is written.
        """
        update = apply_payment(amount, balance, payment.amount)

        self.store.insert(
            "payments",
            [
                {
                    "accounts_receivable_id": payment.invoice_id,
                    "payment_date": payment.payment_date.isoformat(),
                    "amount": _decimal_str(to_decimal(payment.amount, "payment")),
                    "payment_method": payment.payment_method.value,
                    "reference_number": payment.reference_number,
                    "notes": payment.notes,
                }
            ],
        )
        self.store.update(
            "accounts_receivable",
            {"id": payment.invoice_id},
            {"balance": _decimal_str(update.balance), "status": update.status.value},
        )
        logger.info(
            "payment_recorded",
            invoice_id=payment.invoice_id,
            balance=str(update.balance),
            status=update.status.value,
        )
        return update


__all__ = [
    "BILL_PREFIX",
    "DocumentService",
    "INVOICE_PREFIX",
    "apply_payment",
    "generate_document_number",
    "line_rows",
]
