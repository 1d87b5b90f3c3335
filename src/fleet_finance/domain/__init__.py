from fleet_finance.domain.documents import (
    BalanceUpdate,
    BillDraft,
    InvoiceDraft,
    PaymentDraft,
    SubmittedDocument,
)
from fleet_finance.domain.financing import (
    MAX_TERM_MONTHS,
    AmortizationResult,
    Debt,
    DebtScheduleSummary,
    FinancingQuote,
    ScheduleRow,
)
from fleet_finance.domain.line_items import DocumentTotals, LineItem, LineTotals
from fleet_finance.domain.value_objects import (
    Currency,
    DocumentKind,
    DocumentStatus,
    Money,
    PaymentMethod,
)

__all__ = [
    "MAX_TERM_MONTHS",
    "AmortizationResult",
    "BalanceUpdate",
    "BillDraft",
    "Currency",
    "Debt",
    "DebtScheduleSummary",
    "DocumentKind",
    "DocumentStatus",
    "DocumentTotals",
    "FinancingQuote",
    "InvoiceDraft",
    "LineItem",
    "LineTotals",
    "Money",
    "PaymentDraft",
    "PaymentMethod",
    "ScheduleRow",
    "SubmittedDocument",
]
