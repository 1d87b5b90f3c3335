from fleet_finance.services.amortization import (
    build_schedule,
    compute_amortization,
    quote_financing,
    summarize_debts,
    summarize_debts_by_currency,
)
from fleet_finance.services.documents import (
    DocumentService,
    apply_payment,
    generate_document_number,
)
from fleet_finance.services.line_items import (
    LineItemForm,
    compute_aggregate,
    compute_document_totals,
    compute_line,
)
from fleet_finance.services.validation import (
    ParseResult,
    parse_decimal,
    parse_financing,
    parse_line_item,
    parse_quantity,
)

__all__ = [
    "DocumentService",
    "LineItemForm",
    "ParseResult",
    "apply_payment",
    "build_schedule",
    "compute_aggregate",
    "compute_amortization",
    "compute_document_totals",
    "compute_line",
    "generate_document_number",
    "parse_decimal",
    "parse_financing",
    "parse_line_item",
    "parse_quantity",
    "quote_financing",
    "summarize_debts",
    "summarize_debts_by_currency",
]
