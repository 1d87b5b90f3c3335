from fleet_finance.domain.financing import AmortizationResult, FinancingQuote
from fleet_finance.domain.line_items import DocumentTotals, LineItem, LineTotals
from fleet_finance.domain.value_objects import Money
from fleet_finance.exceptions import DomainError, InvalidInputError
from fleet_finance.services.amortization import compute_amortization
from fleet_finance.services.line_items import compute_aggregate, compute_line

__all__ = [
    "AmortizationResult",
    "DocumentTotals",
    "DomainError",
    "FinancingQuote",
    "InvalidInputError",
    "LineItem",
    "LineTotals",
    "Money",
    "compute_aggregate",
    "compute_amortization",
    "compute_line",
]

__version__ = "0.1.0"
