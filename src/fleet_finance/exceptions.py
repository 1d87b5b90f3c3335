"""Exception hierarchy for Fleet Finance.

All application exceptions inherit from FleetFinanceError. Calculator
failures come in two kinds: InvalidInputError for values that are not
numbers at all, and DomainError for numbers outside the allowed range.
Neither is retryable; the caller shows the message and lets the user fix
the value.
"""

from typing import Any


class FleetFinanceError(Exception):
    """Base exception for all Fleet Finance errors.

    Includes optional error_code for API responses and extra context.
    """

    error_code: str = "FLEET_FINANCE_ERROR"
    status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        if status_code:
            self.status_code = status_code
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "context": self.context,
        }


# =============================================================================
# Calculation Errors
# =============================================================================


class CalculationError(FleetFinanceError):
    """Base exception for calculator input errors."""

    error_code = "CALCULATION_ERROR"
    status_code = 422


class InvalidInputError(CalculationError):
    """Raised when a value is not a usable number."""

    error_code = "INVALID_INPUT"

    def __init__(self, field: str, value: Any, reason: str = "not a number") -> None:
        super().__init__(
            f"Invalid {field} {value!r}: {reason}",
            context={"field": field, "value": str(value), "reason": reason},
        )
        self.field = field


class DomainError(CalculationError):
    """Raised when a number is valid but outside the allowed range."""

    error_code = "DOMAIN_ERROR"

    def __init__(self, field: str, reason: str, value: Any = None) -> None:
        context: dict[str, Any] = {"field": field, "reason": reason}
        if value is not None:
            context["value"] = str(value)
        super().__init__(f"Invalid {field}: {reason}", context=context)
        self.field = field


# =============================================================================
# Document Errors
# =============================================================================


class DocumentError(FleetFinanceError):
    """Base exception for invoice and bill errors."""

    error_code = "DOCUMENT_ERROR"
    status_code = 400


class EmptyDocumentError(DocumentError):
    """Raised when a document is submitted without line items."""

    error_code = "EMPTY_DOCUMENT"

    def __init__(self, kind: str) -> None:
        super().__init__(
            f"Cannot submit {kind} without line items",
            context={"kind": kind},
        )


class PaymentExceedsBalanceError(DocumentError):
    """Raised when a payment is larger than the remaining balance."""

    error_code = "PAYMENT_EXCEEDS_BALANCE"

    def __init__(self, balance: str, payment: str) -> None:
        super().__init__(
            "Payment amount cannot exceed remaining balance",
            context={"balance": balance, "payment": payment},
        )


# =============================================================================
# Document Store Errors
# =============================================================================


class DocumentStoreError(FleetFinanceError):
    """Raised when the hosted document store rejects or fails a request."""

    error_code = "DOCUMENT_STORE_ERROR"
    status_code = 502

    def __init__(
        self, message: str, *, table: str | None = None, store_status: int | None = None
    ) -> None:
        context: dict[str, Any] = {}
        if table is not None:
            context["table"] = table
        if store_status is not None:
            context["store_status"] = store_status
        super().__init__(message, context=context)
        self.store_status = store_status


class DocumentStoreNotConfiguredError(DocumentStoreError):
    """Raised when submission is attempted without a configured store."""

    error_code = "DOCUMENT_STORE_NOT_CONFIGURED"
    status_code = 503

    def __init__(self) -> None:
        super().__init__("Document store is not configured (set FLEET_DOCUMENT_STORE_URL)")
