"""Error taxonomy for the order engine.

Every error raised out of the engine derives from ``OrderEngineError`` and
carries a machine-readable ``code``. The ``retryable`` flag tells the caller
whether repeating the whole operation from scratch can succeed.
"""

from typing import Any


class OrderEngineError(Exception):
    """Base class for all order engine errors."""

    code = "ORDER_ENGINE_ERROR"
    retryable = False

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for API responses and audit records."""
        return {"code": self.code, "message": self.message, "details": self.details}


# Terminal errors: surfaced to the caller verbatim, never retried.


class ValidationError(OrderEngineError):
    """Malformed or missing input, rejected before any side effect."""

    code = "VALIDATION_ERROR"


class InvalidQuantity(ValidationError):
    code = "INVALID_QUANTITY"


class NotFoundError(OrderEngineError):
    """Restaurant, menu item, promo code or order does not exist."""

    code = "NOT_FOUND"


class ConflictError(OrderEngineError):
    """Request is well-formed but conflicts with current state."""

    code = "CONFLICT"


class InvalidTransition(ConflictError):
    code = "INVALID_TRANSITION"

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        message = f"Cannot move order from {from_status} to {to_status}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, from_status=from_status, to_status=to_status)


class OutOfStock(ConflictError):
    code = "OUT_OF_STOCK"


class MenuItemUnavailable(ConflictError):
    code = "MENU_ITEM_UNAVAILABLE"


class InvalidOrExpiredCode(ConflictError):
    code = "INVALID_PROMO_CODE"


class CodeExhausted(ConflictError):
    code = "PROMO_CODE_EXHAUSTED"


class CustomerLimitReached(ConflictError):
    code = "PROMO_CODE_CUSTOMER_LIMIT"


class MinimumNotMet(ConflictError):
    code = "MINIMUM_ORDER_NOT_MET"


# Retryable errors: the lifecycle manager retries these with backoff.


class ConcurrencyError(OrderEngineError):
    """Lost a race on a contended key; safe to retry from scratch."""

    code = "CONCURRENT_MODIFICATION"
    retryable = True


class DependencyError(OrderEngineError):
    """The store failed for infrastructure reasons."""

    code = "DEPENDENCY_FAILURE"
    retryable = True
