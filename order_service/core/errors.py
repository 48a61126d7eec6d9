"""Error Hierarchy — typed, categorized exceptions for every ordering failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are caller mistakes or rule violations;
      upstream/infrastructure errors (500-level) are failures outside the core
    - to_response() produces the REST envelope used by the global handler
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with OrderServiceError base: one FastAPI handler catches all
    - ErrorContext as dataclass: carries ids for logs without coupling to logging
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Identifiers attached to an error for logs and the response envelope."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    order_id: str | None = None
    correlation_id: str | None = None
    debug_info: dict[str, Any] | None = None


class OrderServiceError(Exception):
    """Base exception for all order service errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "order_id": self.context.order_id,
                    "correlation_id": self.context.correlation_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class NoItemsError(OrderServiceError):
    """Order creation requested with an empty item list."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Items required", "NO_ITEMS", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class ProductNotFoundError(OrderServiceError):
    """A requested product id has no snapshot in the catalog response."""
    def __init__(self, product_id: int, context: ErrorContext | None = None):
        super().__init__(
            f"Product not found: {product_id}",
            "PRODUCT_NOT_FOUND", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.product_id = product_id


class InvalidPriceError(OrderServiceError):
    """Catalog snapshot price is not a finite, non-negative number."""
    def __init__(self, product_id: int, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid price for product: {product_id}",
            "INVALID_PRICE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.product_id = product_id


class InvalidAmountError(OrderServiceError):
    """Quantity, shipping cost or discount outside its allowed range."""
    def __init__(self, field: str, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid {field}: {reason}",
            "INVALID_AMOUNT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class InvalidTransitionError(OrderServiceError):
    """Requested status change is not in the transition table."""
    def __init__(
        self, from_status: Enum, to_status: Enum, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Cannot change status from {from_status.value} to {to_status.value}",
            "INVALID_TRANSITION", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.from_status = from_status
        self.to_status = to_status


class ResourceNotFoundError(OrderServiceError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class StockConflictError(OrderServiceError):
    """Catalog rejected the stock reservation."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "STOCK_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class DuplicateOrderNumberError(OrderServiceError):
    """Generated order number collided with an existing order."""
    def __init__(self, order_number: str, context: ErrorContext | None = None):
        super().__init__(
            f"Order number {order_number} already exists",
            "DUPLICATE_ORDER_NUMBER", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )
        self.order_number = order_number


# ─── Upstream / Infrastructure Errors (500-level) ───────────────

class UpstreamUnavailableError(OrderServiceError):
    """Catalog service call failed (network error or 5xx)."""
    def __init__(
        self, message: str, operation: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Catalog {operation} failed: {message}",
            "UPSTREAM_UNAVAILABLE", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 502,
        )
        self.operation = operation


class DatabaseError(OrderServiceError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
