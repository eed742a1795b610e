"""Error Hierarchy: typed, categorized exceptions for all OrderDesk failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Input errors (400-level) are recoverable; storage errors (500-level) are critical
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with OrderDeskError base: one global handler catches all
    - Absence is not an error inside the store (None / False results);
      ResourceNotFoundError is raised only at the HTTP boundary
    - OSError is never wrapped by the store: StorageError exists only so the
      HTTP layer can render filesystem failures in the common envelope
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
    RESOURCE_NOT_FOUND = "resource_not_found"
    SCHEMA = "schema"
    STORAGE = "storage"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Extra context attached to an error for logs and responses."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    order_id: int | None = None
    path: str | None = None
    debug_info: dict[str, Any] | None = None


class OrderDeskError(Exception):
    """Base exception for all OrderDesk errors."""

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
                },
            }
        }


# ─── Input Errors (400-level) ───────────────────────────────────

class OrderValidationError(OrderDeskError):
    """Request payload failed validation."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class ResourceNotFoundError(OrderDeskError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


# ─── Storage Errors (500-level) ─────────────────────────────────

class SchemaError(OrderDeskError):
    """Orders file header does not match the expected column layout."""
    def __init__(self, found: str, expected: str, context: ErrorContext | None = None):
        super().__init__(
            f"Unexpected CSV header: expected '{expected}', found '{found}'",
            "SCHEMA_MISMATCH", ErrorCategory.SCHEMA,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.found = found
        self.expected = expected


class StorageError(OrderDeskError):
    """Filesystem access to the orders file failed."""
    def __init__(self, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Order storage {operation} failed",
            "STORAGE_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation
