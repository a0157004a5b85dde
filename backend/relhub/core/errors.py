"""Error Hierarchy — typed, categorized exceptions for all relhub failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with CrmError base: the FastAPI global handler catches all
    - ErrorContext as dataclass: carries record ids without coupling to logging
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
    SERIALIZATION = "serialization"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logs and responses."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    contact_id: str | None = None
    task_id: str | None = None
    field: str | None = None
    debug_info: dict[str, Any] | None = None


class CrmError(Exception):
    """Base exception for all relhub errors."""

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
                    "contact_id": self.context.contact_id,
                    "task_id": self.context.task_id,
                    "field": self.context.field,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationError(CrmError):
    """A required field is missing or a value is outside its domain."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.field = field
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.field = field


class NotFoundError(CrmError):
    """Referenced contact or task does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


# ─── Infrastructure Errors (500-level) ──────────────────────────

class SnapshotError(CrmError):
    """Persisted payload does not decode into a valid CrmState."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid state snapshot: {message}",
            "SNAPSHOT_DECODE_ERROR", ErrorCategory.SERIALIZATION,
            ErrorSeverity.WARNING, context, 500,
        )


class DatabaseError(CrmError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
