"""Error Hierarchy — typed, categorized exceptions for all ClassTrack failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are recoverable; store errors (500-level) are critical
    - Constraint violations caused by the payload are client errors, never StoreError
    - Version-class errors carry is_version_error=True plus the entity they concern
    - to_response() produces the REST envelope; VersionConflictError renders the
      fixed conflict payload instead
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with ClassTrackError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - StoreError is never a subclass of a version error: an unreachable store must not
      be reported as "someone else updated this"
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
    CONFLICT = "conflict"
    STORE = "store"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    entity: str | None = None
    record_id: str | None = None
    expected_version: int | None = None
    debug_info: dict[str, Any] | None = None


class ClassTrackError(Exception):
    """Base exception for all ClassTrack errors."""

    is_version_error: bool = False

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
                    "entity": self.context.entity,
                    "record_id": self.context.record_id,
                    "expected_version": self.context.expected_version,
                },
            }
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class FieldValidationError(ClassTrackError):
    """Update payload is malformed."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class UnknownFieldError(FieldValidationError):
    """Update names a field the record kind does not have."""
    def __init__(self, entity: str, field: str, context: ErrorContext | None = None):
        super().__init__(f"{entity} has no field '{field}'", field, context)
        self.code = "UNKNOWN_FIELD"


class UpdateConflictingOperationsError(FieldValidationError):
    """Same field targeted by more than one update operation."""
    def __init__(self, field: str, context: ErrorContext | None = None):
        super().__init__(
            f"Field '{field}' cannot be both assigned and modified in one update",
            field, context,
        )
        self.code = "CONFLICTING_OPERATIONS"


class ConstraintViolationError(ClassTrackError):
    """Write rejected by a store constraint the payload broke (unique, not-null, type).

    409 when the row clashes with another record, 400 when the value itself is bad.
    """
    def __init__(
        self, message: str, http_status: int = 409, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "CONSTRAINT_VIOLATION", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, http_status,
        )


class InvalidVersionError(ClassTrackError):
    """Caller-supplied version token is missing or malformed. No store access occurred."""

    is_version_error = True

    def __init__(self, raw: Any = None, context: ErrorContext | None = None):
        super().__init__(
            "A valid version is required. Refresh the record and try again.",
            "INVALID_VERSION", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.raw = raw


class ResourceNotFoundError(ClassTrackError):
    """Requested record does not exist."""
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


class VersionConflictError(ClassTrackError):
    """A concurrent writer already advanced the record's version."""

    is_version_error = True

    def __init__(self, entity_name: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.entity = ctx.entity or entity_name
        super().__init__(
            f"{entity_name} was updated by someone else. Refresh and try again.",
            "VERSION_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, ctx, 409,
        )
        self.entity_name = entity_name

    def to_response(self) -> dict:
        """Fixed-shape conflict payload, shown verbatim to the end user."""
        return {"message": self.message, "code": self.code}


# ─── Store Errors (500-level) ───────────────────────────────────

class StoreError(ClassTrackError):
    """Backing store unreachable, timed out, or failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Store {operation} failed: {message}",
            "STORE_ERROR", ErrorCategory.STORE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
