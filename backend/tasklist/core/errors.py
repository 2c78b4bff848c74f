"""Error Hierarchy — typed, categorized exceptions for every task-list failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - http_status is reused as the envelope's top-level "status" field
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the {status, message, data, error} envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with TaskListError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - DuplicateKeyError keeps 409 so it never collides with ValidationError (422)
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
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    resource_id: str | None = None
    debug_info: dict[str, Any] | None = None


class TaskListError(Exception):
    """Base exception for all task-list errors."""

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
        """Convert to the standard response envelope."""
        return {
            "status": self.http_status,
            "message": self.message,
            "data": None,
            "error": {
                "status": self.http_status,
                "message": self.message,
                "code": self.code,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            },
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class BadRequestError(TaskListError):
    """Malformed input or business-rule violation (password mismatch, bad login)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "BAD_REQUEST", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )


class InvalidIdError(TaskListError):
    """Identifier is not a well-formed id."""
    def __init__(self, message: str = "Invalid ID format", context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_ID", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class UnauthorizedError(TaskListError):
    """Authenticated, but not the owner of the resource."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 401,
        )


class InvalidTokenError(TaskListError):
    """Session token missing, badly signed or expired."""
    def __init__(self, message: str = "Invalid token", context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_TOKEN", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ForbiddenError(TaskListError):
    """Requester lacks the role required for the operation."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


class NotFoundError(TaskListError):
    """Requested resource does not exist."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class DuplicateKeyError(TaskListError):
    """Uniqueness constraint violated."""
    def __init__(self, message: str = "Duplicate key error", context: ErrorContext | None = None):
        super().__init__(
            message, "DUPLICATE_KEY", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class ValidationError(TaskListError):
    """Schema or constraint validation failed."""
    def __init__(
        self, message: str, details: list[dict] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 422,
        )
        self.details = details or []

    def to_response(self) -> dict:
        response = super().to_response()
        if self.details:
            response["error"]["details"] = self.details
        return response


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(TaskListError):
    """Uncategorized persistence failure."""
    def __init__(
        self, message: str = "Database error", operation: str = "unknown",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class InvalidEnvError(TaskListError):
    """Required configuration is missing; raised at startup."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_ENV", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context, 500,
        )
