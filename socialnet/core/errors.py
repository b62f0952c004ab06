"""Error Hierarchy — typed, categorized exceptions for socialnet failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
      and an HTTP status
    - Client errors (4xx) are recoverable; infrastructure errors (5xx) are critical
    - to_response() produces the REST envelope; no internal details in `message` shown to users
    - Login failures are never raised: the session protocol answers with a plain False
    - Absence is not an error inside the services (None); ResourceNotFoundError is for
      the HTTP edge and for an entity vanishing between fetch and change

Design Decisions:
    - Subclasses declare code/category/severity/status as class attributes; only the
      message and the context vary per instance
    - ErrorContext as dataclass: rich observability without coupling to logging
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Who/what an error concerns, for logs and the response envelope."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    entity_type: str | None = None
    entity_key: str | None = None
    user_id: int | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class SocialError(Exception):
    """Base of every socialnet error."""

    code = "INTERNAL_ERROR"
    category = ErrorCategory.INTERNAL
    severity = ErrorSeverity.ERROR
    http_status = 500

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()

    def to_response(self) -> dict:
        ctx = self.context
        return {
            "error": {
                "code": self.code,
                "message": ctx.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": ctx.timestamp.isoformat(),
                "context": {
                    "entity_type": ctx.entity_type,
                    "entity_key": ctx.entity_key,
                },
            },
        }


def _context_for(
    context: ErrorContext | None, entity_type: str, entity_key: str | None = None,
) -> ErrorContext:
    ctx = context or ErrorContext()
    ctx.entity_type = ctx.entity_type or entity_type
    ctx.entity_key = ctx.entity_key or entity_key
    return ctx


# ─── Client errors (4xx) ────────────────────────────────────────

class ContentValidationError(SocialError):
    """Entity content breaks a model rule (e.g. a post with neither media nor text)."""
    code = "VALIDATION_ERROR"
    category = ErrorCategory.VALIDATION
    http_status = 400

    def __init__(
        self, message: str, field: str | None = None, context: ErrorContext | None = None,
    ):
        super().__init__(message, context)
        self.field = field


class NotAuthenticatedError(SocialError):
    """No bearer token of a validated session came with the request."""
    code = "NOT_AUTHENTICATED"
    category = ErrorCategory.AUTHENTICATION
    severity = ErrorSeverity.WARNING
    http_status = 401

    def __init__(self, context: ErrorContext | None = None):
        super().__init__("Authentication required", context)


class ForbiddenError(SocialError):
    code = "FORBIDDEN"
    category = ErrorCategory.AUTHORIZATION
    severity = ErrorSeverity.WARNING
    http_status = 403


class ResourceNotFoundError(SocialError):
    code = "RESOURCE_NOT_FOUND"
    category = ErrorCategory.RESOURCE_NOT_FOUND
    http_status = 404

    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            _context_for(context, resource_type, resource_id),
        )


class AttachConflictError(SocialError):
    """An unpersisted reference carries the key of a stored row."""
    code = "ATTACH_CONFLICT"
    category = ErrorCategory.CONFLICT
    http_status = 409

    def __init__(
        self, entity_type: str, entity_key: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Unpersisted {entity_type} carries key '{entity_key}' of an existing row",
            _context_for(context, entity_type, entity_key),
        )


# ─── Infrastructure errors (5xx) ────────────────────────────────

class KeyRegistrationError(SocialError):
    """An entity type cannot be registered: it must expose exactly one key field."""
    code = "KEY_REGISTRATION_ERROR"
    category = ErrorCategory.CONFIGURATION
    severity = ErrorSeverity.CRITICAL

    def __init__(self, entity_type: str, reason: str):
        super().__init__(
            f"Cannot register {entity_type}: {reason}",
            ErrorContext(entity_type=entity_type),
        )


class DatabaseError(SocialError):
    code = "DATABASE_ERROR"
    category = ErrorCategory.DATABASE
    severity = ErrorSeverity.CRITICAL
    http_status = 503

    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(f"Database {operation} failed: {message}", context)
        self.operation = operation
