"""Error Hierarchy — typed, categorized exceptions for codec and session failures.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are recoverable; type-system errors (500-level) are bugs
    - Policy violations are NEVER raised: the codec expresses them as omission
    - to_response() never includes the raw field values that were rejected

Design Decisions:
    - Single hierarchy with ChopshopError base: FastAPI global handler catches all
    - status_for() is the error-to-status contract the HTTP layer relies on, so
      non-chopshop exceptions (pydantic ValidationError) map in one place
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone

from pydantic import ValidationError


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    session_id: str | None = None
    record_type: str | None = None
    details: list[dict[str, Any]] | None = None
    debug_info: dict[str, Any] | None = None


class ChopshopError(Exception):
    """Base exception for all chopshop errors."""

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

    def to_response(self, message: str | None = None) -> dict:
        """Convert to standardized REST error response.

        ``message`` replaces the internal message when the caller may not see it.
        """
        body = {
            "error": {
                "code": self.code,
                "message": message if message is not None else self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            }
        }
        if self.context.details:
            body["error"]["details"] = self.context.details
        return body


# ─── Client Errors (400-level) ──────────────────────────────────

class MalformedWireInputError(ChopshopError):
    """Unfiltered decode of the request body failed. Nothing was applied."""
    def __init__(
        self, record_type: str, details: list[dict[str, Any]] | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.record_type = record_type
        ctx.details = details
        super().__init__(
            f"Malformed {record_type} payload",
            "MALFORMED_WIRE_INPUT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )

    @classmethod
    def from_validation_error(
        cls, record_type: str, exc: ValidationError,
    ) -> "MalformedWireInputError":
        details = [
            {
                "field": ".".join(str(loc) for loc in e["loc"]),
                "message": e["msg"],
                "type": e["type"],
            }
            for e in exc.errors(include_url=False, include_input=False)
        ]
        return cls(record_type, details)


class InvalidSessionTokenError(ChopshopError):
    """Session token verified but its principal claim is malformed."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid session token: {reason}",
            "INVALID_SESSION_TOKEN", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 400,
        )


class NotAuthenticatedError(ChopshopError):
    """Operation requires an authenticated principal."""
    def __init__(self, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Session not authenticated: cannot {operation}",
            "NOT_AUTHENTICATED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.ERROR, context, 401,
        )


class AccessDeniedError(ChopshopError):
    """Route guard rejected the caller. Response body is an empty object."""
    def __init__(self, right: str, context: ErrorContext | None = None):
        super().__init__(
            f"Missing right '{right}'",
            "ACCESS_DENIED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 401,
        )
        self.right = right

    def to_response(self, message: str | None = None) -> dict:
        return {}


class XsrfMismatchError(ChopshopError):
    """X-XSRF-Token header missing or not equal to the session id."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "XSRF token missing or mismatched",
            "XSRF_MISMATCH", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 401,
        )

    def to_response(self, message: str | None = None) -> dict:
        return {}


class ResourceNotFoundError(ChopshopError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


# ─── Programming Errors (500-level) ─────────────────────────────

class TypeSystemError(ChopshopError):
    """A record was expected but something else was found. Fatal to the call."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "TYPE_SYSTEM_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )


def status_for(exc: BaseException) -> int:
    """HTTP status the transport layer should answer with for ``exc``."""
    if isinstance(exc, ChopshopError):
        return exc.http_status
    if isinstance(exc, ValidationError):
        return 400
    return 500
