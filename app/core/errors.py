"""Error Hierarchy — typed, categorized exceptions for all TechAlpha Hub failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Validation errors are 400-level; persistence and downstream failures are 500
    - to_response() produces the REST envelope: {"error": <message>, "code": ..., ...}
    - Infrastructure errors carry a generic user-facing message; detail stays in debug_info

Design Decisions:
    - Single hierarchy with TechAlphaError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone

GENERIC_SERVER_MESSAGE = "Server error"


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    DATABASE = "database"
    EMAIL = "email"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    submission_type: str | None = None
    record_id: str | None = None
    tx_ref: str | None = None
    debug_info: dict[str, Any] | None = None


class TechAlphaError(Exception):
    """Base exception for all TechAlpha Hub errors."""

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
        """Convert to standardized REST error response (debug_info excluded).

        `error` stays a plain message string: the site's forms display it as-is.
        """
        return {
            "error": self.message,
            "code": self.code,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
            "context": {
                "submission_type": self.context.submission_type,
                "record_id": self.context.record_id,
                "tx_ref": self.context.tx_ref,
            },
        }


# ─── Validation Errors (400-level) ──────────────────────────────

class MissingFieldsError(TechAlphaError):
    """One or more required fields were absent or blank."""
    def __init__(self, fields: list[str], context: ErrorContext | None = None):
        super().__init__(
            "All fields are required", "MISSING_FIELDS",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, context, 400,
        )
        self.fields = fields


# ─── Infrastructure Errors (500-level) ──────────────────────────

def _with_debug(context: ErrorContext | None, **info: Any) -> ErrorContext:
    ctx = context or ErrorContext()
    ctx.debug_info = {**(ctx.debug_info or {}), **info}
    return ctx


class DatabaseError(TechAlphaError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            GENERIC_SERVER_MESSAGE, "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL,
            _with_debug(context, detail=message, operation=operation), 500,
        )
        self.operation = operation
        self.detail = message


class EmailDeliveryError(TechAlphaError):
    """SMTP delivery failed."""
    def __init__(self, message: str, recipient: str, context: ErrorContext | None = None):
        super().__init__(
            GENERIC_SERVER_MESSAGE, "EMAIL_DELIVERY_ERROR", ErrorCategory.EMAIL,
            ErrorSeverity.CRITICAL,
            _with_debug(context, detail=message, recipient=recipient), 500,
        )
        self.recipient = recipient
        self.detail = message


class PaymentGatewayError(TechAlphaError):
    """Payment gateway call failed or answered with an error status."""
    def __init__(
        self,
        message: str,
        gateway_status: int | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            GENERIC_SERVER_MESSAGE, "PAYMENT_GATEWAY_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL,
            _with_debug(context, detail=message, gateway_status=gateway_status), 500,
        )
        self.gateway_status = gateway_status
        self.detail = message
