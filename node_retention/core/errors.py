"""Error Hierarchy — typed, categorized exceptions for retention failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - FactFetchError represents every recoverable fetch failure (OSError and
      cancelled fetches are wrapped into one); it never leads to a termination
    - to_log_fields() produces a flat dict usable as logging `extra`

Design Decisions:
    - Single hierarchy with RetentionError base: callers can catch one type
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    WARNING = "warning"
    ERROR = "error"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    EXTERNAL_API = "external_api"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    node_name: str | None = None
    field_name: str | None = None


class RetentionError(Exception):
    """Base exception for all retention errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def to_log_fields(self) -> dict:
        """Flatten into logging `extra` fields (no None values)."""
        fields = {
            "error_code": self.code,
            "error_category": self.category.value,
            "error_severity": self.severity.value,
            "node_name": self.context.node_name,
            "field_name": self.context.field_name,
        }
        return {k: v for k, v in fields.items() if v is not None}


# ─── Recoverable ─────────────────────────────────────────────────

class FactFetchError(RetentionError):
    """Timing facts could not be fetched (cloud API error, interruption).

    Raised by NodeHandle implementations; the evaluator treats it as
    "no action this tick".
    """
    def __init__(
        self, message: str, reason: str = "api_error",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Fact fetch failed ({reason}): {message}",
            "FACT_FETCH_FAILED", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.WARNING, context,
        )
        self.reason = reason


# ─── Programming errors ──────────────────────────────────────────

class InvalidPolicyError(RetentionError):
    """RetentionPolicy built directly with an out-of-range value."""
    def __init__(self, field_name: str, value: int):
        super().__init__(
            f"{field_name} must be >= 0, got {value}",
            "INVALID_POLICY", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ErrorContext(field_name=field_name),
        )
        self.value = value
