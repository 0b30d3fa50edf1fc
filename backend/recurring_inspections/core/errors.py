"""Error Hierarchy — typed, categorized exceptions for all scheduler failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Rule errors (400-level) are raised at construction, never at generation time
    - to_response() produces the REST envelope the HTTP layer returns
    - to_log_extra() keys match the JSONFormatter extra fields
    - Core raises these errors synchronously; it never logs or retries

Design Decisions:
    - Single hierarchy with SchedulerError base: callers catch one type (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    CONFLICT = "conflict"
    REPOSITORY = "repository"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    schedule_id: str | None = None
    scheduled_date: str | None = None
    user_message: str | None = None


class SchedulerError(Exception):
    """Base exception for all recurring-inspection scheduler errors."""

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
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "schedule_id": self.context.schedule_id,
                    "scheduled_date": self.context.scheduled_date,
                },
            }
        }

    def to_log_extra(self) -> dict:
        """Fields for logger extra=..., picked up by JSONFormatter."""
        extra = {"error_code": self.code}
        if self.context.schedule_id is not None:
            extra["schedule_id"] = self.context.schedule_id
        if self.context.scheduled_date is not None:
            extra["scheduled_date"] = self.context.scheduled_date
        return extra


# ─── Rule Errors (400-level) ────────────────────────────────────

class RuleValidationError(SchedulerError):
    """Recurrence rule input violates an invariant."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class InvalidFrequencyError(SchedulerError):
    """Frequency is not one of the recognized values."""
    def __init__(self, frequency: object, context: ErrorContext | None = None):
        super().__init__(
            f"Unrecognized frequency: {frequency!r}",
            "INVALID_FREQUENCY", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.frequency = frequency


# ─── State Errors (409) ─────────────────────────────────────────

class ScheduleInactiveError(SchedulerError):
    """Occurrence materialized on a schedule that already ran past its end date."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Recurring schedule is inactive; no further occurrences can be generated.",
            "SCHEDULE_INACTIVE", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class RepositoryError(SchedulerError):
    """Persistence operation behind a repository protocol failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Repository {operation} failed: {message}",
            "REPOSITORY_ERROR", ErrorCategory.REPOSITORY,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
