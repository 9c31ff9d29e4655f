"""Error Hierarchy — typed, categorized exceptions for all Assignflow failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope
    - Not-found and unauthorized share one wording so existence never leaks to a non-owner

Design Decisions:
    - Single hierarchy with AssignflowError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - http_status carried on the error, not chosen by the orchestrator
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
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    SIDE_EFFECT = "side_effect"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    assignment_id: str | None = None
    booking_id: str | None = None
    operation: str | None = None
    side_effect: str | None = None
    debug_info: dict[str, Any] | None = None


class AssignflowError(Exception):
    """Base exception for all Assignflow errors."""

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
                    "assignment_id": self.context.assignment_id,
                    "operation": self.context.operation,
                },
            }
        }

    def log_extra(self) -> dict:
        """Structured logging fields for this error."""
        return {
            "error_code": self.code,
            "assignment_id": self.context.assignment_id,
            "booking_id": self.context.booking_id,
            "operation": self.context.operation,
            "side_effect": self.context.side_effect,
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

_NOT_ACCESSIBLE = "{resource_type} '{resource_id}' not found or not accessible"


class ResourceNotFoundError(AssignflowError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            _NOT_ACCESSIBLE.format(
                resource_type=resource_type, resource_id=resource_id,
            ),
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type


class UnauthorizedError(AssignflowError):
    """Caller is not the worker bound to the assignment."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            _NOT_ACCESSIBLE.format(
                resource_type=resource_type, resource_id=resource_id,
            ),
            "UNAUTHORIZED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


class InvalidStateTransitionError(AssignflowError):
    """Operation not permitted from the assignment's current status."""
    def __init__(
        self, operation: str, current_status: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Assignment cannot be {_past_tense(operation)} in current status "
            f"'{current_status}'",
            "INVALID_STATE_TRANSITION", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 409,
        )
        self.operation = operation
        self.current_status = current_status


class InvalidPaginationError(AssignflowError):
    """page and limit must both be at least 1."""
    def __init__(self, page: int, limit: int, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid pagination: page={page}, limit={limit} (both must be >= 1)",
            "INVALID_PAGINATION", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.page = page
        self.limit = limit


class BookingFieldNotWritableError(AssignflowError):
    """Attempted to write a booking field owned by another subsystem."""
    def __init__(self, fields: list[str], context: ErrorContext | None = None):
        super().__init__(
            f"Booking fields not writable by assignment lifecycle: {', '.join(fields)}",
            "BOOKING_FIELD_NOT_WRITABLE", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.fields = fields


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(AssignflowError):
    """Database operation failed. The enclosing transaction was rolled back."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class SideEffectError(AssignflowError):
    """A post-commit side effect failed. Logged only, never raised to callers."""
    def __init__(self, side_effect: str, message: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.side_effect = side_effect
        super().__init__(
            f"Side effect '{side_effect}' failed: {message}",
            "SIDE_EFFECT_FAILED", ErrorCategory.SIDE_EFFECT,
            ErrorSeverity.WARNING, ctx, 500,
        )


class ConfigurationError(AssignflowError):
    """A required collaborator was not wired at construction time."""
    def __init__(self, missing: list[str]):
        super().__init__(
            f"Missing required collaborators: {', '.join(missing)}",
            "CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, None, 500,
        )
        self.missing = missing


class MissingRelationError(AssignflowError):
    """A fully-loaded assignment is missing a relation the projection requires."""
    def __init__(self, relation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Assignment projection requires loaded relation '{relation}'",
            "MISSING_RELATION", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.relation = relation


_PAST_TENSE = {
    "accept": "accepted",
    "reject": "rejected",
    "start": "started",
    "complete": "completed",
}


def _past_tense(operation: str) -> str:
    return _PAST_TENSE.get(operation, operation)
