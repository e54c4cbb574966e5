"""Error types and classification for engine calls.

The engine raises only for caller programming errors. Hosts catch these and
translate them with `classify_error_with_response` into quiet no-ops or logged
warnings; users never see a raw failure for ordinary gaps in usage.
"""

from enum import Enum

from pydantic import BaseModel


class ErrorCategory(Enum):
    """Categories of errors the engine can raise."""

    INVALID_STATE_TRANSITION = "invalid_state_transition"
    FUTURE_ACTIVITY_DATE = "future_activity_date"
    INVALID_ARGUMENT = "invalid_argument"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCode:
    """Error codes for specific error conditions."""

    # State errors
    ERR_INVALID_STATE_TRANSITION = "ERR_INVALID_STATE_TRANSITION"
    ERR_FUTURE_ACTIVITY_DATE = "ERR_FUTURE_ACTIVITY_DATE"

    # Argument errors
    ERR_INVALID_ARGUMENT = "ERR_INVALID_ARGUMENT"

    # Generic errors
    ERR_UNKNOWN = "ERR_UNKNOWN"


class MomentumError(Exception):
    """Base class for engine errors."""

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(self, message: str, *, category: ErrorCategory | None = None) -> None:
        super().__init__(message)
        if category is not None:
            self.category = category


class InvalidStateError(MomentumError, ValueError):
    """Raised when a record is not in a state that allows the requested operation."""

    category = ErrorCategory.INVALID_STATE_TRANSITION


class InvalidArgumentError(MomentumError, ValueError):
    """Raised for out-of-range arguments such as energy levels outside 1-5."""

    category = ErrorCategory.INVALID_ARGUMENT


class ErrorResponse(BaseModel):
    """Structured error response with user-friendly messaging."""

    code: str
    message: str
    suggestion: str
    severity: ErrorSeverity


def ensure_energy_level(value: int | None, *, field: str) -> None:
    """Raise InvalidArgumentError unless value is None or within 1-5."""
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 5:
        msg = f"Invalid {field}: {value!r} is not an energy level between 1 and 5"
        raise InvalidArgumentError(msg)


def ensure_non_negative(value: int, *, field: str) -> None:
    """Raise InvalidArgumentError if value is negative."""
    if value < 0:
        msg = f"Invalid {field}: {value} must not be negative"
        raise InvalidArgumentError(msg)


def classify_error_with_response(exception: Exception) -> ErrorResponse:
    """Classify an error and return a structured, shame-free response.

    Args:
        exception: The exception raised by an engine call

    Returns:
        ErrorResponse with code, message, suggestion, and severity
    """
    if isinstance(exception, MomentumError):
        if exception.category == ErrorCategory.FUTURE_ACTIVITY_DATE:
            return ErrorResponse(
                code=ErrorCode.ERR_FUTURE_ACTIVITY_DATE,
                message="Streak dates look out of sync.",
                suggestion="Check the device clock; your progress is safe.",
                severity=ErrorSeverity.MEDIUM,
            )

        if exception.category == ErrorCategory.INVALID_STATE_TRANSITION:
            return ErrorResponse(
                code=ErrorCode.ERR_INVALID_STATE_TRANSITION,
                message="That task was already handled.",
                suggestion="Refresh your task list and pick the next one.",
                severity=ErrorSeverity.LOW,
            )

        if exception.category == ErrorCategory.INVALID_ARGUMENT:
            return ErrorResponse(
                code=ErrorCode.ERR_INVALID_ARGUMENT,
                message="Some of those details didn't look right.",
                suggestion="Energy levels go from 1 to 5. Try again with a value in that range.",
                severity=ErrorSeverity.LOW,
            )

    return ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="Something unexpected happened.",
        suggestion="Nothing you did is lost. Try again in a moment.",
        severity=ErrorSeverity.MEDIUM,
    )
