"""Custom exceptions for reelforge.

Every error carries a machine-readable code (see
``reelforge.constants.error_codes``) so that a host application can turn it
into a structured response without parsing messages.
"""

from typing import Any

from reelforge.constants.error_codes import get_error_spec
from reelforge.schemas.errors import ErrorInfo, ErrorLocation


class ReelforgeError(Exception):
    """Base exception for all reelforge errors."""

    code: str = "INTERNAL_ERROR"
    message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        location: ErrorLocation | None = None,
        suggested_fix: str | None = None,
    ):
        self.message = message or self.__class__.message
        if code:
            self.code = code
        self.location = location
        self.suggested_fix = suggested_fix
        super().__init__(self.message)

    def to_error_info(self) -> ErrorInfo:
        """Convert exception to ErrorInfo."""
        spec = get_error_spec(self.code)

        # Explicit override from exception wins over the error code entry
        suggested_fix = self.suggested_fix or spec.get("suggested_fix")

        return ErrorInfo(
            code=self.code,
            message=self.message,
            location=self.location,
            retryable=spec.get("retryable", False),
            suggested_fix=suggested_fix,
        )


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(ReelforgeError):
    """Base class for project validation errors."""

    code = "VALIDATION_ERROR"
    message = "Invalid project"


class InvalidTimeRangeError(ValidationError):
    """A timed element ends at or before its start."""

    code = "INVALID_TIME_RANGE"
    message = "Invalid time range"

    def __init__(
        self,
        message: str | None = None,
        *,
        start: float | None = None,
        end: float | None = None,
        field: str | None = None,
    ):
        msg = message or self.message
        if start is not None and end is not None:
            msg = f"Invalid time range: {start}s to {end}s"
            if field:
                msg += f" ({field})"
        self.start = start
        self.end = end
        location = ErrorLocation(field=field) if field else None
        super().__init__(msg, location=location)


class InvalidFieldValueError(ValidationError):
    """Field value is invalid."""

    code = "INVALID_FIELD_VALUE"
    message = "Invalid field value"

    def __init__(
        self, message: str | None = None, *, field: str | None = None, value: Any = None
    ):
        msg = message or self.message
        if field and value is not None:
            msg = f"Invalid value for field '{field}': {value}"
        location = ErrorLocation(field=field) if field else None
        super().__init__(msg, location=location)


class ProjectLoadError(ReelforgeError):
    """Project document could not be read or parsed."""

    code = "PROJECT_LOAD_FAILED"
    message = "Failed to load project"

    def __init__(self, message: str | None = None, *, source: str | None = None):
        msg = message or self.message
        if source:
            msg = f"{msg}: {source}"
        super().__init__(msg)
