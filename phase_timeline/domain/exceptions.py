"""
Domain exceptions for the phase timeline service.

The timeline itself never raises; these cover the layers that look timelines
up and validate caller input on their behalf.
"""

from typing import Any


class TimelineException(Exception):
    """
    Base exception for all phase timeline errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable error code for API responses
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(TimelineException):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class TimelineRunNotFoundError(TimelineException):
    """Raised when a workflow run id does not match a live timeline."""

    def __init__(self, run_id: str):
        super().__init__(
            f"Timeline run not found: {run_id}",
            "TIMELINE_RUN_NOT_FOUND",
            {"run_id": run_id},
        )
