"""
Base exception classes for the TaskFlow backend.

Each module should define its own exceptions that inherit from these bases.
Every base carries the HTTP status it maps to, so the API error handlers can
translate any of them into the standard ``{success: false, message}`` envelope.
"""

from typing import Optional, Any


class TaskFlowError(Exception):
    """
    Base exception for all TaskFlow errors.

    All custom exceptions should inherit from this class.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for logging and debugging."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(TaskFlowError):
    """Input validation failed."""

    status_code = 400


class ConflictError(TaskFlowError):
    """The resource already exists."""

    status_code = 409


class AuthenticationError(TaskFlowError):
    """Authentication failed (invalid or missing credentials)."""

    status_code = 401


class UnauthorizedError(AuthenticationError):
    """No authentication context was supplied."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, code="UNAUTHORIZED")


class NotFoundError(TaskFlowError):
    """Resource not found."""

    status_code = 404


class InternalError(TaskFlowError):
    """Unexpected failure. The message is safe to show to clients."""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message, code="INTERNAL_ERROR")
