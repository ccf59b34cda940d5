"""
Authentication module exceptions.

These exceptions are raised by the auth module and translated by the API
error handlers into ``{success: false, message}`` responses. Messages are
safe to show to clients; they never reveal whether an email is registered.
"""

from shared.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)


class InvalidCredentialsError(AuthenticationError):
    """Raised for an unknown email or a wrong password.

    Both cases share one message so callers cannot tell them apart.
    """

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class InvalidTokenError(AuthenticationError):
    """Raised when a JWT is invalid, expired, or signed for another purpose."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message, code="INVALID_TOKEN")


class InvalidCodeError(AuthenticationError):
    """Raised when a TOTP code does not verify."""

    def __init__(self, message: str = "Invalid 2FA token"):
        super().__init__(message, code="INVALID_CODE")


class MissingTokenError(UnauthorizedError):
    """Raised when no bearer token is provided."""

    def __init__(self, message: str = "Missing authorization header"):
        super().__init__(message)


class EmailAlreadyRegisteredError(ConflictError):
    """Raised when signing up with an email that already has an account."""

    def __init__(self, email: str):
        super().__init__(
            "User with this email already exists",
            code="EMAIL_ALREADY_REGISTERED",
            details={"email": email},
        )


class UserNotFoundError(NotFoundError):
    """Raised when the referenced user doesn't exist in the credential store."""

    def __init__(self, user_id: str):
        super().__init__(
            "User not found",
            code="USER_NOT_FOUND",
            details={"user_id": user_id},
        )


class TwoFactorNotSetupError(ValidationError):
    """Raised when verifying 2FA before a secret has been generated."""

    def __init__(self, message: str = "2FA not setup"):
        super().__init__(message, code="TWO_FACTOR_NOT_SETUP")


class TwoFactorNotEnabledError(ValidationError):
    """Raised when completing a 2FA login for a user without 2FA enabled."""

    def __init__(self, message: str = "2FA not enabled for this user"):
        super().__init__(message, code="TWO_FACTOR_NOT_ENABLED")


class TwoFactorAlreadyEnabledError(ValidationError):
    """Raised when starting 2FA setup while 2FA is already enabled."""

    def __init__(self, message: str = "2FA is already enabled"):
        super().__init__(message, code="TWO_FACTOR_ALREADY_ENABLED")
