"""
Authentication module.

Handles signup, password login, TOTP two-factor authentication and
access/refresh tokens.

Public API:
- IAuthService / IUserRepository: Interfaces for auth operations and storage
- AuthService: The session protocol implementation
- PasswordHasher, TOTPEngine, TokenService: Building blocks
- UserRecord, PublicUser, TwoFactorState: User models
- Auth exceptions: InvalidCredentialsError, InvalidTokenError, etc.
"""

from .interfaces import IAuthService, IUserRepository
from .models import (
    PublicUser,
    UserRecord,
    TokenClaims,
    TwoFactorState,
    TwoFactorDisabled,
    TwoFactorPending,
    TwoFactorEnabled,
    SessionIssued,
    TwoFactorRequired,
    LoginResult,
)
from .exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    InvalidCodeError,
    MissingTokenError,
    EmailAlreadyRegisteredError,
    UserNotFoundError,
    TwoFactorNotSetupError,
    TwoFactorNotEnabledError,
    TwoFactorAlreadyEnabledError,
)
from .passwords import PasswordHasher
from .totp import TOTPEngine
from .tokens import TokenService
from .service import AuthService

__all__ = [
    # Interfaces
    "IAuthService",
    "IUserRepository",
    # Implementations
    "AuthService",
    "PasswordHasher",
    "TOTPEngine",
    "TokenService",
    # Models
    "PublicUser",
    "UserRecord",
    "TokenClaims",
    "TwoFactorState",
    "TwoFactorDisabled",
    "TwoFactorPending",
    "TwoFactorEnabled",
    "SessionIssued",
    "TwoFactorRequired",
    "LoginResult",
    # Exceptions
    "InvalidCredentialsError",
    "InvalidTokenError",
    "InvalidCodeError",
    "MissingTokenError",
    "EmailAlreadyRegisteredError",
    "UserNotFoundError",
    "TwoFactorNotSetupError",
    "TwoFactorNotEnabledError",
    "TwoFactorAlreadyEnabledError",
]
