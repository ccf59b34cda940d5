"""
TaskFlow API client.

Async gateway that keeps access/refresh tokens in a TokenStore and refreshes
an expired access token transparently, plus a small session controller.
"""

from .controller import LOGIN_GUARD_SECONDS, AuthController
from .exceptions import ApiError
from .gateway import DEFAULT_BASE_URL, AuthGateway
from .models import LoginOutcome, Session, TwoFactorChallenge, TwoFactorSetup, User
from .token_store import FileTokenStore, MemoryTokenStore, TokenStore

__all__ = [
    "ApiError",
    "AuthController",
    "AuthGateway",
    "DEFAULT_BASE_URL",
    "FileTokenStore",
    "LOGIN_GUARD_SECONDS",
    "LoginOutcome",
    "MemoryTokenStore",
    "Session",
    "TokenStore",
    "TwoFactorChallenge",
    "TwoFactorSetup",
    "User",
]
