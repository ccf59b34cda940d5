"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together the auth module's
collaborators. Routes depend on interfaces; this file decides which concrete
implementation (in-memory or Supabase credential store, cost parameters,
signing secrets) backs them.
"""

from typing import TYPE_CHECKING

from shared.config import Settings, get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.interfaces import IAuthService, IUserRepository
    from modules.auth.passwords import PasswordHasher
    from modules.auth.tokens import TokenService
    from modules.auth.totp import TOTPEngine


class ServiceContainer:
    """
    Container for all service instances.

    Services are created lazily on first access from the settings the
    container was built with, and cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings
        self._user_repository: "IUserRepository | None" = None
        self._password_hasher: "PasswordHasher | None" = None
        self._totp_engine: "TOTPEngine | None" = None
        self._token_service: "TokenService | None" = None
        self._auth_service: "IAuthService | None" = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def users(self) -> "IUserRepository":
        """Get the credential store selected by USER_STORE."""
        if self._user_repository is None:
            if self.settings.user_store == "supabase":
                from modules.auth.repository import SupabaseUserRepository
                from shared.database import get_supabase_client
                self._user_repository = SupabaseUserRepository(get_supabase_client())
            else:
                from modules.auth.repository import InMemoryUserRepository
                self._user_repository = InMemoryUserRepository()
        return self._user_repository

    @property
    def password_hasher(self) -> "PasswordHasher":
        if self._password_hasher is None:
            from modules.auth.passwords import PasswordHasher
            self._password_hasher = PasswordHasher.from_settings(self.settings)
        return self._password_hasher

    @property
    def totp(self) -> "TOTPEngine":
        if self._totp_engine is None:
            from modules.auth.totp import TOTPEngine
            self._totp_engine = TOTPEngine(
                issuer=self.settings.totp_issuer,
                valid_window=self.settings.totp_valid_window,
            )
        return self._totp_engine

    @property
    def tokens(self) -> "TokenService":
        if self._token_service is None:
            from modules.auth.tokens import TokenService
            self._token_service = TokenService.from_settings(self.settings)
        return self._token_service

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService(
                users=self.users,
                hasher=self.password_hasher,
                totp=self.totp,
                tokens=self.tokens,
            )
        return self._auth_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different settings.
        """
        self._settings = None
        self._user_repository = None
        self._password_hasher = None
        self._totp_engine = None
        self._token_service = None
        self._auth_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances (and a fresh
    in-memory credential store).

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_token_service() -> "TokenService":
    """FastAPI dependency for the token service."""
    return get_container().tokens
