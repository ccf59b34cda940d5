"""
Authentication module interfaces.

Other modules should depend on these protocols, not the concrete
implementations. This enables testing with in-memory stores and swapping the
credential store backend through configuration.
"""

from typing import Protocol, Optional, runtime_checkable

from shared.models import AuthenticatedUser

from .models import (
    AccessTokenRefreshed,
    LoginRequest,
    LoginResult,
    PublicUser,
    RefreshRequest,
    SessionIssued,
    SignupRequest,
    TwoFactorLoginRequest,
    TwoFactorSetup,
    TwoFactorState,
    TwoFactorStatus,
    UserRecord,
)


@runtime_checkable
class IUserRepository(Protocol):
    """
    Credential store contract.

    Implementations own email uniqueness: ``create`` must fail with
    EmailAlreadyRegisteredError when the email is taken, even when two
    signups race.
    """

    def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        """Return the user with this ID, or None."""
        ...

    def get_by_email(self, email: str) -> Optional[UserRecord]:
        """Return the user with this (normalized) email, or None."""
        ...

    def create(self, user: UserRecord) -> UserRecord:
        """
        Persist a new user.

        Raises:
            EmailAlreadyRegisteredError: If the email is already registered
        """
        ...

    def update_two_factor(self, user_id: str, state: TwoFactorState) -> UserRecord:
        """
        Replace the user's two-factor state.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        ...

    def update_password_hash(self, user_id: str, password_hash: str) -> UserRecord:
        """
        Replace the user's password hash.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        ...


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for the auth session protocol.

    Operations taking an AuthenticatedUser expect the caller (the request
    authentication dependency) to have already verified the access token.
    """

    async def signup(self, request: SignupRequest) -> SessionIssued:
        """
        Create an account and sign the new user in.

        Raises:
            EmailAlreadyRegisteredError: If the email is already registered
        """
        ...

    async def login(self, request: LoginRequest) -> LoginResult:
        """
        Check email and password.

        Returns:
            SessionIssued, or TwoFactorRequired when the user has 2FA enabled

        Raises:
            InvalidCredentialsError: If the email is unknown or the password is wrong
        """
        ...

    async def complete_two_factor_login(self, request: TwoFactorLoginRequest) -> SessionIssued:
        """
        Finish a login that returned TwoFactorRequired.

        Raises:
            TwoFactorNotEnabledError: If the user has no enabled 2FA
            InvalidCodeError: If the code does not verify
        """
        ...

    async def setup_two_factor(self, user: AuthenticatedUser) -> TwoFactorSetup:
        """Generate (or re-roll) a pending 2FA secret."""
        ...

    async def verify_two_factor(self, user: AuthenticatedUser, code: str) -> TwoFactorStatus:
        """
        Confirm the pending secret and enable 2FA.

        Raises:
            TwoFactorNotSetupError: If setup has not been called
            InvalidCodeError: If the code does not verify
        """
        ...

    async def disable_two_factor(self, user: AuthenticatedUser) -> None:
        """Clear the 2FA secret and flag."""
        ...

    async def refresh_session(self, request: RefreshRequest) -> AccessTokenRefreshed:
        """
        Exchange a refresh token for a new access token.

        Raises:
            InvalidTokenError: If the refresh token does not verify
        """
        ...

    async def get_current_user(self, user: AuthenticatedUser) -> PublicUser:
        """
        Load the public projection of the caller's record.

        Raises:
            UserNotFoundError: If the record has been deleted
        """
        ...
