"""
Authentication service implementation.

Orchestrates signup, password login, the optional TOTP second step, 2FA
enrollment and access-token refresh on top of the credential store, the
password hasher, the TOTP engine and the token service.

Login state machine:

    CREDENTIALS_SUBMITTED -> PASSWORD_VERIFIED -> SESSION_ISSUED
                                               -> TWO_FACTOR_REQUIRED -> SESSION_ISSUED

The service holds no per-request state; everything lives in the store or in
the signed tokens.
"""

import logging

from fastapi.concurrency import run_in_threadpool

from shared.models import AuthenticatedUser

from .exceptions import (
    EmailAlreadyRegisteredError,
    InvalidCodeError,
    InvalidCredentialsError,
    InvalidTokenError,
    TwoFactorAlreadyEnabledError,
    TwoFactorNotEnabledError,
    TwoFactorNotSetupError,
    UserNotFoundError,
)
from .interfaces import IAuthService, IUserRepository
from .models import (
    AccessTokenRefreshed,
    LoginRequest,
    LoginResult,
    PublicUser,
    RefreshRequest,
    SessionIssued,
    SignupRequest,
    TwoFactorDisabled,
    TwoFactorEnabled,
    TwoFactorLoginRequest,
    TwoFactorPending,
    TwoFactorRequired,
    TwoFactorSetup,
    TwoFactorStatus,
    UserRecord,
)
from .passwords import PasswordHasher
from .tokens import TokenService
from .totp import TOTPEngine

logger = logging.getLogger(__name__)


class AuthService(IAuthService):
    """
    Implementation of the auth session protocol.

    Password hashing is CPU bound, so it runs in the threadpool to keep the
    event loop responsive.
    """

    def __init__(
        self,
        users: IUserRepository,
        hasher: PasswordHasher,
        totp: TOTPEngine,
        tokens: TokenService,
    ):
        self._users = users
        self._hasher = hasher
        self._totp = totp
        self._tokens = tokens

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    def _issue_session(self, user: UserRecord) -> SessionIssued:
        pair = self._tokens.issue_pair(user.id, user.email)
        return SessionIssued(
            user=user.to_public(),
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
        )

    def _require_user(self, user_id: str) -> UserRecord:
        user = self._users.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def signup(self, request: SignupRequest) -> SessionIssued:
        """Create the user with a freshly hashed password and sign them in."""
        if self._users.get_by_email(request.email) is not None:
            raise EmailAlreadyRegisteredError(request.email)

        password_hash = await run_in_threadpool(self._hasher.hash, request.password)

        # A concurrent signup with the same email still fails in the store.
        user = self._users.create(
            UserRecord(
                email=request.email,
                name=request.name,
                password_hash=password_hash,
            )
        )

        logger.info("User signed up: %s", user.id)
        return self._issue_session(user)

    async def login(self, request: LoginRequest) -> LoginResult:
        """
        Check email and password, then branch on the user's 2FA state.

        Unknown emails still pay for one hash verification so that both
        failure paths take the same time and raise the same error.
        """
        user = self._users.get_by_email(request.email)
        if user is None:
            await run_in_threadpool(self._hasher.dummy_verify, request.password)
            logger.warning("Login failed: unknown email")
            raise InvalidCredentialsError()

        password_ok = await run_in_threadpool(
            self._hasher.verify, request.password, user.password_hash
        )
        if not password_ok:
            logger.warning("Login failed: wrong password for user %s", user.id)
            raise InvalidCredentialsError()

        if self._hasher.needs_rehash(user.password_hash):
            new_hash = await run_in_threadpool(self._hasher.hash, request.password)
            user = self._users.update_password_hash(user.id, new_hash)
            logger.info("Rehashed password for user %s", user.id)

        if isinstance(user.two_factor, TwoFactorEnabled):
            logger.info("Password verified, 2FA required for user %s", user.id)
            return TwoFactorRequired(user_id=user.id)

        logger.info("User logged in: %s", user.id)
        return self._issue_session(user)

    async def complete_two_factor_login(self, request: TwoFactorLoginRequest) -> SessionIssued:
        """Verify the TOTP code for a user whose login returned TwoFactorRequired."""
        user = self._users.get_by_id(request.user_id)
        # Unknown ids and users without 2FA look the same to the caller.
        if user is None or not isinstance(user.two_factor, TwoFactorEnabled):
            raise TwoFactorNotEnabledError()

        if not self._totp.verify_code(request.token, user.two_factor.secret):
            logger.warning("2FA login failed: invalid code for user %s", user.id)
            raise InvalidCodeError()

        logger.info("User logged in with 2FA: %s", user.id)
        return self._issue_session(user)

    async def refresh_session(self, request: RefreshRequest) -> AccessTokenRefreshed:
        """Mint a new access token. The refresh token itself is not rotated."""
        try:
            claims = self._tokens.verify_refresh(request.refresh_token)
        except InvalidTokenError:
            logger.warning("Refresh rejected: invalid or expired refresh token")
            raise InvalidTokenError("Invalid or expired refresh token")

        return AccessTokenRefreshed(
            access_token=self._tokens.issue_access(claims.sub, claims.email),
        )

    async def get_current_user(self, user: AuthenticatedUser) -> PublicUser:
        return self._require_user(user.id).to_public()

    # -------------------------------------------------------------------------
    # Two-factor enrollment
    # -------------------------------------------------------------------------

    async def setup_two_factor(self, user: AuthenticatedUser) -> TwoFactorSetup:
        """
        Generate a secret and store it as pending.

        Calling this again before verification replaces the pending secret;
        codes from the previous secret stop working.
        """
        record = self._require_user(user.id)
        if isinstance(record.two_factor, TwoFactorEnabled):
            raise TwoFactorAlreadyEnabledError()

        secret, provisioning_uri = self._totp.generate_secret(record.email)
        self._users.update_two_factor(record.id, TwoFactorPending(secret=secret))

        logger.info("2FA setup started for user %s", record.id)
        return TwoFactorSetup(
            qr_code=self._totp.render_scannable_code(provisioning_uri),
            secret=secret,
        )

    async def verify_two_factor(self, user: AuthenticatedUser, code: str) -> TwoFactorStatus:
        """Confirm the pending secret with a code and enable 2FA."""
        record = self._require_user(user.id)
        state = record.two_factor
        if isinstance(state, TwoFactorDisabled):
            raise TwoFactorNotSetupError()

        if not self._totp.verify_code(code, state.secret):
            logger.warning("2FA verification failed for user %s", record.id)
            raise InvalidCodeError()

        if isinstance(state, TwoFactorPending):
            self._users.update_two_factor(record.id, TwoFactorEnabled(secret=state.secret))
            logger.info("2FA enabled for user %s", record.id)

        return TwoFactorStatus(two_factor_enabled=True)

    async def disable_two_factor(self, user: AuthenticatedUser) -> None:
        """Clear the secret and flag. Only a valid access token is required."""
        record = self._require_user(user.id)
        self._users.update_two_factor(record.id, TwoFactorDisabled())
        logger.info("2FA disabled for user %s", record.id)
