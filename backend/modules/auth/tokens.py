"""
Access and refresh token issuance and verification.

Both token classes are HS256 JWTs carrying the same claim shape
(``sub``, ``email``, ``type``, ``iat``, ``exp``) but signed with different
secrets. A token signed for one purpose never verifies for the other.
Tokens are stateless: there is no server-side revocation.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt
from pydantic import ValidationError as PydanticValidationError

from shared.config import Settings, get_settings

from .exceptions import InvalidTokenError
from .models import TokenClaims, TokenPair, TokenType

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """
    Issues and verifies signed, expiring tokens.

    The signing secrets are fixed at construction and never change for the
    life of the instance.
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=7),
        clock: Optional[Clock] = None,
    ):
        if not access_secret or not refresh_secret:
            raise ValueError("Both access and refresh signing secrets are required")
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh tokens must use different signing secrets")

        self._secrets: dict[TokenType, str] = {
            "access": access_secret,
            "refresh": refresh_secret,
        }
        self._ttls: dict[TokenType, timedelta] = {
            "access": access_ttl,
            "refresh": refresh_ttl,
        }
        self._clock = clock or _utc_now

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "TokenService":
        settings = settings or get_settings()
        return cls(
            access_secret=settings.jwt_access_secret,
            refresh_secret=settings.jwt_refresh_secret,
            access_ttl=timedelta(minutes=settings.access_token_ttl_minutes),
            refresh_ttl=timedelta(days=settings.refresh_token_ttl_days),
        )

    # -------------------------------------------------------------------------
    # Issuing
    # -------------------------------------------------------------------------

    def _issue(self, token_type: TokenType, user_id: str, email: str) -> str:
        now = self._clock()
        payload = {
            "sub": user_id,
            "email": email,
            "type": token_type,
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttls[token_type]).timestamp()),
        }
        return jwt.encode(payload, self._secrets[token_type], algorithm=JWT_ALGORITHM)

    def issue_access(self, user_id: str, email: str) -> str:
        return self._issue("access", user_id, email)

    def issue_refresh(self, user_id: str, email: str) -> str:
        return self._issue("refresh", user_id, email)

    def issue_pair(self, user_id: str, email: str) -> TokenPair:
        """Mint an access token and a refresh token for the same user."""
        return TokenPair(
            access_token=self.issue_access(user_id, email),
            refresh_token=self.issue_refresh(user_id, email),
        )

    # -------------------------------------------------------------------------
    # Verifying
    # -------------------------------------------------------------------------

    def _verify(self, token_type: TokenType, token: str) -> TokenClaims:
        if not token:
            raise InvalidTokenError("Invalid token")

        try:
            payload = jwt.decode(
                token,
                self._secrets[token_type],
                algorithms=[JWT_ALGORITHM],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidTokenError("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.debug("Rejected %s token: %s", token_type, e)
            raise InvalidTokenError("Invalid token")

        try:
            claims = TokenClaims(**payload)
        except PydanticValidationError:
            raise InvalidTokenError("Invalid token")

        if claims.type != token_type:
            raise InvalidTokenError("Invalid token")

        return claims

    def verify_access(self, token: str) -> TokenClaims:
        """Verify an access token.

        Raises:
            InvalidTokenError: If the token is malformed, expired, or not an access token
        """
        return self._verify("access", token)

    def verify_refresh(self, token: str) -> TokenClaims:
        """Verify a refresh token.

        Raises:
            InvalidTokenError: If the token is malformed, expired, or not a refresh token
        """
        return self._verify("refresh", token)
