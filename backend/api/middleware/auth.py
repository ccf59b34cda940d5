"""
Bearer token authentication dependency.

Verifies access tokens issued by the auth module and exposes the caller's
identity to route handlers. Refresh tokens are rejected here because they are
signed with a different secret.
"""

from typing import Optional
from datetime import datetime, timezone

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from modules.auth.exceptions import MissingTokenError
from modules.auth.models import TokenClaims
from modules.auth.tokens import TokenService
from shared.models import AuthenticatedUser

from ..dependencies import get_token_service

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


def get_user_from_claims(claims: TokenClaims) -> AuthenticatedUser:
    """
    Convert verified access-token claims to an AuthenticatedUser.

    Args:
        claims: Claims returned by TokenService.verify_access

    Returns:
        AuthenticatedUser instance
    """
    return AuthenticatedUser(
        id=claims.sub,
        email=claims.email,
        issued_at=datetime.fromtimestamp(claims.iat, tz=timezone.utc),
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> AuthenticatedUser:
    """
    Dependency that requires authentication.

    Use this for endpoints that require a logged-in user.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"user_id": user.id}

    Raises:
        MissingTokenError: If there is no bearer Authorization header
        InvalidTokenError: If the access token does not verify
    """
    if credentials is None:
        raise MissingTokenError()

    claims = tokens.verify_access(credentials.credentials)
    return get_user_from_claims(claims)

