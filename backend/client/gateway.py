"""
Async HTTP gateway to the TaskFlow auth API.

Every authenticated call goes through ``AuthGateway.request``, which attaches
the stored access token and, when the server answers 401, makes one attempt
to refresh it and retries the call once:

    request -> 401 -> POST /api/auth/refresh -> ok   -> retry once
                                             -> fail -> original 401 raised

Concurrent calls that hit a 401 each refresh on their own.
"""

import logging
from typing import Any, Optional

import httpx

from .exceptions import ApiError
from .models import LoginOutcome, Session, TwoFactorChallenge, TwoFactorSetup, User
from .token_store import MemoryTokenStore, TokenStore

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000"

SIGNUP_PATH = "/api/auth/signup"
LOGIN_PATH = "/api/auth/login"
LOGIN_TWO_FACTOR_PATH = "/api/auth/login/2fa"
REFRESH_PATH = "/api/auth/refresh"
ME_PATH = "/api/auth/me"
TWO_FACTOR_SETUP_PATH = "/api/auth/2fa/setup"
TWO_FACTOR_VERIFY_PATH = "/api/auth/2fa/verify"
TWO_FACTOR_DISABLE_PATH = "/api/auth/2fa/disable"


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase


def _parse(response: httpx.Response) -> dict[str, Any]:
    """Return the JSON body of a 2xx response, or raise ApiError."""
    if not response.is_success:
        raise ApiError(response.status_code, _error_message(response))
    return response.json()


class AuthGateway:
    """
    Client for the auth endpoints plus a generic authenticated ``request``.

    Usage:
        async with AuthGateway("http://localhost:5000", FileTokenStore("~/.taskflow/tokens.json")) as api:
            outcome = await api.login("me@example.com", "password")
            if isinstance(outcome, TwoFactorChallenge):
                await api.login_with_two_factor(outcome.user_id, input("Code: "))
            me = await api.get_current_user()
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        store: Optional[TokenStore] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        self.store: TokenStore = store if store is not None else MemoryTokenStore()
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "AuthGateway":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        headers = dict(kwargs.pop("headers", None) or {})
        access_token = self.store.get_access_token()
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return await self._client.request(method, path, headers=headers, **kwargs)

    async def request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        """
        Send an authenticated request and return the decoded JSON body.

        Raises:
            ApiError: For any non-2xx response, including a 401 that survived
                the refresh attempt
        """
        response = await self._send(method, path, **kwargs)

        if response.status_code == 401 and self.store.get_refresh_token():
            if await self.refresh_access_token():
                response = await self._send(method, path, **kwargs)

        return _parse(response)

    async def _post_public(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        return _parse(await self._client.post(path, json=payload))

    def _store_session(self, body: dict[str, Any]) -> Session:
        session = Session.model_validate(body["data"])
        self.store.set_tokens(session.access_token, session.refresh_token)
        return session

    # -------------------------------------------------------------------------
    # Auth endpoints
    # -------------------------------------------------------------------------

    async def signup(self, email: str, password: str, name: str) -> Session:
        body = await self._post_public(
            SIGNUP_PATH, {"email": email, "password": password, "name": name}
        )
        return self._store_session(body)

    async def login(self, email: str, password: str) -> LoginOutcome:
        """
        Log in with email and password.

        Returns a TwoFactorChallenge, leaving the store untouched, when the
        account has 2FA enabled.
        """
        body = await self._post_public(LOGIN_PATH, {"email": email, "password": password})
        if body.get("requiresTwoFactor"):
            return TwoFactorChallenge.model_validate(body["data"])
        return self._store_session(body)

    async def login_with_two_factor(self, user_id: str, code: str) -> Session:
        body = await self._post_public(LOGIN_TWO_FACTOR_PATH, {"userId": user_id, "token": code})
        return self._store_session(body)

    async def refresh_access_token(self) -> bool:
        """Swap the stored refresh token for a new access token.

        Returns False, without raising, when there is no refresh token, the
        server cannot be reached, or the reply carries no new access token.
        """
        refresh_token = self.store.get_refresh_token()
        if not refresh_token:
            return False

        try:
            response = await self._client.post(REFRESH_PATH, json={"refreshToken": refresh_token})
        except httpx.HTTPError as e:
            logger.warning("Token refresh failed: %s", e)
            return False

        if not response.is_success:
            logger.warning("Token refresh rejected (%s)", response.status_code)
            return False

        try:
            body = response.json()
        except ValueError:
            logger.warning("Token refresh returned a non-JSON body")
            return False

        if not isinstance(body, dict) or not body.get("success"):
            logger.warning("Token refresh returned no access token")
            return False
        data = body.get("data")
        access_token = data.get("accessToken") if isinstance(data, dict) else None
        if not access_token:
            logger.warning("Token refresh returned no access token")
            return False

        self.store.set_access_token(access_token)
        return True

    async def get_current_user(self) -> Optional[User]:
        """Fetch ``/me``. Returns None instead of raising when it fails."""
        try:
            body = await self.request("GET", ME_PATH)
        except (ApiError, httpx.HTTPError) as e:
            logger.info("Could not load current user: %s", e)
            return None
        return User.model_validate(body["data"]["user"])

    async def setup_two_factor(self) -> TwoFactorSetup:
        body = await self.request("POST", TWO_FACTOR_SETUP_PATH)
        return TwoFactorSetup.model_validate(body["data"])

    async def verify_two_factor(self, code: str) -> bool:
        body = await self.request("POST", TWO_FACTOR_VERIFY_PATH, json={"token": code})
        return bool(body["data"]["twoFactorEnabled"])

    async def disable_two_factor(self) -> None:
        await self.request("POST", TWO_FACTOR_DISABLE_PATH)

    def logout(self) -> None:
        """Forget both tokens. The server keeps no session to end."""
        self.store.clear()
