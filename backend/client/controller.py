"""
Session state for an interactive client.

Tracks the signed-in user. Right after a login the controller trusts the
user it was handed and does not re-fetch ``/me`` for a short grace period,
so a reload racing the login cannot overwrite or clear it.
"""

import logging
import time
from typing import Callable, Optional

from .gateway import AuthGateway
from .models import User

logger = logging.getLogger(__name__)

LOGIN_GUARD_SECONDS = 2.0


class AuthController:
    """Holds ``user`` and the login guard for one client session."""

    def __init__(
        self,
        gateway: AuthGateway,
        guard_seconds: float = LOGIN_GUARD_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.gateway = gateway
        self.guard_seconds = guard_seconds
        self._clock = clock
        self.user: Optional[User] = None
        # Monotonic deadline; None when no login is in progress
        self.recently_logged_in_until: Optional[float] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def login_guard_active(self) -> bool:
        return (
            self.recently_logged_in_until is not None
            and self._clock() < self.recently_logged_in_until
        )

    def login(self, user: User) -> None:
        """Record a user returned by signup or login and arm the guard."""
        self.user = user
        self.recently_logged_in_until = self._clock() + self.guard_seconds

    async def load_current_user(self) -> Optional[User]:
        """
        Populate ``user`` from ``/me`` if nothing is known yet.

        No request is made while the login guard is armed, when a user is
        already set, or when there is no access token.
        """
        if self.login_guard_active or self.user is not None:
            return self.user
        if not self.gateway.store.get_access_token():
            return None

        current = await self.gateway.get_current_user()
        # A login may have landed while /me was in flight
        if self.user is None:
            self.user = current
        return self.user

    def update_user(self, user: User) -> None:
        self.user = user

    def logout(self) -> None:
        self.gateway.logout()
        self.user = None
        self.recently_logged_in_until = None
        logger.info("Logged out")
