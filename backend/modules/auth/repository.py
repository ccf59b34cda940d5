"""
Credential store implementations.

- InMemoryUserRepository: process-local store for development and tests
- SupabaseUserRepository: ``users`` table in Supabase Postgres

Both enforce email uniqueness at the store, so concurrent signups with the
same email resolve to exactly one record and one EmailAlreadyRegisteredError.
"""

import threading
from datetime import datetime, timezone
from typing import Any, Optional

from supabase import PostgrestAPIError

from shared.repository import BaseRepository

from .exceptions import EmailAlreadyRegisteredError, UserNotFoundError
from .models import (
    TwoFactorDisabled,
    TwoFactorEnabled,
    TwoFactorPending,
    TwoFactorState,
    UserRecord,
    normalize_email,
)


USERS_TABLE = "users"

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


class InMemoryUserRepository:
    """
    Dictionary-backed credential store.

    A single lock guards the id and email indexes so the uniqueness check and
    the insert happen atomically.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_id: dict[str, UserRecord] = {}
        self._id_by_email: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._by_id)

    def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        return self._by_id.get(user_id)

    def get_by_email(self, email: str) -> Optional[UserRecord]:
        user_id = self._id_by_email.get(normalize_email(email))
        return self._by_id.get(user_id) if user_id else None

    def create(self, user: UserRecord) -> UserRecord:
        email = normalize_email(user.email)
        with self._lock:
            if email in self._id_by_email:
                raise EmailAlreadyRegisteredError(email)
            stored = user.model_copy(update={"email": email})
            self._by_id[stored.id] = stored
            self._id_by_email[email] = stored.id
        return stored

    def _replace(self, user_id: str, **changes: Any) -> UserRecord:
        with self._lock:
            current = self._by_id.get(user_id)
            if current is None:
                raise UserNotFoundError(user_id)
            changes["updated_at"] = datetime.now(timezone.utc)
            updated = current.model_copy(update=changes)
            self._by_id[user_id] = updated
        return updated

    def update_two_factor(self, user_id: str, state: TwoFactorState) -> UserRecord:
        return self._replace(user_id, two_factor=state)

    def update_password_hash(self, user_id: str, password_hash: str) -> UserRecord:
        return self._replace(user_id, password_hash=password_hash)

    def delete(self, user_id: str) -> None:
        with self._lock:
            user = self._by_id.pop(user_id, None)
            if user is not None:
                self._id_by_email.pop(user.email, None)


class SupabaseUserRepository(BaseRepository[UserRecord]):
    """
    Repository for the ``users`` table.

    The table stores 2FA state as two columns (``two_factor_enabled``,
    ``two_factor_secret``); this class maps them to and from the
    TwoFactorState variant. Email uniqueness comes from the table's unique
    index (see migrations/001_create_users.sql).
    """

    table_name = USERS_TABLE

    def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        result = self._table().select("*").eq("id", user_id).execute()
        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def get_by_email(self, email: str) -> Optional[UserRecord]:
        result = (
            self._table()
            .select("*")
            .eq("email", normalize_email(email))
            .execute()
        )
        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def create(self, user: UserRecord) -> UserRecord:
        row = self._map_to_row(user)
        row["email"] = normalize_email(user.email)
        try:
            result = self._table().insert(row).execute()
        except PostgrestAPIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise EmailAlreadyRegisteredError(row["email"]) from e
            raise
        return self._map_to_user(result.data[0])

    def _update(self, user_id: str, data: dict[str, Any]) -> UserRecord:
        data["updated_at"] = datetime.now(timezone.utc).isoformat()
        result = self._table().update(data).eq("id", user_id).execute()
        if not result.data:
            raise UserNotFoundError(user_id)
        return self._map_to_user(result.data[0])

    def update_two_factor(self, user_id: str, state: TwoFactorState) -> UserRecord:
        return self._update(user_id, self._two_factor_columns(state))

    def update_password_hash(self, user_id: str, password_hash: str) -> UserRecord:
        return self._update(user_id, {"password_hash": password_hash})

    # -------------------------------------------------------------------------
    # Mapping helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _two_factor_columns(state: TwoFactorState) -> dict[str, Any]:
        if isinstance(state, TwoFactorEnabled):
            return {"two_factor_enabled": True, "two_factor_secret": state.secret}
        if isinstance(state, TwoFactorPending):
            return {"two_factor_enabled": False, "two_factor_secret": state.secret}
        return {"two_factor_enabled": False, "two_factor_secret": None}

    @staticmethod
    def _two_factor_state(enabled: bool, secret: Optional[str]) -> TwoFactorState:
        if enabled and not secret:
            raise ValueError("User row has 2FA enabled but no secret")
        if enabled:
            return TwoFactorEnabled(secret=secret)
        if secret:
            return TwoFactorPending(secret=secret)
        return TwoFactorDisabled()

    def _map_to_row(self, user: UserRecord) -> dict[str, Any]:
        return {
            "id": user.id,
            "email": user.email,
            "name": user.name,
            "avatar": user.avatar,
            "password_hash": user.password_hash,
            "created_at": user.created_at.isoformat(),
            "updated_at": user.updated_at.isoformat(),
            **self._two_factor_columns(user.two_factor),
        }

    def _map_to_user(self, data: dict[str, Any]) -> UserRecord:
        return UserRecord(
            id=str(data["id"]),
            email=data["email"],
            name=data["name"],
            avatar=data.get("avatar") or "",
            password_hash=data["password_hash"],
            two_factor=self._two_factor_state(
                bool(data.get("two_factor_enabled")),
                data.get("two_factor_secret"),
            ),
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )
