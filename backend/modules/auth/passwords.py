"""
Password hashing and verification using Argon2id.

Hashes are encoded strings carrying their own salt and cost parameters, so
verification needs nothing but the stored value. Hashing happens only when a
password is created or changed, never on read.
"""

from argon2 import PasswordHasher as _Argon2Hasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from shared.config import Settings, get_settings


class PasswordHasher:
    """One-way salted password hashing with constant-time verification."""

    def __init__(
        self,
        time_cost: int = 3,
        memory_cost: int = 65536,
        parallelism: int = 4,
    ):
        self._hasher = _Argon2Hasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
            hash_len=32,
            salt_len=16,
        )
        # Verified against when the email is unknown, so that path costs the
        # same as checking a real password.
        self._dummy_hash = self._hasher.hash("taskflow-dummy-password")

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "PasswordHasher":
        settings = settings or get_settings()
        return cls(
            time_cost=settings.password_hash_time_cost,
            memory_cost=settings.password_hash_memory_cost,
            parallelism=settings.password_hash_parallelism,
        )

    def hash(self, plaintext: str) -> str:
        """Return an Argon2id encoded hash (includes salt + parameters)."""
        return self._hasher.hash(plaintext)

    def verify(self, plaintext: str, password_hash: str) -> bool:
        """Check a password against a stored hash. Never raises on mismatch."""
        try:
            return self._hasher.verify(password_hash, plaintext)
        except (VerifyMismatchError, VerificationError, InvalidHashError):
            return False

    def dummy_verify(self, plaintext: str) -> bool:
        """Burn one verification for a login whose email matched no user."""
        self.verify(plaintext, self._dummy_hash)
        return False

    def needs_rehash(self, password_hash: str) -> bool:
        """True when the hash was produced with different cost parameters."""
        try:
            return self._hasher.check_needs_rehash(password_hash)
        except InvalidHashError:
            return True
