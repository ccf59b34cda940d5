"""
Token persistence for the client.

A store holds exactly two strings, the access token and the refresh token,
and forgets both together.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "accessToken"
REFRESH_TOKEN_KEY = "refreshToken"


@runtime_checkable
class TokenStore(Protocol):
    """Where the gateway keeps the current session's tokens."""

    def get_access_token(self) -> Optional[str]:
        ...

    def get_refresh_token(self) -> Optional[str]:
        ...

    def set_tokens(self, access_token: str, refresh_token: str) -> None:
        ...

    def set_access_token(self, access_token: str) -> None:
        ...

    def clear(self) -> None:
        ...


class MemoryTokenStore:
    """Process-local store. Tokens are gone when the process exits."""

    def __init__(self) -> None:
        self._access_token: Optional[str] = None
        self._refresh_token: Optional[str] = None

    def get_access_token(self) -> Optional[str]:
        return self._access_token

    def get_refresh_token(self) -> Optional[str]:
        return self._refresh_token

    def set_tokens(self, access_token: str, refresh_token: str) -> None:
        self._access_token = access_token
        self._refresh_token = refresh_token

    def set_access_token(self, access_token: str) -> None:
        self._access_token = access_token

    def clear(self) -> None:
        self._access_token = None
        self._refresh_token = None


class FileTokenStore:
    """
    JSON file store that survives process restarts.

    The file is created with mode 0600 and holds
    ``{"accessToken": ..., "refreshToken": ...}``. It is re-read on every
    access so several processes can share one session.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable token file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Readers in other processes see either the old file or the new one.
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f)
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get_access_token(self) -> Optional[str]:
        return self._read().get(ACCESS_TOKEN_KEY)

    def get_refresh_token(self) -> Optional[str]:
        return self._read().get(REFRESH_TOKEN_KEY)

    def set_tokens(self, access_token: str, refresh_token: str) -> None:
        self._write({ACCESS_TOKEN_KEY: access_token, REFRESH_TOKEN_KEY: refresh_token})

    def set_access_token(self, access_token: str) -> None:
        data = self._read()
        data[ACCESS_TOKEN_KEY] = access_token
        self._write(data)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
