"""
CredentialStorage for persisted client state.

This module keeps the bearer token and the serialized user in a small
JSON document on disk so that a restarted client can restore its session.
The document uses the same keys as the browser client (``authToken`` and
``user``).
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from teafarm.models.auth import User

logger = logging.getLogger(__name__)

TOKEN_KEY = "authToken"
USER_KEY = "user"


class CredentialStorageError(Exception):
    """
    Raised when the credential file cannot be written.

    Example:
        >>> try:
        ...     storage.save("token", user)
        ... except CredentialStorageError as e:
        ...     print(f"Storage error: {e}")
    """

    pass


class CredentialStorage:
    """
    Durable key/value storage for the session credentials.

    When ``path`` is None the values live only in memory, which is what
    tests and short-lived scripts use.

    Example:
        >>> storage = CredentialStorage(Path("/tmp/credentials.json"))
        >>> storage.save("abc", User(username="admin", role="ADMIN"))
        >>> storage.token
        'abc'
    """

    def __init__(self, path: Optional[Path] = None):
        self._path = Path(path).expanduser() if path is not None else None
        self._data: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        if self._path is None or not self._path.exists():
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable credential file {self._path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _flush(self) -> None:
        if self._path is None:
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(self._data, f)
        except OSError as e:
            raise CredentialStorageError(
                f"Failed to write credentials to {self._path}: {e}"
            ) from e

    @property
    def path(self) -> Optional[Path]:
        """Location of the credential file, None for in-memory storage."""
        return self._path

    @property
    def token(self) -> Optional[str]:
        """The persisted bearer token, if any."""
        return self._data.get(TOKEN_KEY)

    @property
    def user(self) -> Optional[User]:
        """
        The persisted user, if any.

        A malformed entry is treated as absent.
        """
        raw = self._data.get(USER_KEY)
        if not raw:
            return None
        try:
            return User.model_validate(raw)
        except ValueError:
            logger.warning("Ignoring malformed persisted user")
            return None

    def save(self, token: str, user: User) -> None:
        """Persist a token and its user."""
        self._data[TOKEN_KEY] = token
        self._data[USER_KEY] = user.to_payload()
        self._flush()

    def clear(self) -> None:
        """Remove the token and user."""
        self._data.pop(TOKEN_KEY, None)
        self._data.pop(USER_KEY, None)
        self._flush()
