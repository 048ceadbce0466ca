"""
Unit tests for CredentialStorage.

Tests cover persistence across instances, clearing, and tolerance of
corrupt files.
"""

import json
from unittest.mock import patch

import pytest

from teafarm.models.auth import User, UserRole
from teafarm.services.storage import (
    TOKEN_KEY,
    USER_KEY,
    CredentialStorage,
    CredentialStorageError,
)

ADMIN = User(id=1, username="admin", role=UserRole.ADMIN)


def test_in_memory_storage_starts_empty():
    storage = CredentialStorage()
    assert storage.path is None
    assert storage.token is None
    assert storage.user is None


def test_save_persists_across_instances(tmp_path):
    """Test that a restarted client reads the saved session."""
    path = tmp_path / "credentials.json"
    CredentialStorage(path).save("abc", ADMIN)

    restored = CredentialStorage(path)
    assert restored.token == "abc"
    assert restored.user == ADMIN


def test_file_uses_browser_keys(tmp_path):
    path = tmp_path / "credentials.json"
    CredentialStorage(path).save("abc", ADMIN)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data[TOKEN_KEY] == "abc"
    assert data[USER_KEY]["username"] == "admin"
    assert data[USER_KEY]["role"] == "ADMIN"


def test_clear_removes_token_and_user(tmp_path):
    path = tmp_path / "credentials.json"
    storage = CredentialStorage(path)
    storage.save("abc", ADMIN)

    storage.clear()

    assert storage.token is None
    assert CredentialStorage(path).token is None
    assert CredentialStorage(path).user is None


def test_corrupt_file_is_ignored(tmp_path):
    path = tmp_path / "credentials.json"
    path.write_text("{not json", encoding="utf-8")

    storage = CredentialStorage(path)
    assert storage.token is None


def test_malformed_user_is_treated_as_absent(tmp_path):
    path = tmp_path / "credentials.json"
    path.write_text(json.dumps({TOKEN_KEY: "abc", USER_KEY: {"role": "NOBODY"}}), encoding="utf-8")

    storage = CredentialStorage(path)
    assert storage.token == "abc"
    assert storage.user is None


def test_write_failure_raises(tmp_path):
    storage = CredentialStorage(tmp_path / "credentials.json")

    with patch("builtins.open", side_effect=PermissionError("denied")):
        with pytest.raises(CredentialStorageError) as exc_info:
            storage.save("abc", ADMIN)

    assert "denied" in str(exc_info.value)
