"""
Session Store Tests.

This module tests token storage and the session store:
- In-memory and file-backed token storage
- Persistence across store instances (restart)
- Per-origin isolation
- Invalidation of rejected tokens
"""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from tasktracker_mcp.constants import TOKEN_STORAGE_KEY
from tasktracker_mcp.session import FileTokenStorage, MemoryTokenStorage, SessionStore


pytestmark = [pytest.mark.unit, pytest.mark.session]


ORIGIN = "http://localhost:8080"


@pytest.fixture
def token_file(tmp_path: Path) -> Path:
    return tmp_path / "nested" / "session.json"


# =============================================================================
# Session Store Tests
# =============================================================================


class TestSessionStore:
    """Tests for the single-slot token holder."""

    def test_starts_signed_out(self):
        store = SessionStore()

        assert store.get() is None
        assert store.is_authenticated is False

    def test_set_and_get(self):
        store = SessionStore()

        store.set("T1")

        assert store.get() == "T1"
        assert store.is_authenticated is True

    def test_set_replaces_previous_token(self):
        store = SessionStore()
        store.set("T1")

        store.set("T2")

        assert store.get() == "T2"

    def test_set_rejects_empty_token(self):
        store = SessionStore()

        with pytest.raises(ValueError):
            store.set("")

    def test_clear(self):
        storage = MemoryTokenStorage()
        store = SessionStore(storage)
        store.set("T1")

        store.clear()

        assert store.get() is None
        assert storage.get_item(TOKEN_STORAGE_KEY) is None

    def test_clear_when_signed_out_is_harmless(self):
        store = SessionStore()

        store.clear()

        assert store.get() is None

    def test_writes_through_to_storage(self):
        storage = MemoryTokenStorage()
        store = SessionStore(storage)

        store.set("T1")

        assert storage.get_item(TOKEN_STORAGE_KEY) == "T1"

    def test_reads_existing_token_from_storage(self):
        storage = MemoryTokenStorage({TOKEN_STORAGE_KEY: "persisted"})

        store = SessionStore(storage)

        assert store.get() == "persisted"


class TestSessionInvalidation:
    """Tests for clearing the session when the server rejects a token."""

    def test_invalidate_current_token(self):
        store = SessionStore()
        store.set("T1")

        cleared = store.invalidate("T1")

        assert cleared is True
        assert store.get() is None

    def test_invalidate_stale_token_keeps_new_session(self):
        store = SessionStore()
        store.set("T2")

        cleared = store.invalidate("T1")

        assert cleared is False
        assert store.get() == "T2"

    def test_invalidate_twice_clears_once(self):
        store = SessionStore()
        store.set("T1")

        assert store.invalidate("T1") is True
        assert store.invalidate("T1") is False


# =============================================================================
# File Storage Tests
# =============================================================================


class TestFileTokenStorage:
    """Tests for the durable, per-origin file backend."""

    def test_missing_file_reads_as_empty(self, token_file: Path):
        storage = FileTokenStorage(token_file, ORIGIN)

        assert storage.get_item(TOKEN_STORAGE_KEY) is None

    def test_token_survives_restart(self, token_file: Path):
        SessionStore(FileTokenStorage(token_file, ORIGIN)).set("T1")

        reloaded = SessionStore(FileTokenStorage(token_file, ORIGIN))

        assert reloaded.get() == "T1"

    def test_creates_parent_directories(self, token_file: Path):
        FileTokenStorage(token_file, ORIGIN).set_item(TOKEN_STORAGE_KEY, "T1")

        assert token_file.exists()
        assert json.loads(token_file.read_text()) == {ORIGIN: {TOKEN_STORAGE_KEY: "T1"}}

    def test_clear_removes_token_from_file(self, token_file: Path):
        store = SessionStore(FileTokenStorage(token_file, ORIGIN))
        store.set("T1")

        store.clear()

        assert SessionStore(FileTokenStorage(token_file, ORIGIN)).get() is None
        assert json.loads(token_file.read_text()) == {}

    def test_origins_are_isolated(self, token_file: Path):
        FileTokenStorage(token_file, ORIGIN).set_item(TOKEN_STORAGE_KEY, "local")
        other = FileTokenStorage(token_file, "https://tasks.example.com")

        assert other.get_item(TOKEN_STORAGE_KEY) is None

        other.set_item(TOKEN_STORAGE_KEY, "remote")
        FileTokenStorage(token_file, ORIGIN).remove_item(TOKEN_STORAGE_KEY)

        assert other.get_item(TOKEN_STORAGE_KEY) == "remote"

    def test_trailing_slash_in_origin_is_ignored(self, token_file: Path):
        storage = FileTokenStorage(token_file, ORIGIN + "/")
        storage.set_item(TOKEN_STORAGE_KEY, "T1")

        assert storage.origin == ORIGIN
        assert FileTokenStorage(token_file, ORIGIN).get_item(TOKEN_STORAGE_KEY) == "T1"

    def test_corrupt_file_reads_as_empty(self, token_file: Path):
        token_file.parent.mkdir(parents=True)
        token_file.write_text("{not json")

        storage = FileTokenStorage(token_file, ORIGIN)

        assert storage.get_item(TOKEN_STORAGE_KEY) is None
        storage.set_item(TOKEN_STORAGE_KEY, "T1")
        assert storage.get_item(TOKEN_STORAGE_KEY) == "T1"

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_file_is_owner_only(self, token_file: Path):
        FileTokenStorage(token_file, ORIGIN).set_item(TOKEN_STORAGE_KEY, "secret")

        assert token_file.stat().st_mode & 0o077 == 0
