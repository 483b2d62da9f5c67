"""
Session Store.

Holds the single authentication token. The token is mirrored into durable
storage so a restart does not force re-authentication. Expiry is never
predicted locally; the transport invalidates the token when the server
answers 401.
"""

from __future__ import annotations

import logging

from tasktracker_mcp.constants import TOKEN_STORAGE_KEY
from tasktracker_mcp.session.storage import MemoryTokenStorage, TokenStorage

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Single-slot token holder backed by a :class:`TokenStorage`.

    Usage:
        store = SessionStore(FileTokenStorage(path, origin="http://localhost:8080"))
        store.set("eyJ...")
        store.get()   # "eyJ..."
        store.clear()
    """

    def __init__(self, storage: TokenStorage | None = None) -> None:
        self._storage: TokenStorage = storage if storage is not None else MemoryTokenStorage()
        self._token: str | None = self._storage.get_item(TOKEN_STORAGE_KEY)

    def get(self) -> str | None:
        """Return the current token, or None when signed out."""
        return self._token

    def set(self, token: str) -> None:
        """Replace the current token."""
        if not token:
            raise ValueError("token must be a non-empty string")
        self._token = token
        self._storage.set_item(TOKEN_STORAGE_KEY, token)
        logger.debug("Session token stored")

    def clear(self) -> None:
        """Drop the token from memory and durable storage."""
        self._token = None
        self._storage.remove_item(TOKEN_STORAGE_KEY)
        logger.debug("Session token cleared")

    def invalidate(self, token: str) -> bool:
        """
        Clear the session if ``token`` is still the one being held.

        Returns True when the session was cleared. A rejection of a token
        that has since been replaced leaves the new session in place.
        """
        if self._token is None or self._token != token:
            return False
        self.clear()
        logger.info("Session invalidated by server")
        return True

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None
