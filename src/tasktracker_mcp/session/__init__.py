"""Session token storage."""

from tasktracker_mcp.session.storage import FileTokenStorage, MemoryTokenStorage, TokenStorage
from tasktracker_mcp.session.store import SessionStore

__all__ = [
    "FileTokenStorage",
    "MemoryTokenStorage",
    "SessionStore",
    "TokenStorage",
]
