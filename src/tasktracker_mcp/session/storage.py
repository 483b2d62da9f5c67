"""
Durable token storage.

A tiny key/value interface modelled on per-origin browser storage. The file
backend keeps one JSON document holding a slot per server origin, so
switching ``base_url`` never leaks a token to a different server.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class TokenStorage(Protocol):
    """Key/value storage scoped to one server origin."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryTokenStorage:
    """Process-local storage; nothing survives a restart."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileTokenStorage:
    """
    JSON-file storage keyed by origin.

    Layout::

        {"http://localhost:8080": {"token": "..."}}

    Writes go to a sibling temp file first and are moved into place, so a
    crash mid-write never leaves a truncated document behind.
    """

    def __init__(self, path: str | Path, origin: str) -> None:
        self._path = Path(path).expanduser()
        self._origin = origin.rstrip("/")

    @property
    def path(self) -> Path:
        return self._path

    @property
    def origin(self) -> str:
        return self._origin

    def get_item(self, key: str) -> str | None:
        value = self._load().get(self._origin, {}).get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data.setdefault(self._origin, {})[key] = value
        self._save(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        slot = data.get(self._origin)
        if not slot or key not in slot:
            return
        del slot[key]
        if not slot:
            del data[self._origin]
        self._save(data)

    def _load(self) -> dict[str, dict[str, str]]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable token file %s: %s", self._path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict[str, dict[str, str]]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        # Owner-only: the document holds bearer tokens
        fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp, self._path)
