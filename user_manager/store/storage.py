"""
Key-value storage backends used by UserStore.

Both backends expose the same synchronous get/set/remove interface over
string values, mirroring origin-scoped browser local storage:

    storage = JsonFileStorage("~/.user-manager/storage.json")
    storage.set_item("users", "[]")
    storage.get_item("users")   # -> "[]"
    storage.get_item("other")   # -> None
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from user_manager.exceptions import StoreError

__all__ = ["AbstractStorage", "MemoryStorage", "JsonFileStorage"]

logger = logging.getLogger(__name__)


class AbstractStorage(ABC):
    """
    Persistence collaborator for UserStore.
    Values are opaque strings; serialisation is the caller's job.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the value stored under *key*, or None if absent."""
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value."""
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete *key*; a missing key is not an error."""
        ...


class MemoryStorage(AbstractStorage):
    """Dict-backed storage for tests and throwaway sessions."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage(AbstractStorage):
    """
    Storage backed by a single JSON object file: {key: string value}.

    The file and its parent directory are created on first write.
    Every write rewrites the whole file through a temp file + os.replace,
    so a crash never leaves a half-written blob behind.
    """

    def __init__(self, path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    # ── Internal helpers ──────────────────────────────────────────────────

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"Cannot read storage file {self._path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StoreError(f"Storage file {self._path} does not hold a JSON object")
        return data

    def _write_all(self, data: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2)
                os.replace(tmp, self._path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StoreError(f"Cannot write storage file {self._path}: {exc}") from exc
        logger.debug("Wrote %d key(s) to %s", len(data), self._path)

    # ── Public API ────────────────────────────────────────────────────────

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        if value is not None and not isinstance(value, str):
            raise StoreError(f"Storage key {key!r} does not hold a string value")
        return value

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)
