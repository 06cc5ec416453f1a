"""Key-value storage backends for the moderation engine.

The engine persists three whole JSON documents (alerts, warnings, counters),
each under its own key.  A backend only has to load and save a complete
document by key; there is no partial update and no versioning, so two
processes sharing a directory overwrite each other's changes (last writer
wins).
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Optional

ALERTS_KEY = "moderationAlerts"
WARNINGS_KEY = "userWarnings"
COUNTS_KEY = "userWarningCounts"


class StoreError(Exception):
    """Raised when a stored document exists but cannot be decoded."""


class KeyValueStore:
    """Interface: whole-document load/save by string key."""

    def load(self, key: str) -> Optional[Any]:
        """Return the decoded document for *key*, or *None* if absent.

        Raises :class:`StoreError` when the stored bytes are not valid JSON.
        """
        raise NotImplementedError

    def save(self, key: str, value: Any) -> None:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    """Process-local store holding serialized JSON text, like browser storage."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def load(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StoreError(f"Stored value for {key!r} is not valid JSON: {exc}") from exc

    def save(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def raw(self, key: str) -> Optional[str]:
        """Return the serialized text stored under *key*."""
        return self._data.get(key)


def _safe_filename(name: str) -> str:
    """Sanitise a key for use as a filename."""
    return re.sub(r"[^\w\-.]", "_", name)


class JsonDirectoryStore(KeyValueStore):
    """File-based store: one ``<key>.json`` file per key.

    Storage path defaults to ``~/.alumod/moderation/``.
    """

    def __init__(self, base_dir: str | Path | None = None) -> None:
        self._base = Path(base_dir) if base_dir else Path.home() / ".alumod" / "moderation"
        self._base.mkdir(parents=True, exist_ok=True)

    @property
    def base_dir(self) -> Path:
        return self._base

    def path_for(self, key: str) -> Path:
        return self._base / f"{_safe_filename(key)}.json"

    def load(self, key: str) -> Optional[Any]:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise StoreError(f"{path} is not valid JSON: {exc}") from exc

    def save(self, key: str, value: Any) -> None:
        self.path_for(key).write_text(json.dumps(value, indent=2), encoding="utf-8")
