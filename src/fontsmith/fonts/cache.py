"""Key/value stores with expiry used for remote stylesheets and mirror bookkeeping."""

from __future__ import annotations

from collections.abc import Callable
import json
import logging
import os
from pathlib import Path
import tempfile
import time
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class TransientStore(Protocol):
    """Capability for cached values; ``ttl`` of ``0`` means no expiry."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any, ttl: int = 0) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStore:
    """Process-local store, useful for tests and single-run CLI invocations."""

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[Any, float | None]] = {}

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires = entry
        if expires is not None and expires <= self._clock():
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl: int = 0) -> None:
        expires = self._clock() + ttl if ttl > 0 else None
        self._entries[key] = (value, expires)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None


class JsonFileStore:
    """Store persisted as a single JSON document.

    Every write rewrites the file through a temporary sibling followed by
    ``os.replace``. There is no locking; concurrent writers race and the last
    one wins.
    """

    def __init__(
        self,
        path: Path,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.path = Path(path)
        self._clock = clock

    def get(self, key: str) -> Any | None:
        entries = self._load()
        entry = entries.get(key)
        if not isinstance(entry, dict):
            return None
        expires = entry.get("expires")
        if expires is not None and expires <= self._clock():
            return None
        return entry.get("value")

    def set(self, key: str, value: Any, ttl: int = 0) -> None:
        entries = self._load()
        entries[key] = {
            "value": value,
            "expires": self._clock() + ttl if ttl > 0 else None,
        }
        self._dump(entries)

    def delete(self, key: str) -> None:
        entries = self._load()
        if entries.pop(key, None) is not None:
            self._dump(entries)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)

    def purge_expired(self) -> int:
        """Drop expired entries and return how many were removed."""
        entries = self._load()
        now = self._clock()
        stale = [
            key
            for key, entry in entries.items()
            if isinstance(entry, dict)
            and entry.get("expires") is not None
            and entry["expires"] <= now
        ]
        for key in stale:
            del entries[key]
        if stale:
            self._dump(entries)
        return len(stale)

    def _load(self) -> dict[str, Any]:
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable cache file %s: %s", self.path, exc)
            return {}
        return payload if isinstance(payload, dict) else {}

    def _dump(self, entries: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        handle, name = tempfile.mkstemp(dir=self.path.parent, prefix=".transients-")
        try:
            with os.fdopen(handle, "w", encoding="utf-8") as stream:
                json.dump(entries, stream, indent=2, sort_keys=True)
            os.replace(name, self.path)
        except OSError:
            Path(name).unlink(missing_ok=True)
            raise


__all__ = ["JsonFileStore", "MemoryStore", "TransientStore"]
