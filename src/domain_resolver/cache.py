"""
Cache collaborators for downloaded sources.

Entries are plain text keyed by string, with an optional time-to-live in
seconds. MemoryCache keeps entries in the process; FileCache persists one
JSON envelope per key in a directory.
"""

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Optional, Protocol

from domain_resolver.exceptions import CacheCorrupted, PersistenceError


Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Cache(Protocol):
    """Key/value text store with per-entry expiry."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str, ttl: Optional[float] = None) -> bool:
        ...


def _expires_at(now: datetime, ttl: Optional[float]) -> Optional[datetime]:
    if ttl is None:
        return None
    return now + timedelta(seconds=ttl)


class MemoryCache:
    """In-process cache; entries vanish with the process."""

    def __init__(self, clock: Clock = utc_now) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[str, Optional[datetime]]] = {}

    def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if expires_at is not None and expires_at <= self._clock():
            del self._entries[key]
            return None

        return value

    def set(self, key: str, value: str, ttl: Optional[float] = None) -> bool:
        self._entries[key] = (value, _expires_at(self._clock(), ttl))
        return True

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()


class FileCache:
    """
    Directory-backed cache.

    Each key is stored as `<key>.json` holding the value and its expiry
    timestamp (ISO-8601, or null for entries that never expire).
    """

    def __init__(self, directory: Path, clock: Clock = utc_now) -> None:
        self._directory = Path(directory)
        self._clock = clock

    @property
    def directory(self) -> Path:
        return self._directory

    def _path(self, key: str) -> Path:
        return self._directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        """
        Read an entry, treating expired entries as missing.

        Raises:
            CacheCorrupted: If the stored envelope can not be decoded
            PersistenceError: If the file exists but can not be read
        """
        path = self._path(key)
        if not path.exists():
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                envelope = json.load(f)
        except json.JSONDecodeError as e:
            raise CacheCorrupted(key, f"invalid JSON envelope ({e})") from e
        except OSError as e:
            raise PersistenceError(
                code="io_error",
                message=f"Failed to read cache file: {e}",
                details={"file_path": str(path)},
            ) from e

        if not isinstance(envelope, dict) or not isinstance(envelope.get("value"), str):
            raise CacheCorrupted(key, "the envelope has no text value")

        expires_at = envelope.get("expires_at")
        if expires_at is not None:
            try:
                expiry = datetime.fromisoformat(expires_at)
            except (TypeError, ValueError) as e:
                raise CacheCorrupted(key, f"invalid expiry {expires_at!r}") from e
            if expiry <= self._clock():
                path.unlink(missing_ok=True)
                return None

        return envelope["value"]

    def set(self, key: str, value: str, ttl: Optional[float] = None) -> bool:
        """
        Store an entry.

        Raises:
            PersistenceError: If the file can not be written
        """
        expires_at = _expires_at(self._clock(), ttl)
        envelope = {
            "value": value,
            "expires_at": expires_at.isoformat() if expires_at else None,
        }

        self._directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(envelope, f, ensure_ascii=False)
        except OSError as e:
            raise PersistenceError(
                code="io_error",
                message=f"Failed to write cache file: {e}",
                details={"file_path": str(path)},
            ) from e

        return True
