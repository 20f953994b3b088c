import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

CACHE_FILE_NAME = "cache.json"
SET_CLEAN_AGE = timedelta(hours=1)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(value: str) -> datetime:
    # RFC 3339 writers use a trailing Z for UTC
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    timestamp = datetime.fromisoformat(value)
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp


@dataclass(frozen=True)
class CacheEntry:
    """One cached API response for a location."""

    timestamp: datetime
    weather: Dict[str, Any]

    def is_stale(self, max_age: timedelta, now: Optional[datetime] = None) -> bool:
        """True when the entry is strictly older than ``max_age``."""
        return (now or _utcnow()) - self.timestamp > max_age

    def to_dict(self) -> Dict[str, Any]:
        return {"timestamp": self.timestamp.isoformat(), "weather": self.weather}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CacheEntry":
        return cls(timestamp=_parse_timestamp(data["timestamp"]), weather=data["weather"])


class Cache:
    """Location keyed store of raw API responses kept in ``cache.json``.

    The file sits in the same directory as the path it is built from
    (normally the default config file). The whole mapping is loaded once
    and rewritten after every mutation.
    """

    def __init__(self, config_path, now_func: Callable[[], datetime] = _utcnow):
        self.file_path = Path(config_path).parent / CACHE_FILE_NAME
        self.entries: Dict[str, CacheEntry] = {}
        self._now = now_func
        try:
            self._load()
        except FileNotFoundError:
            logger.debug(f"No cache file at {self.file_path}, starting empty")

    def _load(self):
        with open(self.file_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Malformed cache file {self.file_path}: expected an object")
        try:
            self.entries = {location: CacheEntry.from_dict(entry) for location, entry in data.items()}
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Malformed cache file {self.file_path}: {e}") from e
        logger.debug(f"Loaded {len(self.entries)} cache entries from {self.file_path}")

    def _save(self):
        data = {location: entry.to_dict() for location, entry in self.entries.items()}
        with open(self.file_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def now(self) -> datetime:
        """Current time as seen by this cache."""
        return self._now()

    def _prune(self, max_age: timedelta) -> int:
        now = self.now()
        stale = [location for location, entry in self.entries.items() if entry.is_stale(max_age, now)]
        for location in stale:
            del self.entries[location]
        return len(stale)

    def get(self, location: str) -> Tuple[Optional[CacheEntry], bool]:
        entry = self.entries.get(location)
        return entry, entry is not None

    def set(self, location: str, weather: Dict[str, Any]):
        """Store ``weather`` for ``location`` and persist the cache.

        Entries older than an hour are dropped first. If the write fails
        the in-memory mapping keeps the new entry.
        """
        self._prune(SET_CLEAN_AGE)
        self.entries[location] = CacheEntry(timestamp=self.now(), weather=weather)
        self._save()
        logger.debug(f"Cached weather for {location!r} in {self.file_path}")

    def clean(self, max_age: timedelta):
        """Remove entries older than ``max_age`` and rewrite the file."""
        deleted = self._prune(max_age)
        self._save()
        if deleted:
            logger.info(f"Cleaned {deleted} expired cache entries")
