"""
CacheService: explicit key/value cache with per-entry TTL.

Instantiated once and handed to the stores by reference. The clock is
injectable so tests can move time forward without sleeping.
"""

from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional, Tuple

from ..models.session_models import utcnow


Clock = Callable[[], datetime]


class CacheService:
    """In-memory TTL cache.

    Parameters
    ----------
    clock:
        Zero-argument callable returning the current aware datetime.
        Defaults to UTC wall-clock time.
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock: Clock = clock or utcnow
        # key -> (value, expires_at or None for no expiry)
        self._entries: Dict[str, Tuple[Any, Optional[datetime]]] = {}

    def now(self) -> datetime:
        return self._clock()

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None if absent or expired.

        Expired entries are evicted on read.
        """
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= self.now():
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl: Optional[timedelta] = None) -> Optional[datetime]:
        """Store `value` under `key` and return its expiry (None = never)."""
        expires_at = self.now() + ttl if ttl is not None else None
        self._entries[key] = (value, expires_at)
        return expires_at

    def invalidate(self, key: str) -> bool:
        """Drop `key`. Returns True if an entry was present."""
        return self._entries.pop(key, None) is not None

    def expires_at(self, key: str) -> Optional[datetime]:
        entry = self._entries.get(key)
        return entry[1] if entry is not None else None

    def purge_expired(self) -> int:
        """Evict every expired entry and return how many were removed."""
        now = self.now()
        expired = [
            key
            for key, (_, expires_at) in self._entries.items()
            if expires_at is not None and expires_at <= now
        ]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)
