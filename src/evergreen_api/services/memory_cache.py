"""Process-local memory tier.

Each worker process has its own instance. Different workers may briefly
disagree after the persistent store is updated; the window is bounded by
the TTL.
"""

import logging
import time
from collections.abc import Callable
from typing import Any

from evergreen_api.entities import CacheEntryEntity

logger = logging.getLogger(__name__)

DEFAULT_TTL = 12 * 60 * 60  # seconds


class MemoryCache:
    """Time-expiring mapping from cache key to decoded value.

    Expired entries are evicted lazily, only when that key is read. There
    is no size bound; the key space is the set of application identifiers
    plus a few aggregate keys.

    Example:
        ```python
        cache = MemoryCache(ttl=60)
        cache.set("app:microsoftedge", {"Name": "Microsoft Edge"})
        cache.get("app:microsoftedge")
        ```
    """

    def __init__(self, ttl: int = DEFAULT_TTL, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize the memory cache.

        Args:
            ttl: Default time-to-live in seconds.
            clock: Time source in seconds; injectable for tests.
        """
        self._entries: dict[str, CacheEntryEntity] = {}
        self._ttl = ttl
        self._clock = clock

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value for key if it has not expired.

        Args:
            key: Cache key
            default: Returned when the key is absent or expired

        Returns:
            The cached value or default
        """
        entry = self._entries.get(key)
        if entry is None:
            return default

        if entry.is_expired(self._clock()):
            # Another request may already have replaced it
            if self._entries.get(key) is entry:
                del self._entries[key]
            return default

        logger.debug("Memory cache HIT for: %s", key)
        return entry.value

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Insert or replace an entry expiring ttl seconds from now."""
        ttl = self._ttl if ttl is None else ttl
        self._entries[key] = CacheEntryEntity(value=value, expires_at=self._clock() + ttl)
        logger.debug("Memory cached: %s", key)

    def clear(self) -> None:
        self._entries.clear()

    def size(self) -> int:
        return len(self._entries)

    def keys(self) -> list[str]:
        return list(self._entries)

    @property
    def ttl(self) -> int:
        """Default TTL in seconds."""
        return self._ttl
