"""Memory cache entry domain entity."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CacheEntryEntity:
    """A decoded store value held in the memory tier.

    Attributes:
        value: The decoded JSON value
        expires_at: Monotonic-clock deadline (insertion time + TTL)
    """

    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at
