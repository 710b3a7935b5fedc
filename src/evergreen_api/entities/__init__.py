"""Domain entities for internal representation.

These are frozen dataclasses used internally by services. They are NOT
used for API contracts - use DTOs from the dto package for that.
"""

from .cache_entry import CacheEntryEntity
from .cached_result import CachedResult, Provenance
from .log_record import LogRecordEntity

__all__ = ["CacheEntryEntity", "CachedResult", "LogRecordEntity", "Provenance"]
