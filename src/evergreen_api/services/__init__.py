"""Service layer for business logic.

Services depend on protocols (interfaces), not concrete implementations,
making them testable with in-memory fakes.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)
"""

from .cache_service import CacheService
from .memory_cache import DEFAULT_TTL, MemoryCache
from .request_logger import RequestLogger, should_log

__all__ = [
    "DEFAULT_TTL",
    "CacheService",
    "MemoryCache",
    "RequestLogger",
    "should_log",
]
