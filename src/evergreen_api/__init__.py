"""Evergreen API - application metadata served through a two-tier cache.

This package provides a layered architecture:

Layers:
    - protocols: Interface contracts (KeyValueStore, BlobStore)
    - repositories: Redis, S3 and local-disk implementations
    - services: Memory cache, cache orchestration, request logging
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from evergreen_api.services import CacheService, MemoryCache

    service = CacheService(store=store, memory_cache=MemoryCache(ttl=3600))
    result = await service.fetch("app:microsoftedge", "microsoftedge")
    ```

For HTTP API:
    ```python
    from evergreen_api.api.app import app, create_app
    ```
"""

from evergreen_api.config import Settings, get_settings
from evergreen_api.entities import CachedResult, CacheEntryEntity, LogRecordEntity, Provenance
from evergreen_api.errors import (
    ConfigurationError,
    CorruptedDataError,
    EvergreenError,
    InvalidAppIdError,
    StoreError,
    StoreUnavailableError,
)
from evergreen_api.handlers import AppHandler, HealthHandler
from evergreen_api.protocols import BlobStore, KeyValueStore
from evergreen_api.repositories import LocalBlobStore, RedisKeyValueStore, S3BlobStore
from evergreen_api.services import CacheService, MemoryCache, RequestLogger

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    # Protocols (interfaces)
    "BlobStore",
    "KeyValueStore",
    # Services (business logic)
    "CacheService",
    "MemoryCache",
    "RequestLogger",
    # Handlers (HTTP)
    "AppHandler",
    "HealthHandler",
    # Repositories (data access)
    "LocalBlobStore",
    "RedisKeyValueStore",
    "S3BlobStore",
    # Entities (domain models)
    "CacheEntryEntity",
    "CachedResult",
    "LogRecordEntity",
    "Provenance",
    # Errors
    "ConfigurationError",
    "CorruptedDataError",
    "EvergreenError",
    "InvalidAppIdError",
    "StoreError",
    "StoreUnavailableError",
]
