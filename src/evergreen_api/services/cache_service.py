"""Two-tier read path: memory cache in front of the persistent store.

Lookups within a request are strictly sequential: memory first, then the
store only on a miss. A store hit is decoded and written back into the
memory tier before it is returned.
"""

import asyncio
import logging
from typing import Any

from evergreen_api.entities import CachedResult, Provenance
from evergreen_api.errors import ConfigurationError, CorruptedDataError, StoreUnavailableError
from evergreen_api.protocols import KeyValueStore
from evergreen_api.utils import INVALID, decode, encode

from .memory_cache import MemoryCache

logger = logging.getLogger(__name__)

_MISSING = object()


class CacheService:
    """Core cache orchestration service.

    Depends on the KeyValueStore PROTOCOL, so tests pass an in-memory
    fake and deployments pass RedisKeyValueStore.

    Results:
        - CachedResult(provenance=MEMORY): served from the memory tier, no store access
        - CachedResult(provenance=STORE): memory miss, store hit, now cached in memory
        - None: the store confirms the key does not exist
        - raises StoreError: store I/O failure or corrupted stored JSON

    Not-found and error responses are rendered by the handlers because
    their HTTP semantics differ per route.

    Example:
        ```python
        service = CacheService(store=RedisKeyValueStore.create(settings))

        result = await service.fetch("app:microsoftedge", "microsoftedge")
        if result is None:
            ...  # 404
        return result.response
        ```
    """

    def __init__(
        self,
        store: KeyValueStore | None,
        memory_cache: MemoryCache | None = None,
        coalesce_reads: bool = True,
    ) -> None:
        """Initialize the cache service.

        Args:
            store: Persistent store, or None when the binding is absent.
            memory_cache: Memory tier. A fresh one with the default TTL if omitted.
            coalesce_reads: Share one in-flight store read between concurrent
                requests for the same cold key.
        """
        self._store = store
        self._memory = memory_cache if memory_cache is not None else MemoryCache()
        self._coalesce = coalesce_reads
        self._in_flight: dict[str, asyncio.Future] = {}

    async def fetch(self, cache_key: str, store_key: str) -> CachedResult | None:
        """Look a resource up in memory, then in the persistent store.

        Args:
            cache_key: Logical memory-cache key (e.g. ``app:microsoftedge``)
            store_key: Persistent store key (e.g. ``microsoftedge``)

        Returns:
            CachedResult on a hit, None when the store has no such key

        Raises:
            ConfigurationError: No persistent store is configured
            StoreUnavailableError: The store read failed
            CorruptedDataError: The stored value is not valid JSON
        """
        cached = self._memory.get(cache_key, _MISSING)
        if cached is not _MISSING:
            return self._result(cached, Provenance.MEMORY)

        if self._store is None:
            raise ConfigurationError("persistent store")

        raw = await self._read(store_key)
        if raw is None:
            logger.info("No data found in store for: %s", store_key)
            return None

        value = decode(raw)
        if value is INVALID:
            raise CorruptedDataError(store_key)

        self._memory.set(cache_key, value)
        return self._result(value, Provenance.STORE)

    async def _read(self, store_key: str) -> str | None:
        if not self._coalesce:
            return await self._load(store_key)

        pending = self._in_flight.get(store_key)
        if pending is None:
            pending = asyncio.ensure_future(self._load(store_key))
            self._in_flight[store_key] = pending
            pending.add_done_callback(lambda _: self._in_flight.pop(store_key, None))
        # shield: one caller going away must not cancel the read for the others
        return await asyncio.shield(pending)

    async def _load(self, store_key: str) -> str | None:
        logger.info("Fetching from store: %s", store_key)
        try:
            return await self._store.get(store_key)
        except Exception as e:
            logger.exception("Store read failed for %s", store_key)
            raise StoreUnavailableError(store_key, e) from e

    def _result(self, data: Any, provenance: Provenance) -> CachedResult:
        response = encode(
            data,
            200,
            {
                "Cache-Control": f"public, max-age={self._memory.ttl}",
                "X-Cache-Status": provenance.cache_status,
            },
        )
        return CachedResult(data=data, provenance=provenance, response=response)

    async def probe(self, key: str) -> str | None:
        """Read a key straight from the store, bypassing the memory tier.

        Used by diagnostics to confirm end-to-end reachability. Errors propagate.
        """
        if self._store is None:
            raise ConfigurationError("persistent store")
        return await self._store.get(key)

    def clear(self) -> None:
        """Drop every memory-tier entry. Operational use only."""
        self._memory.clear()
        logger.warning("Memory cache cleared")

    @property
    def has_store(self) -> bool:
        return self._store is not None

    @property
    def memory_cache(self) -> MemoryCache:
        """Get the underlying memory tier (for diagnostics and testing)."""
        return self._memory

    @property
    def store(self) -> KeyValueStore | None:
        """Get the underlying store (for testing)."""
        return self._store
