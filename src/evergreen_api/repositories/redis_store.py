"""Redis implementation of KeyValueStore.

Application records are stored as JSON strings under plain keys (the
lowercased application identifier, or one of the aggregate keys).
"""

import logging

import redis.asyncio as redis

from evergreen_api.config import Settings, get_redis_client

logger = logging.getLogger(__name__)


class RedisKeyValueStore:
    """Read-only Redis store.

    This class satisfies the KeyValueStore protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(self, redis_client: redis.Redis) -> None:
        """Initialize the Redis store.

        Args:
            redis_client: asyncio Redis client, created with decode_responses=True.
        """
        self._client = redis_client

    @classmethod
    def create(cls, settings: Settings) -> "RedisKeyValueStore | None":
        """Factory method building a store from settings.

        Returns:
            Configured store, or None when REDIS_URL is not set
        """
        client = get_redis_client(settings)
        if client is None:
            logger.warning("REDIS_URL is not set; persistent store binding is unavailable")
            return None
        return cls(redis_client=client)

    async def get(self, key: str) -> str | None:
        value = await self._client.get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def close(self) -> None:
        await self._client.aclose()
