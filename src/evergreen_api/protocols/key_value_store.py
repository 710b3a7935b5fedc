"""Persistent key-value store protocol.

Defines the read-only interface this service needs from the durable,
network-backed store that holds application metadata. The store is
populated out-of-band; nothing here writes to it.

Implementations can include:
- Redis (default)
- Any other string-keyed store with an async client
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Protocol for the persistent key-value store.

    Any type that implements these methods satisfies the protocol, no
    explicit inheritance needed.

    Example:
        ```python
        from evergreen_api.protocols import KeyValueStore

        store: KeyValueStore = RedisKeyValueStore.create(settings)
        raw = await store.get("microsoftedge")
        ```
    """

    async def get(self, key: str) -> str | None:
        """Read the raw text stored under a key.

        Args:
            key: The store key

        Returns:
            The stored text, or None when the key does not exist

        Raises:
            Exception: Any I/O failure talking to the store
        """
        ...

    async def close(self) -> None:
        """Release client resources."""
        ...
