"""Blob store protocol.

Durable object storage used write-only for request logs.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class BlobStore(Protocol):
    """Protocol for write-once object storage."""

    async def put(self, key: str, data: bytes, content_type: str = "application/json") -> None:
        """Write an object.

        Args:
            key: Object key (slash-separated path)
            data: Object body
            content_type: Stored content type metadata

        Raises:
            BlobStoreError: If the write fails
        """
        ...

    def status(self) -> dict[str, object]:
        """Describe the backend for diagnostics."""
        ...
