"""Repository layer for data access.

Concrete implementations of the store protocols. The repositories are
protocol-based (structural typing), not inheritance-based.
"""

from evergreen_api.config import Settings
from evergreen_api.protocols import BlobStore, KeyValueStore

from .local_blob_store import LocalBlobStore
from .redis_store import RedisKeyValueStore
from .s3_blob_store import S3BlobStore


def create_blob_store(settings: Settings) -> BlobStore | None:
    """Build the configured log backend, or None when logging is disabled."""
    if settings.logs_backend == "s3":
        return S3BlobStore.create(settings)
    if settings.logs_backend == "local":
        return LocalBlobStore(settings.logs_dir)
    return None


__all__ = [
    "BlobStore",
    "KeyValueStore",
    "LocalBlobStore",
    "RedisKeyValueStore",
    "S3BlobStore",
    "create_blob_store",
]
