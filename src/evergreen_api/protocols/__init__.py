"""Protocol interfaces for the external stores.

Protocols use structural typing, so tests can pass in-memory fakes and
deployments can swap backends (Redis, S3, local disk) without changing
the services that depend on them.
"""

from .blob_store import BlobStore
from .key_value_store import KeyValueStore

__all__ = [
    "BlobStore",
    "KeyValueStore",
]
