"""Local filesystem implementation of BlobStore."""

import asyncio
import os
from pathlib import Path

from evergreen_api.errors import BlobStoreError


def sanitize_key(root: Path, key: str) -> Path:
    """Resolve an object key under root, rejecting traversal outside it."""
    root = root.resolve()
    candidate = root.joinpath(*key.split("/"))
    resolved = candidate.resolve(strict=False)
    if not resolved.is_relative_to(root):
        raise BlobStoreError(f"Invalid blob key: {key}")
    return resolved


class LocalBlobStore:
    """Writes objects as files under a root directory.

    Content type is not persisted; log objects are always JSON.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    async def put(self, key: str, data: bytes, content_type: str = "application/json") -> None:
        path = sanitize_key(self._root, key)
        try:
            await asyncio.to_thread(self._write, path, data)
        except OSError as e:
            raise BlobStoreError(f"Failed to write {key}: {e}") from e

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    def status(self) -> dict[str, object]:
        return {
            "backend": "local",
            "storage_path": str(self._root),
            "writable": self._root.exists() and os.access(self._root, os.W_OK),
        }
