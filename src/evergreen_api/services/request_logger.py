"""Best-effort request logging to the blob store.

Log writes are detached from the response: `schedule` starts an asyncio
task and returns immediately. Pending writes are awaited by `drain`,
which the app lifespan calls on shutdown so the process does not exit
with writes still in flight. A failed write is logged and dropped.
"""

import asyncio
import json
import logging
import time
import uuid
from datetime import datetime, timezone

from starlette.requests import Request

from evergreen_api.entities import LogRecordEntity
from evergreen_api.protocols import BlobStore

logger = logging.getLogger(__name__)

# Primary resource routes; only these (and their sub-paths) are logged
LOGGED_EXACT_PATHS = frozenset({"/apps", "/app", "/endpoints/versions", "/endpoints/downloads"})
LOGGED_PATH_PREFIXES = ("/app/", "/apps/", "/endpoints/versions/", "/endpoints/downloads/")


def should_log(path: str) -> bool:
    """Whether a request path is part of the logged API surface."""
    if path == "/health":
        return False
    return path in LOGGED_EXACT_PATHS or path.startswith(LOGGED_PATH_PREFIXES)


def iso_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a Z suffix."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def make_log_key(timestamp: str) -> str:
    """Blob key of the form logs/<date>/<timestamp>_<random>.json."""
    suffix = uuid.uuid4().hex[:9]
    return f"logs/{timestamp[:10]}/{timestamp}_{suffix}.json"


def build_log_record(request: Request, start_time: float, now: datetime | None = None) -> LogRecordEntity:
    """Capture the request metadata worth keeping.

    Args:
        request: The inbound request
        start_time: time.monotonic() value taken when the request arrived
        now: Wall-clock time of the record (defaults to now, UTC)
    """
    headers = request.headers
    connecting_ip = headers.get("cf-connecting-ip")
    if connecting_ip is None and request.client is not None:
        connecting_ip = request.client.host

    return LogRecordEntity(
        timestamp=iso_timestamp(now or datetime.now(timezone.utc)),
        url=str(request.url),
        path=request.url.path,
        connecting_ip=connecting_ip,
        country=headers.get("cf-ipcountry"),
        region=headers.get("cf-region"),
        as_organization=headers.get("cf-asorganization"),
        user_agent=headers.get("user-agent"),
        processing_time_ms=int((time.monotonic() - start_time) * 1000),
    )


class RequestLogger:
    """Fire-and-forget recorder of request metadata.

    Example:
        ```python
        request_logger = RequestLogger(blob_store=LocalBlobStore("./logs"))

        # In the request path, after the response is determined
        request_logger.schedule(request, start_time)

        # On shutdown
        await request_logger.drain()
        ```
    """

    def __init__(self, blob_store: BlobStore | None) -> None:
        """Initialize the request logger.

        Args:
            blob_store: Log destination, or None when the binding is absent.
        """
        self._blob_store = blob_store
        self._pending: set[asyncio.Task] = set()

    def schedule(self, request: Request, start_time: float) -> asyncio.Task | None:
        """Start writing a log record in the background, if the path is logged.

        The record is built immediately so it reflects the time the
        response was ready, not the time the write happens.

        Returns:
            The background task, or None when nothing was scheduled
        """
        if self._blob_store is None or not should_log(request.url.path):
            return None

        record = build_log_record(request, start_time)
        task = asyncio.create_task(self.record(record))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def record(self, record: LogRecordEntity) -> None:
        """Write one record. Never raises."""
        if self._blob_store is None:
            logger.error("Logs blob store binding is not available")
            return

        key = make_log_key(record.timestamp)
        try:
            body = json.dumps(record.to_dict(), indent=2).encode("utf-8")
            await self._blob_store.put(key, body, content_type="application/json")
        except Exception:
            logger.exception("Failed to store request log %s", key)
            return
        logger.info("Log stored: %s", key)

    async def drain(self) -> None:
        """Wait for every scheduled write to finish."""
        if self._pending:
            logger.info("Waiting for %d pending log writes", len(self._pending))
            await asyncio.gather(*self._pending, return_exceptions=True)

    @property
    def enabled(self) -> bool:
        return self._blob_store is not None

    @property
    def pending(self) -> int:
        """Number of writes still in flight."""
        return len(self._pending)
