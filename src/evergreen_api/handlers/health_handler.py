"""HTTP handler for the diagnostics route."""

import logging
from datetime import datetime, timezone
from typing import Any

from starlette.responses import Response

from evergreen_api.dto import BindingStatus, CacheDiagnostics, HealthCheckResponse, KvTestResult
from evergreen_api.services import CacheService, RequestLogger
from evergreen_api.services.request_logger import iso_timestamp
from evergreen_api.utils import INVALID, decode, encode

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 100


def json_type(value: Any) -> str:
    """JSON type name of a decoded value."""
    if value is INVALID:
        return "invalid"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


class HealthHandler:
    """Reports binding availability, memory-tier state and store reachability."""

    def __init__(
        self,
        cache_service: CacheService,
        request_logger: RequestLogger,
        environment: str,
        probe_key: str,
    ) -> None:
        self._cache = cache_service
        self._request_logger = request_logger
        self._environment = environment
        self._probe_key = probe_key

    async def check(self, clear: bool = False) -> Response:
        """Handle GET /health requests.

        Args:
            clear: Drop every memory-tier entry before reporting.
        """
        try:
            if clear:
                self._cache.clear()

            kv_test = await self._probe()
            memory = self._cache.memory_cache
            hours = memory.ttl / 3600
            diagnostics = CacheDiagnostics(
                memory_size=memory.size(),
                memory_keys=memory.keys(),
                ttl_seconds=memory.ttl,
                ttl_hours=int(hours) if hours.is_integer() else hours,
                **({"cleared": True} if clear else {}),
            )

            health = HealthCheckResponse(
                status="ok" if kv_test.accessible else "warning",
                timestamp=iso_timestamp(datetime.now(timezone.utc)),
                bindings=BindingStatus(
                    evergreen=self._cache.has_store,
                    logs_bucket=self._request_logger.enabled,
                ),
                environment=self._environment,
                cache=diagnostics,
                kv_test=kv_test,
            )
        except Exception as e:
            logger.exception("Health check error")
            return encode({"status": "error", "message": "Health check failed", "error": str(e)}, 500)

        body = health.model_dump(by_alias=True, exclude_unset=True)
        return encode(body, 200, {"X-Cache-Status": "CLEARED" if clear else "INFO"})

    async def _probe(self) -> KvTestResult:
        if not self._cache.has_store:
            return KvTestResult(accessible=False, error="Persistent store binding is not available")

        try:
            raw = await self._cache.probe(self._probe_key)
        except Exception as e:
            logger.exception("Store probe failed for %s", self._probe_key)
            return KvTestResult(accessible=False, error=str(e))

        parsed = decode(raw) if raw is not None else None
        logger.info("Store probe for %s: %s", self._probe_key, "data found" if raw is not None else "null")
        return KvTestResult(
            accessible=True,
            has_allapps=raw is not None,
            allapps_type=json_type(parsed),
            allapps_length=len(parsed) if isinstance(parsed, list) else "not-array",
            raw_data_preview=raw[:PREVIEW_LENGTH] if raw is not None else None,
        )
