"""HTTP handlers for the application metadata routes.

Handlers turn CacheService results into HTTP responses. Configuration,
validation and store failures are raised as EvergreenError subclasses
and rendered by the centralized error handlers.
"""

import logging

from starlette.responses import Response

from evergreen_api.config import ALL_APPS_KEY, DOWNLOAD_ENDPOINTS_KEY, VERSION_ENDPOINTS_KEY
from evergreen_api.dto import InfoResponse, MessageResponse
from evergreen_api.entities import Provenance
from evergreen_api.errors import ConfigurationError, InvalidAppIdError
from evergreen_api.services import CacheService
from evergreen_api.utils import encode, validate_app_id

logger = logging.getLogger(__name__)

RESOURCE_ROUTES = ["/apps", "/app/{appId}", "/endpoints/versions", "/endpoints/downloads", "/health"]


class AppHandler:
    """HTTP handlers for the resource routes.

    Each cache-backed route runs the same steps: validate input, check
    the store binding, fetch through the cache, map the result to a
    response.

    Example:
        ```python
        handler = AppHandler(cache_service=service, documentation_url=settings.documentation_url)

        @app.get("/app/{app_id}")
        async def get_app(app_id: str):
            return await handler.get_app(app_id)
        ```
    """

    def __init__(self, cache_service: CacheService, documentation_url: str) -> None:
        """Initialize the handler.

        Args:
            cache_service: Two-tier cache for store reads (required).
            documentation_url: Link included in guidance payloads.
        """
        self._cache = cache_service
        self._docs = documentation_url

    def root(self) -> Response:
        """Handle GET / requests."""
        hours = self._cache.memory_cache.ttl / 3600
        info = InfoResponse(
            message="Evergreen API with hybrid caching",
            documentation=self._docs,
            endpoints=RESOURCE_ROUTES,
            caching=f"2-tier: Memory + KV ({hours:g}h TTL)",
        )
        return encode(info.model_dump(), 200, {"X-Cache-Status": "INFO"})

    async def list_apps(self) -> Response:
        """Handle GET /apps requests."""
        return await self._fetch_or_404(
            "apps:all",
            ALL_APPS_KEY,
            MessageResponse(message="No apps available"),
        )

    def app_required(self) -> Response:
        """Handle GET /app requests (no identifier)."""
        return self._message(
            400,
            "Application name is required. Please specify a valid application name in the URL "
            "(e.g., /app/MicrosoftEdge). Call /apps for a list of available applications.",
        )

    async def get_app(self, app_id: str) -> Response:
        """Handle GET /app/{app_id} requests.

        Raises:
            InvalidAppIdError: If the identifier fails validation
            ConfigurationError: If no persistent store is configured
            StoreError: If the store read fails or the record is corrupted
        """
        if not validate_app_id(app_id):
            raise InvalidAppIdError(self._docs)

        key = app_id.lower()
        logger.info("Fetching app: %s", key)
        return await self._fetch_or_404(
            f"app:{key}",
            key,
            MessageResponse(
                message="Application not found. Call /apps for a list of available applications.",
                documentation=self._docs,
            ),
        )

    def endpoints_guidance(self) -> Response:
        """Handle GET /endpoints requests."""
        return self._message(
            404,
            "Method not found. Supported endpoint calls are /endpoints/versions and /endpoints/downloads.",
        )

    async def version_endpoints(self) -> Response:
        """Handle GET /endpoints/versions requests."""
        return await self._fetch_or_404(
            "endpoints:versions",
            VERSION_ENDPOINTS_KEY,
            MessageResponse(message="No endpoints data available"),
        )

    async def download_endpoints(self) -> Response:
        """Handle GET /endpoints/downloads requests."""
        return await self._fetch_or_404(
            "endpoints:downloads",
            DOWNLOAD_ENDPOINTS_KEY,
            MessageResponse(message="No endpoints data available"),
        )

    async def _fetch_or_404(self, cache_key: str, store_key: str, not_found: MessageResponse) -> Response:
        if not self._cache.has_store:
            raise ConfigurationError("persistent store")

        cached = await self._cache.fetch(cache_key, store_key)
        if cached is None:
            headers = {"X-Cache-Status": Provenance.NOT_FOUND.cache_status}
            return encode(not_found.model_dump(exclude_none=True), 404, headers)

        logger.info("Returning %s from %s", cache_key, cached.provenance.value)
        return cached.response

    def _message(self, status_code: int, message: str) -> Response:
        body = MessageResponse(message=message, documentation=self._docs)
        return encode(body.model_dump(exclude_none=True), status_code)
