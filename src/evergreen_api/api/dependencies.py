"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from evergreen_api.config import Settings
from evergreen_api.handlers import AppHandler, HealthHandler
from evergreen_api.protocols import BlobStore, KeyValueStore
from evergreen_api.repositories import RedisKeyValueStore, create_blob_store
from evergreen_api.services import CacheService, MemoryCache, RequestLogger

logger = logging.getLogger(__name__)


def _from_state(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise RuntimeError(f"{name} not initialized. Check lifespan setup.")
    return value


def get_app_handler(request: Request) -> AppHandler:
    """Dependency injection for AppHandler from app.state.

    Raises:
        RuntimeError: If the handler is not initialized
    """
    return _from_state(request, "app_handler")


def get_health_handler(request: Request) -> HealthHandler:
    """Dependency injection for HealthHandler from app.state."""
    return _from_state(request, "health_handler")


def get_request_logger(request: Request) -> RequestLogger:
    """Dependency injection for RequestLogger from app.state."""
    return _from_state(request, "request_logger")


def build_lifespan(
    settings: Settings,
    store: KeyValueStore | None = None,
    blob_store: BlobStore | None = None,
):
    """Create the lifespan context manager for an app instance.

    Collaborators passed in are used as-is; anything omitted is built
    from settings. A missing binding is reported, not fatal: the routes
    that need it answer with a configuration error.

    Args:
        settings: Application settings
        store: Persistent store override (tests pass an in-memory fake)
        blob_store: Log backend override
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initializes all layers and stores them in app.state.

        Cleanup:
            Waits for pending log writes, closes the store, and removes
            all services from app.state on shutdown
        """
        kv_store = store if store is not None else RedisKeyValueStore.create(settings)
        logs = blob_store if blob_store is not None else create_blob_store(settings)

        cache_service = CacheService(
            store=kv_store,
            memory_cache=MemoryCache(ttl=settings.cache_ttl),
        )
        request_logger = RequestLogger(blob_store=logs)

        app.state.cache_service = cache_service
        app.state.request_logger = request_logger
        app.state.app_handler = AppHandler(
            cache_service=cache_service,
            documentation_url=settings.documentation_url,
        )
        app.state.health_handler = HealthHandler(
            cache_service=cache_service,
            request_logger=request_logger,
            environment=settings.environment,
            probe_key=settings.health_probe_key,
        )

        logger.info(
            "Evergreen API started (store=%s, logs=%s, ttl=%ss)",
            "bound" if kv_store is not None else "missing",
            logs.status() if logs is not None else "disabled",
            settings.cache_ttl,
        )

        yield

        await request_logger.drain()
        if kv_store is not None:
            await kv_store.close()

        del app.state.health_handler
        del app.state.app_handler
        del app.state.request_logger
        del app.state.cache_service
        logger.info("Evergreen API shut down")

    return lifespan


# Type aliases for cleaner dependency injection
AppHandlerDep = Annotated[AppHandler, Depends(get_app_handler)]
HealthHandlerDep = Annotated[HealthHandler, Depends(get_health_handler)]
