"""FastAPI application entry point for the Evergreen API."""

import logging
import time

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import Response

from evergreen_api.api.dependencies import AppHandlerDep, HealthHandlerDep, build_lifespan, get_request_logger
from evergreen_api.config import Settings, configure_logging, get_settings
from evergreen_api.errors import register_error_handlers
from evergreen_api.protocols import BlobStore, KeyValueStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def root(handler: AppHandlerDep) -> Response:
    """Root endpoint with API information."""
    return handler.root()


@router.get("/apps")
async def list_apps(handler: AppHandlerDep) -> Response:
    """Summaries (Name, Application, Link) of every supported application."""
    return await handler.list_apps()


@router.get("/app")
async def app_without_id(handler: AppHandlerDep) -> Response:
    return handler.app_required()


@router.get("/app/{app_id}")
async def get_app(app_id: str, handler: AppHandlerDep) -> Response:
    """Version and download details for one application."""
    return await handler.get_app(app_id)


@router.get("/endpoints")
async def endpoints(handler: AppHandlerDep) -> Response:
    return handler.endpoints_guidance()


@router.get("/endpoints/versions")
async def version_endpoints(handler: AppHandlerDep) -> Response:
    """URLs queried to find application versions."""
    return await handler.version_endpoints()


@router.get("/endpoints/downloads")
async def download_endpoints(handler: AppHandlerDep) -> Response:
    """URLs used to download application installers."""
    return await handler.download_endpoints()


@router.get("/health")
async def health(handler: HealthHandlerDep, clear: str | None = None) -> Response:
    """Health check with cache diagnostics. ``?clear=true`` empties the memory cache first."""
    return await handler.check(clear=clear == "true")


def create_app(
    settings: Settings | None = None,
    store: KeyValueStore | None = None,
    blob_store: BlobStore | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Application settings. Defaults to the environment.
        store: Persistent store; built from REDIS_URL if omitted.
        blob_store: Log backend; built from LOGS_BACKEND if omitted.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Evergreen API",
        description="Application metadata served from a two-tier memory + KV cache",
        version="0.1.0",
        lifespan=build_lifespan(settings, store=store, blob_store=blob_store),
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.monotonic()
        response = await call_next(request)
        # Scheduled, not awaited: the write never delays or alters the response
        get_request_logger(request).schedule(request, start_time)
        return response

    register_error_handlers(app)
    app.include_router(router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "evergreen_api.api.app:app",
        host=_settings.api_host,
        port=_settings.api_port,
        reload=_settings.api_reload,
    )
