"""Custom exceptions and centralized FastAPI error handlers."""

import logging
from typing import Any

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from evergreen_api.entities import Provenance
from evergreen_api.utils import encode

logger = logging.getLogger(__name__)


class EvergreenError(Exception):
    """Base exception rendered as a JSON response with an HTTP status code."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        payload: dict[str, Any] | None = None,
        cache_status: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload if payload is not None else {"message": message}
        self.cache_status = cache_status

    @property
    def headers(self) -> dict[str, str]:
        if self.cache_status is None:
            return {}
        return {"X-Cache-Status": self.cache_status}


class ConfigurationError(EvergreenError):
    """A required external binding is not configured.

    The binding name goes into the logged message only; clients see a
    generic configuration error.
    """

    def __init__(self, binding: str):
        super().__init__(
            f"{binding} binding is not available",
            status_code=500,
            payload={"message": "Server configuration error"},
        )


class InvalidAppIdError(EvergreenError):
    def __init__(self, documentation_url: str):
        super().__init__(
            "Invalid application name. Call /apps for a list of available applications.",
            status_code=400,
            payload={
                "message": "Invalid application name. Call /apps for a list of available applications.",
                "documentation": documentation_url,
            },
        )


class StoreError(EvergreenError):
    """A read from the persistent store failed."""

    def __init__(self, message: str, cause: str):
        super().__init__(
            message,
            status_code=500,
            payload={"message": message, "error": cause},
            cache_status=Provenance.ERROR.cache_status,
        )
        self.cause = cause


class StoreUnavailableError(StoreError):
    def __init__(self, key: str, cause: Exception):
        super().__init__("Internal server error", f"Store read failed for key {key}: {cause}")
        self.key = key


class CorruptedDataError(StoreError):
    """Stored value exists but is not valid JSON."""

    def __init__(self, key: str):
        super().__init__("Stored data is corrupted", f"Invalid JSON data for key: {key}")
        self.key = key


class BlobStoreError(Exception):
    """A write to the log blob store failed. Never rendered to clients."""


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(EvergreenError)
    async def handle_evergreen_error(_request: Request, exc: EvergreenError):
        if exc.status_code >= 500:
            logger.error("%s: %s", type(exc).__name__, exc.payload.get("error", exc))
        return encode(exc.payload, exc.status_code, exc.headers)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(_request: Request, exc: StarletteHTTPException):
        return encode({"message": exc.detail}, exc.status_code, exc.headers)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return encode({"message": "Internal server error"}, 500)
