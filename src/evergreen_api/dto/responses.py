"""Response DTOs for API endpoints.

Resource payloads (apps, endpoints) are served exactly as stored, so
only the fixed payloads built by this service are modelled here.
"""

from pydantic import BaseModel, ConfigDict, Field


class MessageResponse(BaseModel):
    """Guidance or error payload."""

    message: str = Field(..., description="Human-readable message")
    documentation: str | None = Field(None, description="Link to the API documentation")


class InfoResponse(BaseModel):
    """Response DTO for the root endpoint."""

    message: str = Field(..., description="Service description")
    documentation: str = Field(..., description="Link to the API documentation")
    endpoints: list[str] = Field(..., description="Supported resource routes")
    caching: str = Field(..., description="Caching strategy summary")


class BindingStatus(BaseModel):
    """Availability of the external bindings."""

    model_config = ConfigDict(populate_by_name=True)

    evergreen: bool = Field(..., description="Whether the persistent store is configured")
    logs_bucket: bool = Field(..., alias="logsBucket", description="Whether request logging is configured")


class CacheDiagnostics(BaseModel):
    """Memory-tier state."""

    model_config = ConfigDict(populate_by_name=True)

    memory_size: int = Field(..., alias="memorySize", ge=0)
    memory_keys: list[str] = Field(..., alias="memoryKeys")
    ttl_seconds: int = Field(..., alias="ttlSeconds", ge=0)
    ttl_hours: int | float = Field(..., alias="ttlHours", ge=0, description="Whole hours render as integers")
    cleared: bool | None = Field(None, description="Present and true when the cache was just cleared")


class KvTestResult(BaseModel):
    """Outcome of the synchronous store probe."""

    model_config = ConfigDict(populate_by_name=True)

    accessible: bool
    has_allapps: bool | None = Field(None, alias="hasAllapps")
    allapps_type: str | None = Field(None, alias="allappsType")
    allapps_length: int | str | None = Field(None, alias="allappsLength")
    raw_data_preview: str | None = Field(None, alias="rawDataPreview")
    error: str | None = None


class HealthCheckResponse(BaseModel):
    """Response DTO for the diagnostics endpoint.

    Serialize with ``model_dump(by_alias=True, exclude_unset=True)`` so
    optional sections only appear when they were filled in.
    """

    model_config = ConfigDict(populate_by_name=True)

    status: str = Field(..., description="'ok' or 'warning'")
    timestamp: str = Field(..., description="ISO-8601 UTC time of the check")
    bindings: BindingStatus
    environment: str
    cache: CacheDiagnostics
    kv_test: KvTestResult | None = Field(None, alias="kvTest")
