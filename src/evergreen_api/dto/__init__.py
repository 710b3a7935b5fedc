"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract for the payloads
this service builds itself. Internal logic uses the entities package.
"""

from .responses import (
    BindingStatus,
    CacheDiagnostics,
    HealthCheckResponse,
    InfoResponse,
    KvTestResult,
    MessageResponse,
)

__all__ = [
    "BindingStatus",
    "CacheDiagnostics",
    "HealthCheckResponse",
    "InfoResponse",
    "KvTestResult",
    "MessageResponse",
]
