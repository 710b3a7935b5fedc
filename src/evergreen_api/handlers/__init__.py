"""Handler layer for HTTP endpoints.

Handlers depend on services (business logic), not directly on repositories.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)
"""

from .app_handler import AppHandler
from .health_handler import HealthHandler

__all__ = [
    "AppHandler",
    "HealthHandler",
]
