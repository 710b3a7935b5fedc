import logging
import os
import sys
from dataclasses import dataclass
from functools import lru_cache

import redis.asyncio as redis
import structlog
from dotenv import load_dotenv

load_dotenv()

# Persistent store keys for the fixed aggregate resources
ALL_APPS_KEY = "_allapps"
VERSION_ENDPOINTS_KEY = "endpoints-versions"
DOWNLOAD_ENDPOINTS_KEY = "endpoints-downloads"

LOG_BACKENDS = ("s3", "local")


def _optional(name: str) -> str | None:
    value = os.getenv(name)
    return value or None


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Persistent key-value store (unset = binding absent)
    redis_url: str | None = _optional("REDIS_URL")
    redis_password: str | None = _optional("REDIS_PASSWORD")

    # Memory cache
    cache_ttl: int = int(os.getenv("CACHE_TTL", "43200"))  # 12 hours

    # Request logs (unset = binding absent, logging disabled)
    logs_backend: str | None = _optional("LOGS_BACKEND")
    logs_bucket: str = os.getenv("LOGS_BUCKET", "evergreen-logs")
    logs_dir: str = os.getenv("LOGS_DIR", "./logs-bucket")
    s3_endpoint_url: str | None = _optional("S3_ENDPOINT_URL")
    s3_region: str | None = _optional("S3_REGION")

    # Service
    environment: str = os.getenv("ENVIRONMENT", "unknown")
    documentation_url: str = os.getenv("DOCUMENTATION_URL", "https://eucpilots.com/evergreen-docs/api/")
    health_probe_key: str = os.getenv("HEALTH_PROBE_KEY", ALL_APPS_KEY)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "false").lower() == "true"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_ttl <= 0:
            raise ValueError("CACHE_TTL must be a positive number of seconds")

        if self.logs_backend is not None and self.logs_backend not in LOG_BACKENDS:
            raise ValueError(f"LOGS_BACKEND must be one of {list(LOG_BACKENDS)}, got {self.logs_backend!r}")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def get_redis_client(settings: Settings) -> redis.Redis | None:
    """Create an asyncio Redis client, or None when no store is configured."""
    if settings.redis_url is None:
        return None
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=True,
    )


def json_log_formatter() -> logging.Formatter:
    """Formatter that renders stdlib log records as one JSON object per line."""
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.processors.TimeStamper(fmt="iso", key="time"),
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.format_exc_info,
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.EventRenamer("message"),
            structlog.processors.JSONRenderer(),
        ],
    )


def configure_logging(settings: Settings) -> None:
    """Structured logging: JSON lines for production, human-readable for local."""
    if settings.is_production:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(json_log_formatter())
        logging.basicConfig(level=settings.log_level, handlers=[handler])
    else:
        logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
