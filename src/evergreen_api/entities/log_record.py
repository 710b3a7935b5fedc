"""Request log record domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class LogRecordEntity:
    """Metadata captured for one logged request."""

    timestamp: str
    url: str
    path: str
    connecting_ip: str | None
    country: str | None
    region: str | None
    as_organization: str | None
    user_agent: str | None
    processing_time_ms: int

    def to_dict(self) -> dict:
        """Field names as written to the blob store."""
        return {
            "timestamp": self.timestamp,
            "url": self.url,
            "path": self.path,
            "connectingIp": self.connecting_ip,
            "country": self.country,
            "region": self.region,
            "asOrganization": self.as_organization,
            "userAgent": self.user_agent,
            "processingTimeMs": self.processing_time_ms,
        }
