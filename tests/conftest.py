"""Shared fixtures: in-memory stand-ins for the external stores."""

import asyncio
import json

import pytest
from fastapi.testclient import TestClient

from evergreen_api.api.app import create_app
from evergreen_api.config import Settings
from evergreen_api.errors import BlobStoreError

EDGE_RECORD = [
    {
        "Version": "131.0.2903.70",
        "Channel": "Stable",
        "Architecture": "x64",
        "URI": "https://msedge.sf.dl.delivery.mp.microsoft.com/MicrosoftEdgeEnterpriseX64.msi",
    }
]

ALL_APPS = [
    {"Name": "MicrosoftEdge", "Application": "Microsoft Edge", "Link": "https://www.microsoft.com/edge"},
    {"Name": "GoogleChrome", "Application": "Google Chrome", "Link": "https://www.google.com/chrome/"},
]


class FakeKeyValueStore:
    """Dict-backed KeyValueStore that records every read."""

    def __init__(self, data: dict[str, str] | None = None, error: Exception | None = None, delay: float = 0.0):
        self.data = dict(data or {})
        self.error = error
        self.delay = delay
        self.calls: list[str] = []
        self.closed = False

    async def get(self, key: str) -> str | None:
        self.calls.append(key)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.data.get(key)

    async def close(self) -> None:
        self.closed = True


class FakeBlobStore:
    """Dict-backed BlobStore."""

    def __init__(self, fail: bool = False):
        self.objects: dict[str, bytes] = {}
        self.content_types: dict[str, str] = {}
        self.fail = fail

    async def put(self, key: str, data: bytes, content_type: str = "application/json") -> None:
        if self.fail:
            raise BlobStoreError(f"Failed to write {key}")
        self.objects[key] = data
        self.content_types[key] = content_type

    def status(self) -> dict[str, object]:
        return {"backend": "fake", "objects": len(self.objects)}

    def records(self) -> list[dict]:
        return [json.loads(body) for body in self.objects.values()]


@pytest.fixture
def settings():
    return Settings(
        redis_url=None,
        logs_backend=None,
        cache_ttl=43200,
        environment="test",
        documentation_url="https://eucpilots.com/evergreen-docs/api/",
        health_probe_key="_allapps",
    )


@pytest.fixture
def store():
    return FakeKeyValueStore(
        {
            "_allapps": json.dumps(ALL_APPS),
            "microsoftedge": json.dumps(EDGE_RECORD),
            "endpoints-versions": json.dumps([{"Application": "MicrosoftEdge", "Endpoints": ["edgeupdates.microsoft.com"]}]),
            "endpoints-downloads": json.dumps([{"Application": "MicrosoftEdge", "Endpoints": ["msedge.sf.dl.delivery.mp.microsoft.com"]}]),
        }
    )


@pytest.fixture
def blob_store():
    return FakeBlobStore()


@pytest.fixture
def client(settings, store, blob_store):
    """Test client with lifespan running, so shutdown drains pending log writes."""
    app = create_app(settings, store=store, blob_store=blob_store)
    with TestClient(app) as test_client:
        yield test_client
