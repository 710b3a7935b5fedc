"""
Tests for the Evergreen API routes.
"""

import json
from dataclasses import replace

from fastapi.testclient import TestClient

from conftest import EDGE_RECORD, FakeBlobStore, FakeKeyValueStore
from evergreen_api.api.app import create_app
from evergreen_api.entities import Provenance


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    assert response.headers["x-cache-status"] == "INFO"
    data = response.json()
    assert data["message"] == "Evergreen API with hybrid caching"
    assert "documentation" in data
    assert "/app/{appId}" in data["endpoints"]
    assert data["caching"] == "2-tier: Memory + KV (12h TTL)"


def test_app_served_from_store_then_memory(client, store):
    """Cold cache reads the store, the repeat is a memory hit."""
    first = client.get("/app/MicrosoftEdge")
    assert first.status_code == 200
    assert first.headers["content-type"] == "application/json"
    assert first.headers["cache-control"] == "public, max-age=43200"
    assert first.headers["x-cache-status"] == "KV-MISS"
    assert first.json() == EDGE_RECORD

    second = client.get("/app/MicrosoftEdge")
    assert second.status_code == 200
    assert second.headers["x-cache-status"] == "MEMORY-HIT"
    assert second.json() == first.json()

    assert store.calls == ["microsoftedge"]


def test_app_identifier_is_case_insensitive(client, store):
    client.get("/app/MicrosoftEdge")
    response = client.get("/app/microsoftedge")
    assert response.headers["x-cache-status"] == "MEMORY-HIT"
    assert store.calls == ["microsoftedge"]


def test_app_invalid_identifier(client, store):
    response = client.get("/app/InvalidApp123!@#")
    assert response.status_code == 400
    data = response.json()
    assert "Invalid application name" in data["message"]
    assert data["documentation"].startswith("https://")
    assert store.calls == []


def test_app_identifier_too_long(client, store):
    response = client.get("/app/" + "a" * 65)
    assert response.status_code == 400
    assert store.calls == []


def test_app_without_identifier(client):
    response = client.get("/app")
    assert response.status_code == 400
    assert "Application name is required" in response.json()["message"]


def test_app_not_found(client):
    response = client.get("/app/NoSuchApp")
    assert response.status_code == 404
    assert response.headers["x-cache-status"] == Provenance.NOT_FOUND.cache_status == "NOT-FOUND"
    assert response.json()["message"].startswith("Application not found")


def test_app_corrupted_data_is_not_a_404(settings, blob_store):
    store = FakeKeyValueStore({"brokenapp": "{not json"})
    with TestClient(create_app(settings, store=store, blob_store=blob_store)) as client:
        response = client.get("/app/BrokenApp")

    assert response.status_code == 500
    assert response.headers["x-cache-status"] == "ERROR"
    data = response.json()
    assert data["message"] == "Stored data is corrupted"
    assert "brokenapp" in data["error"]


def test_app_nan_payload_is_corrupted_every_time(settings, blob_store):
    store = FakeKeyValueStore({"nanapp": '{"Version": NaN}'})
    with TestClient(create_app(settings, store=store, blob_store=blob_store)) as client:
        responses = [client.get("/app/NanApp") for _ in range(2)]

    for response in responses:
        assert response.status_code == 500
        assert response.headers["x-cache-status"] == "ERROR"
        assert response.json()["message"] == "Stored data is corrupted"
    assert store.calls == ["nanapp", "nanapp"]


def test_app_store_failure(settings, blob_store):
    store = FakeKeyValueStore(error=ConnectionError("connection refused"))
    with TestClient(create_app(settings, store=store, blob_store=blob_store)) as client:
        response = client.get("/app/MicrosoftEdge")

    assert response.status_code == 500
    assert response.headers["x-cache-status"] == "ERROR"
    assert response.json()["message"] == "Internal server error"


def test_missing_store_binding(settings, blob_store):
    with TestClient(create_app(settings, blob_store=blob_store)) as client:
        for path in ("/apps", "/app/MicrosoftEdge", "/endpoints/versions", "/endpoints/downloads"):
            response = client.get(path)
            assert response.status_code == 500
            assert response.json() == {"message": "Server configuration error"}


def test_apps(client):
    response = client.get("/apps")
    assert response.status_code == 200
    apps = response.json()
    assert isinstance(apps, list)
    assert set(apps[0]) == {"Name", "Application", "Link"}


def test_apps_empty_store(settings, blob_store):
    with TestClient(create_app(settings, store=FakeKeyValueStore(), blob_store=blob_store)) as client:
        response = client.get("/apps")

    assert response.status_code == 404
    assert response.headers["x-cache-status"] == "NOT-FOUND"
    assert response.json()["message"] == "No apps available"


def test_endpoints_guidance(client, store):
    response = client.get("/endpoints")
    assert response.status_code == 404
    assert "/endpoints/versions" in response.json()["message"]
    assert store.calls == []


def test_endpoints_versions_and_downloads(client):
    for path in ("/endpoints/versions", "/endpoints/downloads"):
        response = client.get(path)
        assert response.status_code == 200
        assert response.headers["x-cache-status"] == "KV-MISS"
        entry = response.json()[0]
        assert set(entry) == {"Application", "Endpoints"}


def test_endpoints_not_available(settings, blob_store):
    with TestClient(create_app(settings, store=FakeKeyValueStore(), blob_store=blob_store)) as client:
        response = client.get("/endpoints/downloads")

    assert response.status_code == 404
    assert response.json()["message"] == "No endpoints data available"


def test_unknown_route(client):
    response = client.get("/nope")
    assert response.status_code == 404
    assert "message" in response.json()


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.headers["x-cache-status"] == "INFO"
    data = response.json()
    assert data["status"] == "ok"
    assert data["environment"] == "test"
    assert data["bindings"] == {"evergreen": True, "logsBucket": True}
    assert data["cache"]["ttlSeconds"] == 43200
    assert data["cache"]["ttlHours"] == 12
    assert isinstance(data["cache"]["ttlHours"], int)
    assert "cleared" not in data["cache"]
    assert data["kvTest"]["accessible"] is True
    assert data["kvTest"]["hasAllapps"] is True
    assert data["kvTest"]["allappsType"] == "array"
    assert data["kvTest"]["allappsLength"] == 2
    assert len(data["kvTest"]["rawDataPreview"]) <= 100


def test_health_fractional_ttl_hours(settings, store):
    with TestClient(create_app(replace(settings, cache_ttl=5400), store=store)) as client:
        cache = client.get("/health").json()["cache"]

    assert cache["ttlSeconds"] == 5400
    assert cache["ttlHours"] == 1.5


def test_health_reports_memory_keys(client):
    client.get("/app/MicrosoftEdge")
    data = client.get("/health").json()
    assert data["cache"]["memorySize"] == 1
    assert data["cache"]["memoryKeys"] == ["app:microsoftedge"]


def test_health_clear(client, store):
    client.get("/apps")
    response = client.get("/health?clear=true")
    assert response.status_code == 200
    assert response.headers["x-cache-status"] == "CLEARED"
    data = response.json()
    assert data["cache"]["cleared"] is True
    assert data["cache"]["memorySize"] == 0
    assert data["cache"]["memoryKeys"] == []

    assert client.get("/apps").headers["x-cache-status"] == "KV-MISS"
    assert store.calls.count("_allapps") == 3  # two /apps reads and the health probe


def test_health_without_store(settings):
    with TestClient(create_app(settings)) as client:
        response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "warning"
    assert data["bindings"] == {"evergreen": False, "logsBucket": False}
    assert data["kvTest"]["accessible"] is False
    assert "error" in data["kvTest"]


def test_health_probe_failure(settings):
    store = FakeKeyValueStore(error=TimeoutError("timed out"))
    with TestClient(create_app(settings, store=store)) as client:
        data = client.get("/health").json()

    assert data["status"] == "warning"
    assert data["kvTest"] == {"accessible": False, "error": "timed out"}


def test_requests_are_logged_after_response(settings, store):
    blob_store = FakeBlobStore()
    with TestClient(create_app(settings, store=store, blob_store=blob_store)) as client:
        client.get("/app/MicrosoftEdge", headers={"User-Agent": "EvergreenAPI_Tests/1.0.0", "cf-ipcountry": "AU"})
        client.get("/health")
        client.get("/")
        client.get("/endpoints")

    records = blob_store.records()
    assert len(records) == 1
    record = records[0]
    assert record["path"] == "/app/MicrosoftEdge"
    assert record["userAgent"] == "EvergreenAPI_Tests/1.0.0"
    assert record["country"] == "AU"
    assert record["processingTimeMs"] >= 0

    key = next(iter(blob_store.objects))
    assert key.startswith(f"logs/{record['timestamp'][:10]}/")
    assert blob_store.content_types[key] == "application/json"


def test_log_failures_do_not_affect_responses(settings, store):
    blob_store = FakeBlobStore(fail=True)
    with TestClient(create_app(settings, store=store, blob_store=blob_store)) as client:
        response = client.get("/apps")

    assert response.status_code == 200
    assert blob_store.objects == {}


def test_logging_disabled_without_blob_binding(settings, store):
    with TestClient(create_app(settings, store=store)) as client:
        response = client.get("/apps")
        assert response.status_code == 200
        assert client.app.state.request_logger.enabled is False


def test_shutdown_closes_store(settings, store, blob_store):
    with TestClient(create_app(settings, store=store, blob_store=blob_store)) as client:
        client.get("/apps")
    assert store.closed is True


def test_stored_payload_passes_through_unchanged(settings):
    payload = {"Name": "Zoom", "Nested": {"Versions": [1, 2, 3]}}
    store = FakeKeyValueStore({"zoom": json.dumps(payload)})
    with TestClient(create_app(settings, store=store)) as client:
        assert client.get("/app/Zoom").json() == payload
