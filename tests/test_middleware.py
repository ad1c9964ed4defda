"""Tests for middleware: request IDs, access log and CORS allow-list."""

import pytest
from structlog.testing import capture_logs


@pytest.mark.asyncio
async def test_request_id_generated(client):
    """Each request gets a unique X-Request-ID header."""
    r1 = await client.get("/api/health")
    r2 = await client.get("/api/health")
    assert "X-Request-ID" in r1.headers
    assert "X-Request-ID" in r2.headers
    assert r1.headers["X-Request-ID"] != r2.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_propagated(client):
    """Incoming X-Request-ID is propagated through the response."""
    custom_id = "test-trace-12345"
    r = await client.get("/api/health", headers={"X-Request-ID": custom_id})
    assert r.headers["X-Request-ID"] == custom_id


@pytest.mark.asyncio
async def test_request_id_on_error_responses(client):
    r = await client.get("/api/users/missing")
    assert r.status_code == 404
    assert "X-Request-ID" in r.headers


@pytest.mark.asyncio
async def test_cors_allowed_origin(client):
    r = await client.options(
        "/api/users",
        headers={
            "Origin": "http://localhost:5500",
            "Access-Control-Request-Method": "POST",
        },
    )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "http://localhost:5500"
    assert r.headers["access-control-allow-credentials"] == "true"


@pytest.mark.asyncio
async def test_cors_unknown_origin_not_allowed(client):
    r = await client.get("/api/health", headers={"Origin": "http://evil.example.com"})
    assert "access-control-allow-origin" not in r.headers


@pytest.mark.asyncio
async def test_request_logged_with_status(client):
    with capture_logs() as logs:
        r = await client.get("/api/health", headers={"X-Request-ID": "trace-1"})
        await client.get("/api/users/missing")

    requests = [e for e in logs if e["event"] == "usergate.request"]
    assert [(e["path"], e["status"]) for e in requests] == [
        ("/api/health", r.status_code),
        ("/api/users/missing", 404),
    ]
    assert requests[0]["method"] == "GET"
    assert requests[0]["duration_ms"] >= 0
