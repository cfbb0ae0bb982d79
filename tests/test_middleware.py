"""Tests for HTTP middleware and error mapping — security headers, request IDs."""

import pytest
from httpx import ASGITransport, AsyncClient

from bookshelf.main import create_app


@pytest.mark.asyncio
async def test_security_headers_on_health(client):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"
    assert r.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
    assert r.headers["Cache-Control"] == "no-store"


@pytest.mark.asyncio
async def test_security_headers_on_error_responses(client):
    """Headers are added to 401s too, not just successful responses."""
    r = await client.get("/verify")
    assert r.status_code == 401
    assert r.headers["X-Frame-Options"] == "DENY"


@pytest.mark.asyncio
async def test_request_id_generated(client):
    """Each request gets a unique X-Request-ID header."""
    r1 = await client.get("/health")
    r2 = await client.get("/health")
    assert "X-Request-ID" in r1.headers
    assert "X-Request-ID" in r2.headers
    assert r1.headers["X-Request-ID"] != r2.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_propagated(client):
    """Incoming X-Request-ID is echoed back."""
    custom_id = "test-trace-12345"
    r = await client.get("/health", headers={"X-Request-ID": custom_id})
    assert r.headers["X-Request-ID"] == custom_id


@pytest.mark.asyncio
async def test_no_hsts_on_http(client):
    r = await client.get("/health")
    assert "Strict-Transport-Security" not in r.headers


@pytest.mark.asyncio
async def test_unexpected_exception_becomes_500_message():
    app = create_app()

    @app.get("/boom")
    async def boom():
        raise OverflowError("int too large")

    # Starlette re-raises after the handler responds; keep the response.
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        r = await ac.get("/boom")

    assert r.status_code == 500
    assert r.json() == {"message": "Internal error"}
