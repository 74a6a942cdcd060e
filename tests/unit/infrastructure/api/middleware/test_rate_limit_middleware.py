"""Unit tests for rate limit middleware."""

from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from rollcall.infrastructure.api.middleware.context_middleware import ContextMiddleware
from rollcall.infrastructure.api.middleware.rate_limit_middleware import RateLimitMiddleware
from rollcall.infrastructure.api.middleware.rate_limit_storage import RateLimitStorage

SETTINGS_PATH = "rollcall.infrastructure.api.middleware.rate_limit_middleware.get_settings"
CONTEXT_SETTINGS_PATH = "rollcall.infrastructure.api.middleware.context_middleware.get_settings"


def create_test_app(storage: RateLimitStorage) -> FastAPI:
    """Create a test FastAPI app with context and rate limit middleware."""
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, storage=storage)
    app.add_middleware(ContextMiddleware)

    @app.get("/test")
    async def test_endpoint():
        return {"message": "test"}

    @app.post("/users")
    async def signup():
        return {"ok": True}

    return app


@pytest.fixture
def mock_settings():
    settings = MagicMock()
    settings.rate_limit_enabled = True
    settings.rate_limit_requests = 3
    settings.rate_limit_window_seconds = 60
    settings.rate_limit_endpoints = {"POST /users": (1, 900)}
    settings.trusted_proxies = []
    return settings


def test_rate_limit_headers_present(mock_settings):
    client = TestClient(create_test_app(RateLimitStorage()))

    with patch(SETTINGS_PATH, return_value=mock_settings):
        response = client.get("/test")

    assert response.status_code == 200
    assert response.headers["X-RateLimit-Limit"] == "3"
    assert response.headers["X-RateLimit-Remaining"] == "2"
    assert response.headers["X-RateLimit-Reset"] == "60"


def test_rate_limit_exceeded(mock_settings):
    client = TestClient(create_test_app(RateLimitStorage()))

    with patch(SETTINGS_PATH, return_value=mock_settings):
        for _ in range(3):
            assert client.get("/test").status_code == 200
        response = client.get("/test")

    assert response.status_code == 429
    assert response.json() == {"_tag": "RateLimitExceeded", "retryAfter": 60}
    assert response.headers["Retry-After"] == "60"
    assert response.headers["X-RateLimit-Remaining"] == "0"


@pytest.mark.asyncio
async def test_limit_is_per_forwarded_client_ip_behind_trusted_proxy(mock_settings):
    mock_settings.trusted_proxies = ["10.0.0.0/8"]
    transport = ASGITransport(app=create_test_app(RateLimitStorage()), client=("10.0.0.5", 40000))

    with patch(SETTINGS_PATH, return_value=mock_settings), patch(
        CONTEXT_SETTINGS_PATH, return_value=mock_settings
    ):
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            for _ in range(3):
                await client.get("/test", headers={"X-Forwarded-For": "203.0.113.1"})
            blocked = await client.get("/test", headers={"X-Forwarded-For": "203.0.113.1"})
            other = await client.get("/test", headers={"X-Forwarded-For": "203.0.113.2"})

    assert blocked.status_code == 429
    assert other.status_code == 200


def test_spoofed_forwarded_for_shares_peer_budget(mock_settings):
    client = TestClient(create_test_app(RateLimitStorage()))

    with patch(SETTINGS_PATH, return_value=mock_settings), patch(
        CONTEXT_SETTINGS_PATH, return_value=mock_settings
    ):
        codes = [
            client.post("/users", headers={"X-Forwarded-For": f"203.0.113.{i}"}).status_code
            for i in range(3)
        ]

    assert codes == [200, 429, 429]


def test_endpoint_override_has_own_budget(mock_settings):
    client = TestClient(create_test_app(RateLimitStorage()))

    with patch(SETTINGS_PATH, return_value=mock_settings):
        first = client.post("/users")
        second = client.post("/users")
        general = client.get("/test")

    assert first.status_code == 200
    assert first.headers["X-RateLimit-Limit"] == "1"
    assert second.status_code == 429
    assert second.json()["retryAfter"] == 900
    assert general.status_code == 200
    assert general.headers["X-RateLimit-Remaining"] == "2"


def test_disabled_rate_limit_skips_counting(mock_settings):
    mock_settings.rate_limit_enabled = False
    storage = RateLimitStorage()
    client = TestClient(create_test_app(storage))

    with patch(SETTINGS_PATH, return_value=mock_settings):
        response = client.get("/test")

    assert response.status_code == 200
    assert "X-RateLimit-Limit" not in response.headers
    assert len(storage) == 0


def test_injected_storage_can_be_cleared(mock_settings):
    storage = RateLimitStorage()
    client = TestClient(create_test_app(storage))

    with patch(SETTINGS_PATH, return_value=mock_settings):
        for _ in range(4):
            client.get("/test")
        storage.clear()
        response = client.get("/test")

    assert response.status_code == 200
