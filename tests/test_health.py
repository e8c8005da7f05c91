"""Tests for health check endpoints."""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from httpx import AsyncClient
from redis.exceptions import ConnectionError as RedisConnectionError

from salescrm import main as app_module
from salescrm.core.cache.redis import RedisCache


async def test_liveness_endpoint(client: AsyncClient):
    """Test that liveness endpoint returns 200."""
    response = await client.get("/health/live")

    assert response.status_code == 200
    assert response.json() == {"status": "alive"}


async def test_readiness_endpoint(client: AsyncClient):
    """Test that readiness endpoint returns 200 with healthy checks."""
    response = await client.get("/health/ready")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["checks"] == {"database": "ok"}


@pytest.mark.parametrize(
    ("reachable", "status_code", "state"),
    [(True, 200, "ready"), (False, 503, "degraded")],
)
async def test_readiness_reports_redis(
    app: FastAPI, client: AsyncClient, reachable: bool, status_code: int, state: str
):
    """Redis is only checked when a cache is configured."""
    cache = AsyncMock(spec=RedisCache)
    cache.ping.return_value = reachable
    app.state.redis_cache = cache

    response = await client.get("/health/ready")

    assert response.status_code == status_code
    assert response.json()["status"] == state
    assert response.json()["checks"]["redis"] == ("ok" if reachable else "unavailable")


async def test_health_needs_no_token(client: AsyncClient):
    response = await client.get("/health/live")

    assert "WWW-Authenticate" not in response.headers


async def test_readiness_survives_redis_error(app: FastAPI, client: AsyncClient):
    cache = AsyncMock(spec=RedisCache)
    cache.ping.side_effect = RedisConnectionError("refused")
    app.state.redis_cache = cache

    response = await client.get("/health/ready")

    assert response.status_code == 503
    assert response.json()["checks"]["redis"] == "ConnectionError"


def test_served_through_app_factory():
    """The server entry point is ``create_app`` in factory mode, not a global app."""
    assert callable(app_module.create_app)
    assert not hasattr(app_module, "app")
