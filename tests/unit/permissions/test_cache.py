"""Unit tests for the role permission cache."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from salescrm.core.cache.redis import RedisCache
from salescrm.core.permissions.cache import PermissionCache
from salescrm.core.permissions.policy import PermissionSet


pytestmark = pytest.mark.unit


@pytest.fixture
def redis_cache() -> AsyncMock:
    return AsyncMock(spec=RedisCache)


@pytest.fixture
def cache(redis_cache: AsyncMock) -> PermissionCache:
    return PermissionCache(redis_cache, ttl_seconds=60)


class TestPermissionCache:
    """Tests for PermissionCache."""

    async def test_hit_parses_permission_set(self, cache, redis_cache):
        redis_cache.get_json.return_value = {"accounts": ["read"]}
        tenant_id, role_id = uuid4(), uuid4()

        permissions = await cache.get(tenant_id, role_id)

        assert permissions == PermissionSet.from_mapping({"accounts": ["read"]})
        redis_cache.get_json.assert_awaited_once_with(f"{tenant_id}:{role_id}")

    async def test_miss(self, cache, redis_cache):
        redis_cache.get_json.return_value = None

        assert await cache.get(uuid4(), uuid4()) is None

    async def test_read_failure_falls_through(self, cache, redis_cache):
        redis_cache.get_json.side_effect = RedisConnectionError("down")

        assert await cache.get(uuid4(), uuid4()) is None

    async def test_corrupt_entry_ignored(self, cache, redis_cache):
        redis_cache.get_json.return_value = {"accounts": ["fly"]}

        assert await cache.get(uuid4(), uuid4()) is None

    async def test_set_uses_ttl_and_canonical_form(self, cache, redis_cache):
        tenant_id, role_id = uuid4(), uuid4()
        permissions = PermissionSet.from_mapping({"leads": ["write", "read"]})

        await cache.set(tenant_id, role_id, permissions)

        redis_cache.set_json.assert_awaited_once_with(
            f"{tenant_id}:{role_id}", {"leads": ["read", "write"]}, 60
        )

    async def test_write_failure_is_swallowed(self, cache, redis_cache):
        redis_cache.set_json.side_effect = RedisConnectionError("down")

        await cache.set(uuid4(), uuid4(), PermissionSet())

    async def test_invalidate(self, cache, redis_cache):
        tenant_id, role_id = uuid4(), uuid4()

        await cache.invalidate(tenant_id, role_id)

        redis_cache.delete.assert_awaited_once_with(f"{tenant_id}:{role_id}")

    async def test_invalidate_failure_is_swallowed(self, cache, redis_cache):
        redis_cache.delete.side_effect = RedisConnectionError("down")

        await cache.invalidate(uuid4(), uuid4())


class TestRedisCache:
    """Tests for the key prefixing wrapper."""

    async def test_prefix_applied(self):
        client = AsyncMock()
        client.get.return_value = '{"a": 1}'
        cache = RedisCache(client, prefix="crm:")

        assert await cache.get_json("k") == {"a": 1}
        client.get.assert_awaited_once_with("crm:k")

    async def test_set_with_ttl_uses_setex(self):
        client = AsyncMock()
        cache = RedisCache(client, prefix="crm:")

        await cache.set("k", "v", ttl_seconds=30)

        client.setex.assert_awaited_once_with("crm:k", 30, "v")
