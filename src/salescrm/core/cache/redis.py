"""Redis client construction and a small JSON cache wrapper."""

import json
from typing import Any

import redis.asyncio as redis


def create_redis_client(url: str, max_connections: int = 50) -> redis.Redis:  # type: ignore[type-arg]
    """Create a pooled async Redis client.

    The client owns its connection pool; call ``aclose()`` at shutdown.
    """
    return redis.Redis.from_url(
        url,
        max_connections=max_connections,
        decode_responses=True,
    )


class RedisCache:
    """High-level Redis cache interface.

    Provides typed methods for common caching operations.
    """

    def __init__(self, client: redis.Redis, prefix: str = "") -> None:  # type: ignore[type-arg]
        """Initialize cache with a client and optional key prefix.

        Args:
            client: Async Redis client
            prefix: Prefix for all keys (e.g., "salescrm:")
        """
        self.client = client
        self.prefix = prefix

    def _key(self, key: str) -> str:
        """Generate prefixed key."""
        return f"{self.prefix}{key}" if self.prefix else key

    async def get(self, key: str) -> str | None:
        """Get a value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found
        """
        return await self.client.get(self._key(key))

    async def set(
        self,
        key: str,
        value: str,
        ttl_seconds: int | None = None,
    ) -> None:
        """Set a value in cache.

        Args:
            key: Cache key
            value: Value to cache
            ttl_seconds: Optional TTL in seconds
        """
        if ttl_seconds:
            await self.client.setex(self._key(key), ttl_seconds, value)
        else:
            await self.client.set(self._key(key), value)

    async def delete(self, key: str) -> bool:
        """Delete a key from cache.

        Returns:
            True if key was deleted, False if it didn't exist
        """
        result = await self.client.delete(self._key(key))
        return result > 0

    async def set_json(
        self,
        key: str,
        value: dict[str, Any],
        ttl_seconds: int | None = None,
    ) -> None:
        """Set a JSON value in cache."""
        await self.set(key, json.dumps(value), ttl_seconds)

    async def get_json(self, key: str) -> dict[str, Any] | None:
        """Get a JSON value from cache, or None if not found."""
        data = await self.get(key)
        if data:
            return json.loads(data)
        return None

    async def ping(self) -> bool:
        """Check connectivity."""
        return bool(await self.client.ping())

    async def close(self) -> None:
        """Close the underlying client and its pool."""
        await self.client.aclose()
