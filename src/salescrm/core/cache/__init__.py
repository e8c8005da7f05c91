"""Caching layer backed by Redis."""

from salescrm.core.cache.redis import RedisCache, create_redis_client


__all__ = [
    "RedisCache",
    "create_redis_client",
]
