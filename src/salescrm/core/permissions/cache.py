"""Read-through cache of role permission sets.

Only role permissions are cached. User and tenant state is always read
from the database on each request.
"""

from uuid import UUID

import structlog
from redis.exceptions import RedisError

from salescrm.core.cache.redis import RedisCache
from salescrm.core.constants import DEFAULT_PERMISSION_CACHE_TTL_SECONDS
from salescrm.core.permissions.policy import PermissionSet


logger = structlog.get_logger()


class PermissionCache:
    """Caches parsed role permissions keyed by tenant and role.

    Redis failures never fail a request: reads fall through to the
    database and writes are skipped.
    """

    def __init__(
        self,
        cache: RedisCache,
        ttl_seconds: int = DEFAULT_PERMISSION_CACHE_TTL_SECONDS,
    ) -> None:
        self.cache = cache
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def _key(tenant_id: UUID, role_id: UUID) -> str:
        return f"{tenant_id}:{role_id}"

    async def get(self, tenant_id: UUID, role_id: UUID) -> PermissionSet | None:
        """Return the cached permission set, or None on miss or error."""
        try:
            data = await self.cache.get_json(self._key(tenant_id, role_id))
        except RedisError as e:
            logger.warning("permission_cache_read_failed", error=str(e))
            return None
        if data is None:
            return None
        try:
            return PermissionSet.from_mapping(data)
        except ValueError:
            logger.warning(
                "permission_cache_entry_invalid",
                tenant_id=str(tenant_id),
                role_id=str(role_id),
            )
            return None

    async def set(
        self, tenant_id: UUID, role_id: UUID, permissions: PermissionSet
    ) -> None:
        """Store a permission set for the configured TTL."""
        try:
            await self.cache.set_json(
                self._key(tenant_id, role_id),
                permissions.to_mapping(),
                self.ttl_seconds,
            )
        except RedisError as e:
            logger.warning("permission_cache_write_failed", error=str(e))

    async def invalidate(self, tenant_id: UUID, role_id: UUID) -> None:
        """Drop a role's cached permissions after it changes."""
        try:
            await self.cache.delete(self._key(tenant_id, role_id))
        except RedisError as e:
            logger.warning(
                "permission_cache_invalidate_failed",
                role_id=str(role_id),
                error=str(e),
            )
