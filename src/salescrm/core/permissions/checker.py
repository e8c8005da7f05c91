"""Permission lookup for users within a tenant."""

from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from salescrm.core.permissions.cache import PermissionCache
from salescrm.core.permissions.models import Role
from salescrm.core.permissions.policy import PermissionSet


logger = structlog.get_logger()


class PermissionChecker:
    """Loads role permission sets and evaluates them.

    Consults the optional ``PermissionCache`` first and fills it on a miss.
    """

    def __init__(
        self,
        session: AsyncSession,
        cache: PermissionCache | None = None,
    ) -> None:
        self.session = session
        self.cache = cache

    async def get_role(self, role_id: UUID, tenant_id: UUID) -> Role | None:
        """Fetch a role only if it belongs to ``tenant_id``."""
        stmt = select(Role).where(Role.id == role_id, Role.tenant_id == tenant_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_permissions(
        self, role_id: UUID | None, tenant_id: UUID
    ) -> PermissionSet | None:
        """Return the permission set for a role, or None if it has none.

        Args:
            role_id: The user's role, if any
            tenant_id: The tenant the role must belong to

        Returns:
            The parsed permission set, or None when the role is missing
        """
        if role_id is None:
            return None

        if self.cache is not None:
            cached = await self.cache.get(tenant_id, role_id)
            if cached is not None:
                return cached

        role = await self.get_role(role_id, tenant_id)
        if role is None:
            return None

        try:
            permissions = role.permission_set
        except ValueError as e:
            logger.error(
                "role_permissions_invalid",
                role_id=str(role_id),
                tenant_id=str(tenant_id),
                error=str(e),
            )
            return None

        if self.cache is not None:
            await self.cache.set(tenant_id, role_id, permissions)
        return permissions
