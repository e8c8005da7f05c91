"""Role management business logic."""

from collections.abc import Sequence
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from salescrm.core.audit.models import AuditAction
from salescrm.core.audit.recorder import AuditEntry, AuditRecorder
from salescrm.core.audit.serialization import snapshot
from salescrm.core.auth.dependencies import RequestInfo
from salescrm.core.auth.flow import AuthContext
from salescrm.core.database.tenant import TenantScope
from salescrm.core.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from salescrm.core.permissions.cache import PermissionCache
from salescrm.core.permissions.models import Role
from salescrm.core.permissions.policy import PermissionSet, Resource, grants_all
from salescrm.modules.roles.schemas import RoleUpdate


logger = structlog.get_logger()


class RoleService:
    """Reads and edits the roles of the caller's tenant.

    Editing a role's permissions drops its cached permission set so the
    change applies from the next request on.
    """

    def __init__(
        self,
        db: AsyncSession,
        auth: AuthContext,
        recorder: AuditRecorder,
        cache: PermissionCache | None = None,
        request_info: RequestInfo | None = None,
    ) -> None:
        self.auth = auth
        self.recorder = recorder
        self.cache = cache
        self.request_info = request_info
        self.scope = TenantScope(db, auth.tenant_id)

    async def list_roles(self) -> Sequence[Role]:
        statement = self.scope.select(Role).order_by(Role.name)
        result = await self.scope.session.execute(statement)
        return result.scalars().all()

    async def get_role(self, role_id: UUID) -> Role:
        """Get a role of this tenant.

        Raises:
            NotFoundError: If the role is unknown or in another tenant
        """
        role = await self.scope.get(Role, role_id)
        if role is None:
            raise NotFoundError("Role not found", resource=Resource.ROLES.value)
        return role

    async def update_role(self, role_id: UUID, data: RoleUpdate) -> Role:
        """Apply a partial update to a role.

        Raises:
            NotFoundError: If the role is unknown or in another tenant
            BadRequestError: If a system role would be renamed
            ConflictError: If the new name is taken in this tenant
            ForbiddenError: If the edit would widen the caller's own access
        """
        role = await self.get_role(role_id)
        self._check_escalation(role, data)
        values: dict[str, Any] = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key == "description"
        }
        if role.is_system_role and values.get("name", role.name) != role.name:
            raise BadRequestError(
                "System roles cannot be renamed", error_code="system_role"
            )
        if "name" in values and values["name"] != role.name:
            await self._check_name_free(values["name"])

        before = snapshot(role)
        for key, value in values.items():
            setattr(role, key, value)
        try:
            await self.scope.flush()
        except IntegrityError:
            await self.scope.rollback()
            raise ConflictError("Role name already in use") from None
        await self.scope.refresh(role)
        await self.scope.commit()

        if "permissions" in values and self.cache is not None:
            await self.cache.invalidate(role.tenant_id, role.id)
        logger.info(
            "role_updated",
            role_id=str(role.id),
            fields=sorted(values),
        )
        self._audit(role, before)
        return role

    def _check_escalation(self, role: Role, data: RoleUpdate) -> None:
        """Stop callers from editing their way into more access.

        Superusers may edit any role. Everyone else may not touch their
        own role or a role that outranks them, and may only hand out
        actions they already hold.
        """
        if self.auth.is_superuser:
            return
        if role.id == self.auth.role_id:
            raise ForbiddenError("You cannot edit your own role")
        if not grants_all(self.auth.permissions, role.permission_set):
            raise ForbiddenError("You cannot edit a role broader than your own")
        if data.permissions is not None and not grants_all(
            self.auth.permissions, PermissionSet.from_mapping(data.permissions)
        ):
            raise ForbiddenError(
                "You cannot grant permissions you do not hold",
                details={"permissions": data.permissions},
            )

    async def _check_name_free(self, name: str) -> None:
        statement = self.scope.select(Role).where(Role.name == name)
        result = await self.scope.session.execute(statement)
        if result.scalar_one_or_none() is not None:
            raise ConflictError("Role name already in use", details={"name": name})

    def _audit(self, role: Role, before: dict[str, Any]) -> None:
        info = self.request_info
        self.recorder.record(
            AuditEntry(
                tenant_id=self.auth.tenant_id,
                actor_id=self.auth.user_id,
                action=AuditAction.UPDATE,
                resource_type=Resource.ROLES.value,
                resource_id=str(role.id),
                before=before,
                after=snapshot(role),
                ip_address=info.ip_address if info else None,
                user_agent=info.user_agent if info else None,
                request_id=info.request_id if info else None,
            )
        )
