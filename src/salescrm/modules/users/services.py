"""User service for business logic."""

from typing import Any
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from salescrm.core.audit.models import AuditAction
from salescrm.core.audit.recorder import AuditEntry, AuditRecorder
from salescrm.core.audit.serialization import snapshot
from salescrm.core.auth.backend import hash_password
from salescrm.core.auth.dependencies import RequestInfo
from salescrm.core.auth.flow import AuthContext
from salescrm.core.database.pagination import Page, PageParams
from salescrm.core.database.tenant import TenantScope
from salescrm.core.errors import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationFailed,
)
from salescrm.core.permissions.policy import Resource, grants_all
from salescrm.modules.users.models import User
from salescrm.modules.users.repos import UserRepository
from salescrm.modules.users.schemas import UserCreate, UserUpdate


logger = structlog.get_logger()


class UserService:
    """Service for managing the users of the caller's tenant.

    Users are never deleted; deactivation takes effect on the user's
    next request because authentication reloads the user every time.
    """

    def __init__(
        self,
        db: AsyncSession,
        auth: AuthContext,
        recorder: AuditRecorder,
        request_info: RequestInfo | None = None,
    ) -> None:
        self.auth = auth
        self.recorder = recorder
        self.request_info = request_info
        self.scope = TenantScope(db, auth.tenant_id)
        self.repo = UserRepository(self.scope)

    async def list_users(
        self, params: PageParams, search: str | None = None
    ) -> Page[User]:
        """List users in the caller's tenant."""
        return await self.repo.list(params, search)

    async def get_user(self, user_id: UUID) -> User:
        """Get a user by ID.

        Raises:
            NotFoundError: If the user is unknown or in another tenant
        """
        user = await self.repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found", resource=Resource.USERS.value)
        return user

    async def _check_role(self, role_id: UUID | None) -> None:
        if role_id is None:
            return
        role = await self.repo.get_role(role_id)
        if role is None:
            raise ValidationFailed(
                errors=[
                    {
                        "field": "roleId",
                        "message": "Referenced role does not exist",
                        "type": "invalid_reference",
                    }
                ]
            )
        if not grants_all(self.auth.permissions, role.permission_set):
            raise ForbiddenError(
                "You cannot assign a role with permissions you do not hold",
                details={"role_id": str(role_id)},
            )

    async def _check_outranked(self, user: User) -> None:
        # Users may only manage accounts whose role they could assign
        if user.role_id is not None and user.id != self.auth.user_id:
            role = await self.repo.get_role(user.role_id)
            if role is not None and not grants_all(
                self.auth.permissions, role.permission_set
            ):
                raise ForbiddenError("You cannot modify a user with a broader role")

    async def _check_email_free(self, email: str) -> None:
        if await self.repo.get_by_email(email) is not None:
            raise ConflictError(
                "Email already registered",
                error_code="email_exists",
                details={"email": email},
            )

    async def create_user(self, data: UserCreate) -> User:
        """Create a user with a password in the caller's tenant.

        Args:
            data: User creation data

        Returns:
            The created user

        Raises:
            ConflictError: If the email already exists in this tenant
            ValidationFailed: If ``role_id`` is not a role of this tenant
            ForbiddenError: If the role grants more than the caller holds
        """
        email = data.email.lower()
        await self._check_email_free(email)
        await self._check_role(data.role_id)

        values = {
            key: value
            for key, value in data.model_dump(exclude={"email", "password"}).items()
            if value is not None
        }
        user = User(email=email, password_hash=hash_password(data.password), **values)
        user = await self.repo.create(user)
        await self.scope.commit()

        logger.info("user_created", user_id=str(user.id), tenant_id=str(user.tenant_id))
        self._audit(AuditAction.CREATE, user, after=snapshot(user))
        return user

    async def update_user(self, user_id: UUID, data: UserUpdate) -> User:
        """Update a user's profile, email, role or active flag.

        Raises:
            NotFoundError: If the user is unknown or in another tenant
            ConflictError: If the new email already exists in this tenant
            ValidationFailed: If ``role_id`` is not a role of this tenant
            BadRequestError: If callers try to deactivate themselves
            ForbiddenError: If the change would widen anyone's access
        """
        user = await self.get_user(user_id)
        await self._check_outranked(user)
        values: dict[str, Any] = data.model_dump(exclude_unset=True)

        if values.get("email"):
            values["email"] = values["email"].lower()
            if values["email"] != user.email:
                await self._check_email_free(values["email"])
        elif "email" in values:
            del values["email"]
        if "role_id" in values and values["role_id"] != user.role_id:
            self._forbid_own_role(user)
            await self._check_role(values["role_id"])
        if values.get("is_active") is False:
            self._forbid_self(user)
        if values.get("is_active") is None:
            values.pop("is_active", None)
        if "timezone" in values and values["timezone"] is None:
            del values["timezone"]

        before = snapshot(user)
        for key, value in values.items():
            setattr(user, key, value)
        user = await self.repo.update(user)
        await self.scope.commit()

        self._audit(AuditAction.UPDATE, user, before=before, after=snapshot(user))
        return user

    async def deactivate_user(self, user_id: UUID) -> User:
        """Deactivate a user.

        Raises:
            NotFoundError: If the user is unknown or in another tenant
            BadRequestError: If callers try to deactivate themselves
            ForbiddenError: If the user holds a broader role than the caller
        """
        user = await self.get_user(user_id)
        self._forbid_self(user)
        await self._check_outranked(user)
        before = snapshot(user)
        user.is_active = False
        user = await self.repo.update(user)
        await self.scope.commit()

        logger.info("user_deactivated", user_id=str(user.id))
        self._audit(AuditAction.DELETE, user, before=before, after=snapshot(user))
        return user

    def _forbid_own_role(self, user: User) -> None:
        if user.id == self.auth.user_id and not self.auth.is_superuser:
            raise ForbiddenError("You cannot change your own role")

    def _forbid_self(self, user: User) -> None:
        if user.id == self.auth.user_id:
            raise BadRequestError(
                "You cannot deactivate your own account",
                error_code="self_deactivation",
            )

    def _audit(
        self,
        action: AuditAction,
        user: User,
        before: dict[str, Any] | None = None,
        after: dict[str, Any] | None = None,
    ) -> None:
        info = self.request_info
        self.recorder.record(
            AuditEntry(
                tenant_id=self.auth.tenant_id,
                actor_id=self.auth.user_id,
                action=action,
                resource_type=Resource.USERS.value,
                resource_id=str(user.id),
                before=before,
                after=after,
                ip_address=info.ip_address if info else None,
                user_agent=info.user_agent if info else None,
                request_id=info.request_id if info else None,
            )
        )
