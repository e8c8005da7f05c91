"""Role database model."""

from typing import Any

from sqlalchemy import Boolean, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from salescrm.core.constants import MAX_DESCRIPTION_LENGTH, MAX_ROLE_NAME_LENGTH
from salescrm.core.database.base import Base, TenantMixin, TimestampMixin, UUIDMixin
from salescrm.core.permissions.policy import PermissionSet


class Role(Base, UUIDMixin, TimestampMixin, TenantMixin):
    """A named permission set within a tenant.

    Attributes:
        name: Role name, unique within the tenant
        description: Human-readable description of the role
        permissions: Stored grant table, ``{"resource": ["action", ...]}``
        is_system_role: Created at onboarding; cannot be renamed
    """

    __tablename__ = "roles"
    __table_args__ = (
        UniqueConstraint("tenant_id", "name", name="uq_role_tenant_name"),
    )

    name: Mapped[str] = mapped_column(
        String(MAX_ROLE_NAME_LENGTH),
        nullable=False,
        index=True,
    )
    description: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )
    permissions: Mapped[dict[str, Any]] = mapped_column(
        default=dict,
        nullable=False,
    )
    is_system_role: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    @property
    def permission_set(self) -> PermissionSet:
        """Typed view of the stored permissions."""
        return PermissionSet.from_mapping(self.permissions)

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name={self.name}, tenant_id={self.tenant_id})>"
