"""Pydantic schemas for roles."""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from salescrm.core.constants import MAX_DESCRIPTION_LENGTH, MAX_ROLE_NAME_LENGTH
from salescrm.core.permissions.policy import PermissionSet
from salescrm.core.resources.schemas import APIModel


class RoleUpdate(APIModel):
    """Schema for editing a role. System roles keep their name."""

    name: str | None = Field(None, min_length=1, max_length=MAX_ROLE_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    permissions: dict[str, list[str]] | None = None

    @field_validator("permissions")
    @classmethod
    def normalize_permissions(
        cls, v: dict[str, list[str]] | None
    ) -> dict[str, list[str]] | None:
        """Parse into a PermissionSet and store its canonical form."""
        if v is None:
            return None
        return PermissionSet.from_mapping(v).to_mapping()


class RoleResponse(APIModel):
    id: UUID
    tenant_id: UUID
    name: str
    description: str | None
    permissions: dict[str, list[str]]
    is_system_role: bool
    created_at: datetime
    updated_at: datetime
