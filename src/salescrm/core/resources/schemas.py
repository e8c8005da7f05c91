"""Base schemas for the JSON API.

Responses use camelCase keys. Inputs accept camelCase or snake_case and
silently drop unknown keys, including any client-supplied ``tenantId``.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """Base for request and response bodies."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="ignore",
    )


class RecordResponse(APIModel):
    """Fields shared by every tenant-scoped record."""

    id: UUID
    tenant_id: UUID
    is_active: bool
    created_at: datetime
    updated_at: datetime
