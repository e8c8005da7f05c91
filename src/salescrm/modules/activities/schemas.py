"""Pydantic schemas for activities."""

from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from salescrm.core.constants import MAX_NAME_LENGTH
from salescrm.core.resources.schemas import APIModel, RecordResponse
from salescrm.modules.parents import ParentType


class ActivityType(StrEnum):
    EMAIL = "email"
    CALL = "call"
    MEETING = "meeting"
    NOTE = "note"
    TASK = "task"


class ActivityStatus(StrEnum):
    PLANNED = "planned"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ActivityFields(APIModel):
    subject: str | None = Field(None, max_length=MAX_NAME_LENGTH)
    description: str | None = None
    duration: int | None = Field(None, ge=0, description="Minutes")
    due_date: datetime | None = None
    completed_at: datetime | None = None
    parent_type: ParentType | None = None
    parent_id: UUID | None = None


class ActivityCreate(ActivityFields):
    """Schema for logging an activity. The caller is recorded as the actor."""

    activity_type: ActivityType = Field(..., alias="type")
    status: ActivityStatus = ActivityStatus.COMPLETED
    priority: Priority = Priority.MEDIUM
    details: dict[str, Any] = Field(default_factory=dict, alias="metadata")


class ActivityUpdate(ActivityFields):
    activity_type: ActivityType | None = Field(None, alias="type")
    status: ActivityStatus | None = None
    priority: Priority | None = None
    details: dict[str, Any] | None = Field(None, alias="metadata")


class ActivityFilters(BaseModel):
    """Equality filters for the activity list."""

    model_config = ConfigDict(populate_by_name=True)

    activity_type: ActivityType | None = Field(None, alias="type")
    user_id: UUID | None = None
    parent_type: ParentType | None = None
    parent_id: UUID | None = None
    status: ActivityStatus | None = None


class ActivityResponse(RecordResponse):
    user_id: UUID
    activity_type: str = Field(serialization_alias="type")
    subject: str | None
    description: str | None
    duration: int | None
    status: str
    priority: str
    due_date: datetime | None
    completed_at: datetime | None
    parent_type: str | None
    parent_id: UUID | None
    details: dict[str, Any] = Field(serialization_alias="metadata")
