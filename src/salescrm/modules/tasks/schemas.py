"""Pydantic schemas for tasks."""

from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field

from salescrm.core.constants import MAX_NAME_LENGTH
from salescrm.core.resources.schemas import APIModel, RecordResponse
from salescrm.modules.activities.schemas import Priority
from salescrm.modules.parents import ParentType


class TaskStatus(StrEnum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskFields(APIModel):
    assigned_to: UUID | None = None
    description: str | None = None
    due_date: datetime | None = None
    parent_type: ParentType | None = None
    parent_id: UUID | None = None


class TaskCreate(TaskFields):
    """Schema for creating a task. ``assignedTo`` defaults to the caller."""

    subject: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    priority: Priority = Priority.MEDIUM
    status: TaskStatus = TaskStatus.OPEN


class TaskUpdate(TaskFields):
    subject: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    priority: Priority | None = None
    status: TaskStatus | None = None


class TaskFilters(BaseModel):
    """Equality filters for the task list."""

    assigned_to: UUID | None = None
    status: TaskStatus | None = None
    priority: Priority | None = None
    parent_type: ParentType | None = None
    parent_id: UUID | None = None


class TaskResponse(RecordResponse):
    assigned_to: UUID
    assigned_by: UUID | None
    subject: str
    description: str | None
    due_date: datetime | None
    priority: str
    status: str
    parent_type: str | None
    parent_id: UUID | None
    completed_at: datetime | None
