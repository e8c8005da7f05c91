"""Pydantic schemas for notes."""

from uuid import UUID

from pydantic import BaseModel, Field

from salescrm.core.resources.schemas import APIModel, RecordResponse
from salescrm.modules.parents import ParentType


class NoteCreate(APIModel):
    """Schema for creating a note. The caller becomes the author."""

    parent_type: ParentType
    parent_id: UUID
    content: str = Field(..., min_length=1)
    is_private: bool = False


class NoteUpdate(APIModel):
    content: str | None = Field(None, min_length=1)
    is_private: bool | None = None


class NoteFilters(BaseModel):
    """Equality filters for the note list."""

    parent_type: ParentType | None = None
    parent_id: UUID | None = None
    author_id: UUID | None = None


class NoteResponse(RecordResponse):
    author_id: UUID
    parent_type: str
    parent_id: UUID
    content: str
    is_private: bool
