"""Pydantic schemas for contacts."""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from salescrm.core.constants import MAX_PHONE_LENGTH, MAX_SHORT_TEXT_LENGTH, MAX_URL_LENGTH
from salescrm.core.resources.schemas import APIModel, RecordResponse


class ContactFields(APIModel):
    account_id: UUID | None = None
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=MAX_PHONE_LENGTH)
    mobile: str | None = Field(None, max_length=MAX_PHONE_LENGTH)
    title: str | None = Field(None, max_length=MAX_SHORT_TEXT_LENGTH)
    department: str | None = Field(None, max_length=MAX_SHORT_TEXT_LENGTH)
    linkedin_url: str | None = Field(None, max_length=MAX_URL_LENGTH)
    owner_id: UUID | None = None
    lead_source: str | None = Field(None, max_length=MAX_SHORT_TEXT_LENGTH)


class ContactCreate(ContactFields):
    """Schema for creating a contact. ``ownerId`` defaults to the caller."""

    first_name: str = Field(..., min_length=1, max_length=MAX_SHORT_TEXT_LENGTH)
    last_name: str = Field(..., min_length=1, max_length=MAX_SHORT_TEXT_LENGTH)
    is_primary: bool = False
    custom_fields: dict[str, Any] = Field(default_factory=dict)
    tags: list[str] = Field(default_factory=list)


class ContactUpdate(ContactFields):
    first_name: str | None = Field(None, min_length=1, max_length=MAX_SHORT_TEXT_LENGTH)
    last_name: str | None = Field(None, min_length=1, max_length=MAX_SHORT_TEXT_LENGTH)
    is_primary: bool | None = None
    custom_fields: dict[str, Any] | None = None
    tags: list[str] | None = None


class ContactFilters(BaseModel):
    """Equality filters for the contact list."""

    account_id: UUID | None = None
    owner_id: UUID | None = None
    is_primary: bool | None = None


class ContactResponse(RecordResponse):
    account_id: UUID | None
    first_name: str
    last_name: str
    email: str | None
    phone: str | None
    mobile: str | None
    title: str | None
    department: str | None
    linkedin_url: str | None
    owner_id: UUID | None
    is_primary: bool
    lead_source: str | None
    custom_fields: dict[str, Any]
    tags: list[str]
