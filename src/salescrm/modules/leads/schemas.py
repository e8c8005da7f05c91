"""Pydantic schemas for leads and lead conversion."""

from datetime import date, datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from salescrm.core.constants import MAX_NAME_LENGTH, MAX_PHONE_LENGTH, MAX_SHORT_TEXT_LENGTH
from salescrm.core.resources.schemas import APIModel, RecordResponse
from salescrm.modules.accounts.schemas import AccountResponse
from salescrm.modules.contacts.schemas import ContactResponse
from salescrm.modules.opportunities.schemas import OpportunityResponse


class LeadStatus(StrEnum):
    NEW = "new"
    CONTACTED = "contacted"
    QUALIFIED = "qualified"
    UNQUALIFIED = "unqualified"
    CONVERTED = "converted"


class LeadRating(StrEnum):
    HOT = "hot"
    WARM = "warm"
    COLD = "cold"


class LeadFields(APIModel):
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=MAX_PHONE_LENGTH)
    company: str | None = Field(None, max_length=MAX_NAME_LENGTH)
    title: str | None = Field(None, max_length=MAX_SHORT_TEXT_LENGTH)
    source: str | None = Field(None, max_length=MAX_SHORT_TEXT_LENGTH)
    rating: LeadRating | None = None
    owner_id: UUID | None = None


class LeadCreate(LeadFields):
    """Schema for creating a lead. ``ownerId`` defaults to the caller."""

    first_name: str = Field(..., min_length=1, max_length=MAX_SHORT_TEXT_LENGTH)
    last_name: str = Field(..., min_length=1, max_length=MAX_SHORT_TEXT_LENGTH)
    status: LeadStatus = LeadStatus.NEW
    custom_fields: dict[str, Any] = Field(default_factory=dict)
    tags: list[str] = Field(default_factory=list)


class LeadUpdate(LeadFields):
    """Partial update. A lead can only reach ``converted`` through conversion."""

    first_name: str | None = Field(None, min_length=1, max_length=MAX_SHORT_TEXT_LENGTH)
    last_name: str | None = Field(None, min_length=1, max_length=MAX_SHORT_TEXT_LENGTH)
    status: LeadStatus | None = None
    custom_fields: dict[str, Any] | None = None
    tags: list[str] | None = None


class LeadFilters(BaseModel):
    """Equality filters for the lead list."""

    status: LeadStatus | None = None
    rating: LeadRating | None = None
    owner_id: UUID | None = None
    is_converted: bool | None = None


class LeadResponse(RecordResponse):
    first_name: str
    last_name: str
    email: str | None
    phone: str | None
    company: str | None
    title: str | None
    source: str | None
    status: str
    rating: str | None
    owner_id: UUID | None
    custom_fields: dict[str, Any]
    tags: list[str]
    is_converted: bool
    converted_at: datetime | None
    converted_account_id: UUID | None
    converted_contact_id: UUID | None
    converted_opportunity_id: UUID | None


class LeadConvert(APIModel):
    """Options for converting a lead.

    Without ``accountId`` a new account is created, named after
    ``accountName``, the lead's company, or the lead's full name.
    """

    account_id: UUID | None = None
    account_name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    create_opportunity: bool = False
    opportunity_name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    amount: Decimal | None = Field(None, ge=0, max_digits=15, decimal_places=2)
    stage_id: UUID | None = None
    expected_close_date: date | None = None


class LeadConversionResponse(APIModel):
    lead: LeadResponse
    account: AccountResponse
    contact: ContactResponse
    opportunity: OpportunityResponse | None = None
