"""Pydantic schemas for opportunities and sales stages."""

from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from salescrm.core.constants import MAX_NAME_LENGTH, MAX_SHORT_TEXT_LENGTH
from salescrm.core.resources.schemas import APIModel, RecordResponse


class OpportunityFields(APIModel):
    amount: Decimal | None = Field(None, ge=0, max_digits=15, decimal_places=2)
    probability: int | None = Field(None, ge=0, le=100)
    expected_close_date: date | None = None
    actual_close_date: date | None = None
    lead_source: str | None = Field(None, max_length=MAX_SHORT_TEXT_LENGTH)
    campaign_id: str | None = Field(None, max_length=MAX_NAME_LENGTH)
    owner_id: UUID | None = None


class OpportunityCreate(OpportunityFields):
    """Schema for creating an opportunity.

    ``probability`` defaults to the stage's probability and ``ownerId``
    to the caller.
    """

    account_id: UUID
    stage_id: UUID
    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    custom_fields: dict[str, Any] = Field(default_factory=dict)
    tags: list[str] = Field(default_factory=list)


class OpportunityUpdate(OpportunityFields):
    account_id: UUID | None = None
    stage_id: UUID | None = None
    name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    custom_fields: dict[str, Any] | None = None
    tags: list[str] | None = None


class OpportunityFilters(BaseModel):
    """Equality filters for the opportunity list."""

    account_id: UUID | None = None
    stage_id: UUID | None = None
    owner_id: UUID | None = None


class OpportunityResponse(RecordResponse):
    account_id: UUID
    name: str
    amount: Decimal | None
    stage_id: UUID
    probability: int
    expected_close_date: date | None
    actual_close_date: date | None
    lead_source: str | None
    campaign_id: str | None
    owner_id: UUID | None
    custom_fields: dict[str, Any]
    tags: list[str]


class SalesStageResponse(APIModel):
    id: UUID
    name: str
    probability: int
    stage_order: int
    is_closed_won: bool
    is_closed_lost: bool
