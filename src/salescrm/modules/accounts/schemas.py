"""Pydantic schemas for accounts."""

from enum import StrEnum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, ValidationError, field_validator

from salescrm.core.constants import MAX_NAME_LENGTH
from salescrm.core.resources.schemas import APIModel, RecordResponse


_url_adapter = TypeAdapter(HttpUrl)


class AccountType(StrEnum):
    PROSPECT = "prospect"
    CUSTOMER = "customer"
    PARTNER = "partner"


class AccountFields(APIModel):
    """Optional account fields shared by create and update."""

    website: str | None = Field(None, max_length=MAX_NAME_LENGTH)
    industry: str | None = Field(None, max_length=100)
    revenue: int | None = Field(None, ge=0)
    employee_count: int | None = Field(None, ge=0)
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = Field(None, max_length=20)
    country: str | None = None
    phone: str | None = Field(None, max_length=50)
    owner_id: UUID | None = None
    parent_account_id: UUID | None = None

    @field_validator("website")
    @classmethod
    def validate_website(cls, v: str | None) -> str | None:
        """Accept a full URL or an empty string (stored as None)."""
        if not v:
            return None
        try:
            _url_adapter.validate_python(v)
        except ValidationError:
            raise ValueError("Website must be a valid http(s) URL") from None
        return v


class AccountCreate(AccountFields):
    """Schema for creating an account. ``ownerId`` defaults to the caller."""

    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    account_type: AccountType = AccountType.PROSPECT
    custom_fields: dict[str, Any] = Field(default_factory=dict)
    tags: list[str] = Field(default_factory=list)


class AccountUpdate(AccountFields):
    """Schema for a partial account update."""

    name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    account_type: AccountType | None = None
    custom_fields: dict[str, Any] | None = None
    tags: list[str] | None = None


class AccountFilters(BaseModel):
    """Equality filters for the account list."""

    industry: str | None = None
    account_type: AccountType | None = None
    owner_id: UUID | None = None


class AccountResponse(RecordResponse):
    """Account as returned by the API."""

    name: str
    website: str | None
    industry: str | None
    account_type: str
    revenue: int | None
    employee_count: int | None
    address_line1: str | None
    address_line2: str | None
    city: str | None
    state: str | None
    postal_code: str | None
    country: str | None
    phone: str | None
    owner_id: UUID | None
    parent_account_id: UUID | None
    custom_fields: dict[str, Any]
    tags: list[str]
