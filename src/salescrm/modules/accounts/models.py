"""Account (company) database model."""

from typing import Any
from uuid import UUID

from sqlalchemy import BigInteger, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from salescrm.core.constants import (
    MAX_NAME_LENGTH,
    MAX_PHONE_LENGTH,
    MAX_SHORT_TEXT_LENGTH,
)
from salescrm.core.database.base import TenantScopedModel


class Account(TenantScopedModel):
    """A company the sales team sells to.

    Attributes:
        name: Company name
        website: Company website
        industry: Free-form industry label
        account_type: prospect, customer or partner
        revenue: Annual revenue in whole currency units
        employee_count: Head count
        owner_id: The user responsible for the account
        parent_account_id: Parent company, if any
        custom_fields: Tenant-defined extra fields
        tags: Free-form labels
    """

    __tablename__ = "accounts"

    name: Mapped[str] = mapped_column(String(MAX_NAME_LENGTH), nullable=False, index=True)
    website: Mapped[str | None] = mapped_column(String(MAX_NAME_LENGTH), nullable=True)
    industry: Mapped[str | None] = mapped_column(
        String(MAX_SHORT_TEXT_LENGTH), nullable=True, index=True
    )
    account_type: Mapped[str] = mapped_column(
        String(50), default="prospect", nullable=False, index=True
    )
    revenue: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    employee_count: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Address
    address_line1: Mapped[str | None] = mapped_column(String(MAX_NAME_LENGTH), nullable=True)
    address_line2: Mapped[str | None] = mapped_column(String(MAX_NAME_LENGTH), nullable=True)
    city: Mapped[str | None] = mapped_column(String(MAX_SHORT_TEXT_LENGTH), nullable=True)
    state: Mapped[str | None] = mapped_column(String(MAX_SHORT_TEXT_LENGTH), nullable=True)
    postal_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    country: Mapped[str | None] = mapped_column(String(MAX_SHORT_TEXT_LENGTH), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(MAX_PHONE_LENGTH), nullable=True)

    owner_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    parent_account_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True
    )

    custom_fields: Mapped[dict[str, Any]] = mapped_column(default=dict, nullable=False)
    tags: Mapped[list[str]] = mapped_column(default=list, nullable=False)

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, name={self.name}, tenant_id={self.tenant_id})>"
