"""Lead database model."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import Boolean, DateTime, ForeignKey, String, false
from sqlalchemy.orm import Mapped, mapped_column

from salescrm.core.constants import (
    MAX_EMAIL_LENGTH,
    MAX_NAME_LENGTH,
    MAX_PHONE_LENGTH,
    MAX_SHORT_TEXT_LENGTH,
)
from salescrm.core.database.base import TenantScopedModel


class Lead(TenantScopedModel):
    """An unqualified prospect.

    Conversion turns a lead into an account and a contact (and optionally
    an opportunity) and records their ids here.
    """

    __tablename__ = "leads"

    first_name: Mapped[str] = mapped_column(String(MAX_SHORT_TEXT_LENGTH), nullable=False)
    last_name: Mapped[str] = mapped_column(String(MAX_SHORT_TEXT_LENGTH), nullable=False)
    email: Mapped[str | None] = mapped_column(
        String(MAX_EMAIL_LENGTH), nullable=True, index=True
    )
    phone: Mapped[str | None] = mapped_column(String(MAX_PHONE_LENGTH), nullable=True)
    company: Mapped[str | None] = mapped_column(String(MAX_NAME_LENGTH), nullable=True)
    title: Mapped[str | None] = mapped_column(String(MAX_SHORT_TEXT_LENGTH), nullable=True)
    source: Mapped[str | None] = mapped_column(String(MAX_SHORT_TEXT_LENGTH), nullable=True)
    status: Mapped[str] = mapped_column(String(50), default="new", nullable=False, index=True)
    rating: Mapped[str | None] = mapped_column(String(20), nullable=True)
    owner_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    custom_fields: Mapped[dict[str, Any]] = mapped_column(default=dict, nullable=False)
    tags: Mapped[list[str]] = mapped_column(default=list, nullable=False)

    # Conversion
    is_converted: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    converted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    converted_account_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True
    )
    converted_contact_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("contacts.id", ondelete="SET NULL"), nullable=True
    )
    converted_opportunity_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("opportunities.id", ondelete="SET NULL"), nullable=True
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<Lead(id={self.id}, status={self.status}, tenant_id={self.tenant_id})>"
