"""Contact (person) database model."""

from typing import Any
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, String, false
from sqlalchemy.orm import Mapped, mapped_column

from salescrm.core.constants import (
    MAX_EMAIL_LENGTH,
    MAX_NAME_LENGTH,
    MAX_PHONE_LENGTH,
    MAX_SHORT_TEXT_LENGTH,
    MAX_URL_LENGTH,
)
from salescrm.core.database.base import TenantScopedModel


class Contact(TenantScopedModel):
    """A person, usually working at an account."""

    __tablename__ = "contacts"

    account_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True, index=True
    )
    first_name: Mapped[str] = mapped_column(String(MAX_SHORT_TEXT_LENGTH), nullable=False)
    last_name: Mapped[str] = mapped_column(String(MAX_SHORT_TEXT_LENGTH), nullable=False)
    email: Mapped[str | None] = mapped_column(
        String(MAX_EMAIL_LENGTH), nullable=True, index=True
    )
    phone: Mapped[str | None] = mapped_column(String(MAX_PHONE_LENGTH), nullable=True)
    mobile: Mapped[str | None] = mapped_column(String(MAX_PHONE_LENGTH), nullable=True)
    title: Mapped[str | None] = mapped_column(String(MAX_SHORT_TEXT_LENGTH), nullable=True)
    department: Mapped[str | None] = mapped_column(
        String(MAX_SHORT_TEXT_LENGTH), nullable=True
    )
    linkedin_url: Mapped[str | None] = mapped_column(String(MAX_URL_LENGTH), nullable=True)
    owner_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    is_primary: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    lead_source: Mapped[str | None] = mapped_column(
        String(MAX_SHORT_TEXT_LENGTH), nullable=True
    )
    custom_fields: Mapped[dict[str, Any]] = mapped_column(default=dict, nullable=False)
    tags: Mapped[list[str]] = mapped_column(default=list, nullable=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<Contact(id={self.id}, email={self.email}, tenant_id={self.tenant_id})>"
