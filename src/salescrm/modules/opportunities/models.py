"""Sales pipeline database models."""

from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import (
    Boolean,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    false,
)
from sqlalchemy.orm import Mapped, mapped_column

from salescrm.core.constants import MAX_NAME_LENGTH, MAX_SHORT_TEXT_LENGTH
from salescrm.core.database.base import TenantScopedModel


class SalesStage(TenantScopedModel):
    """One step of a tenant's sales pipeline.

    Six stages are created when a tenant is onboarded; ``stage_order`` is
    unique per tenant.
    """

    __tablename__ = "sales_stages"
    __table_args__ = (
        UniqueConstraint("tenant_id", "stage_order", name="uq_sales_stages_tenant_order"),
    )

    name: Mapped[str] = mapped_column(String(MAX_NAME_LENGTH), nullable=False)
    probability: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    stage_order: Mapped[int] = mapped_column(Integer, nullable=False)
    is_closed_won: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    is_closed_lost: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )

    @property
    def is_closed(self) -> bool:
        return self.is_closed_won or self.is_closed_lost

    def __repr__(self) -> str:
        return f"<SalesStage(name={self.name}, order={self.stage_order})>"


class Opportunity(TenantScopedModel):
    """A potential deal with an account."""

    __tablename__ = "opportunities"

    account_id: Mapped[UUID] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(MAX_NAME_LENGTH), nullable=False, index=True)
    amount: Mapped[Decimal | None] = mapped_column(Numeric(15, 2), nullable=True)
    stage_id: Mapped[UUID] = mapped_column(
        ForeignKey("sales_stages.id"), nullable=False, index=True
    )
    probability: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    expected_close_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    actual_close_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    lead_source: Mapped[str | None] = mapped_column(
        String(MAX_SHORT_TEXT_LENGTH), nullable=True
    )
    campaign_id: Mapped[str | None] = mapped_column(String(MAX_NAME_LENGTH), nullable=True)
    owner_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    custom_fields: Mapped[dict[str, Any]] = mapped_column(default=dict, nullable=False)
    tags: Mapped[list[str]] = mapped_column(default=list, nullable=False)

    def __repr__(self) -> str:
        return f"<Opportunity(id={self.id}, name={self.name}, tenant_id={self.tenant_id})>"
