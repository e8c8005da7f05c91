"""Tenant database models."""

from typing import Any

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from salescrm.core.constants import MAX_NAME_LENGTH, MAX_SLUG_LENGTH
from salescrm.core.database.base import Base, TimestampMixin, UUIDMixin


class Tenant(Base, UUIDMixin, TimestampMixin):
    """Tenant model representing one customer organization.

    All tenant-scoped data references this table via tenant_id. Tenants
    are disabled through ``is_active`` rather than deleted.
    """

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=False,
        index=True,
    )
    slug: Mapped[str] = mapped_column(
        String(MAX_SLUG_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    domain: Mapped[str | None] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=True,
        unique=True,
    )
    plan: Mapped[str] = mapped_column(
        String(50),
        default="starter",
        nullable=False,
    )
    settings: Mapped[dict[str, Any]] = mapped_column(
        default=dict,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, name={self.name}, slug={self.slug})>"
