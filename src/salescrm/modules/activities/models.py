"""Activity (timeline entry) database model."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from salescrm.core.constants import MAX_NAME_LENGTH
from salescrm.core.database.base import TenantScopedModel


class Activity(TenantScopedModel):
    """An email, call, meeting, note or task logged against a record.

    Attributes:
        user_id: The user who performed the activity
        activity_type: email, call, meeting, note or task
        duration: Length in minutes
        parent_type: Kind of record the activity belongs to
        parent_id: Id of that record
        details: Free-form metadata (stored in the ``metadata`` column)
    """

    __tablename__ = "activities"
    __table_args__ = (Index("ix_activities_parent", "parent_type", "parent_id"),)

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    activity_type: Mapped[str] = mapped_column("type", String(50), nullable=False)
    subject: Mapped[str | None] = mapped_column(String(MAX_NAME_LENGTH), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    status: Mapped[str] = mapped_column(String(50), default="completed", nullable=False)
    priority: Mapped[str] = mapped_column(String(20), default="medium", nullable=False)
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    parent_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    parent_id: Mapped[UUID | None] = mapped_column(nullable=True)
    details: Mapped[dict[str, Any]] = mapped_column("metadata", default=dict, nullable=False)

    def __repr__(self) -> str:
        return f"<Activity(id={self.id}, type={self.activity_type})>"
