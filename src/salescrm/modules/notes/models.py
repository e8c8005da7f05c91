"""Note database model."""

from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column

from salescrm.core.database.base import TenantScopedModel


class Note(TenantScopedModel):
    """Free text attached to a record. Private notes are author-only."""

    __tablename__ = "notes"
    __table_args__ = (Index("ix_notes_parent", "parent_type", "parent_id"),)

    author_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    parent_type: Mapped[str] = mapped_column(String(50), nullable=False)
    parent_id: Mapped[UUID] = mapped_column(nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_private: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, parent={self.parent_type}:{self.parent_id})>"
