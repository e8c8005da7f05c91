"""Session token denylist."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from salescrm.core.database.base import Base, TimestampMixin, UUIDMixin


class RevokedToken(Base, UUIDMixin, TimestampMixin):
    """A session token revoked before its natural expiry.

    Rows whose ``expires_at`` has passed are deleted on every logout,
    since the token would be rejected on expiry anyway.

    Attributes:
        jti: Unique token id from the claim-set
        user_id: The user the token was issued to
        tenant_id: The tenant the token was issued for
        expires_at: The token's own expiry
    """

    __tablename__ = "revoked_tokens"

    jti: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
    )
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tenant_id: Mapped[UUID] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<RevokedToken(jti={self.jti}, user_id={self.user_id})>"
