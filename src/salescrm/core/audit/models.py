"""Audit log database model.

Stores one row per state-changing action or authentication event.
Rows are append-only: nothing in the application updates or deletes them.
"""

from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from salescrm.core.constants import (
    MAX_AUDIT_ACTION_LENGTH,
    MAX_IPV6_LENGTH,
    MAX_REQUEST_ID_LENGTH,
    MAX_RESOURCE_TYPE_LENGTH,
)
from salescrm.core.database.base import Base, UUIDMixin


class AuditAction(StrEnum):
    """Actions recorded in the audit trail."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    CONVERT = "CONVERT"
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILED = "LOGIN_FAILED"
    LOGOUT = "LOGOUT"


class AuditLog(Base, UUIDMixin):
    """Audit log entry for tracking who did what, when.

    Attributes:
        tenant_id: The tenant this action belongs to; null only for failed
            logins where no tenant could be resolved
        user_id: The acting user, if known
        action: An AuditAction value
        resource_type: Type of resource affected (accounts, auth, ...)
        resource_id: ID of the affected resource
        before_data: Snapshot before the change
        after_data: Snapshot after the change
        ip_address: Client IP address
        user_agent: Client user agent string
        request_id: Correlation ID for request tracing
        timestamp: When the action occurred
    """

    __tablename__ = "audit_logs"
    __table_args__ = (Index("ix_audit_logs_tenant_timestamp", "tenant_id", "timestamp"),)

    tenant_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    user_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # What happened
    action: Mapped[str] = mapped_column(
        String(MAX_AUDIT_ACTION_LENGTH),
        nullable=False,
        index=True,
    )
    resource_type: Mapped[str] = mapped_column(
        String(MAX_RESOURCE_TYPE_LENGTH),
        nullable=False,
        index=True,
    )
    resource_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        index=True,
    )

    # Data
    before_data: Mapped[dict[str, Any] | None] = mapped_column(nullable=True)
    after_data: Mapped[dict[str, Any] | None] = mapped_column(nullable=True)

    # Request context
    ip_address: Mapped[str | None] = mapped_column(
        String(MAX_IPV6_LENGTH),
        nullable=True,
    )
    user_agent: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    request_id: Mapped[str | None] = mapped_column(
        String(MAX_REQUEST_ID_LENGTH),
        nullable=True,
        index=True,
    )

    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return (
            f"<AuditLog(id={self.id}, action={self.action}, "
            f"resource_type={self.resource_type}, resource_id={self.resource_id})>"
        )
