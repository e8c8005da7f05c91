"""Best-effort, fire-and-forget audit trail writer.

``AuditRecorder.record`` returns immediately. The append runs in a
detached asyncio task with its own session, so a slow or failing audit
store never delays or fails the request that triggered it, and client
disconnects do not cancel it.
"""

import asyncio
from typing import Any
from uuid import UUID

import structlog
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from salescrm.core.audit.models import AuditAction, AuditLog
from salescrm.core.constants import DEFAULT_AUDIT_DRAIN_TIMEOUT_SECONDS


log = structlog.get_logger()


class AuditEntry(BaseModel):
    """One audit event, captured at the point of the action.

    Attributes:
        tenant_id: Tenant of the acting user; None only for unknown logins
        actor_id: The acting user, if known
        action: What happened
        resource_type: Type of resource affected
        resource_id: ID of the affected resource
        before: Snapshot before the change
        after: Snapshot after the change
        ip_address: Client IP address
        user_agent: Client user agent
        request_id: Request correlation ID
    """

    model_config = ConfigDict(frozen=True)

    tenant_id: UUID | None
    actor_id: UUID | None = None
    action: AuditAction
    resource_type: str
    resource_id: str | None = None
    before: dict[str, Any] | None = None
    after: dict[str, Any] | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    request_id: str | None = None

    def to_model(self) -> AuditLog:
        """Build the AuditLog row for this entry."""
        return AuditLog(
            tenant_id=self.tenant_id,
            user_id=self.actor_id,
            action=self.action.value,
            resource_type=self.resource_type,
            resource_id=self.resource_id,
            before_data=self.before,
            after_data=self.after,
            ip_address=self.ip_address,
            user_agent=self.user_agent,
            request_id=self.request_id,
        )


class AuditRecorder:
    """Schedules audit appends without blocking the caller.

    Delivery is at-most-once: a failed append is logged and dropped.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        """Number of appends still in flight."""
        return len(self._pending)

    def record(self, entry: AuditEntry) -> None:
        """Schedule an append and return immediately. Never raises."""
        try:
            task = asyncio.get_running_loop().create_task(self._append(entry))
        except Exception as e:
            log.error(
                "audit_append_failed",
                action=entry.action.value,
                resource_type=entry.resource_type,
                resource_id=entry.resource_id,
                error=str(e),
            )
            return
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _append(self, entry: AuditEntry) -> None:
        try:
            async with self.session_factory() as session:
                session.add(entry.to_model())
                await session.commit()
        except Exception as e:
            log.error(
                "audit_append_failed",
                action=entry.action.value,
                resource_type=entry.resource_type,
                resource_id=entry.resource_id,
                tenant_id=str(entry.tenant_id) if entry.tenant_id else None,
                error_type=type(e).__name__,
                error=str(e),
            )
        else:
            log.debug(
                "audit_log_created",
                action=entry.action.value,
                resource_type=entry.resource_type,
                resource_id=entry.resource_id,
            )

    async def drain(self, timeout: float = DEFAULT_AUDIT_DRAIN_TIMEOUT_SECONDS) -> None:
        """Wait for in-flight appends, giving up after ``timeout`` seconds."""
        if not self._pending:
            return
        _done, not_done = await asyncio.wait(set(self._pending), timeout=timeout)
        if not_done:
            log.warning("audit_drain_timeout", pending=len(not_done))
