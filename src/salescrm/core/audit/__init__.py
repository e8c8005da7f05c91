"""Audit trail: models, snapshots, and the best-effort recorder."""

from salescrm.core.audit.models import AuditAction, AuditLog
from salescrm.core.audit.recorder import AuditEntry, AuditRecorder
from salescrm.core.audit.serialization import serialize_value, snapshot


__all__ = [
    "AuditAction",
    "AuditEntry",
    "AuditLog",
    "AuditRecorder",
    "serialize_value",
    "snapshot",
]
