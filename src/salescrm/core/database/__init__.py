"""Database layer - session management, base models, tenant scoping."""

from salescrm.core.database.base import (
    Base,
    JSONType,
    SoftDeleteMixin,
    TenantMixin,
    TenantScopedModel,
    TimestampMixin,
    UUIDMixin,
)
from salescrm.core.database.pagination import Page, PageMeta, PageParams, PageResponse
from salescrm.core.database.session import Database, get_db
from salescrm.core.database.tenant import QuerySpec, TenantContextRequired, TenantScope


__all__ = [
    "Base",
    "Database",
    "JSONType",
    "Page",
    "PageMeta",
    "PageParams",
    "PageResponse",
    "QuerySpec",
    "SoftDeleteMixin",
    "TenantContextRequired",
    "TenantMixin",
    "TenantScope",
    "TenantScopedModel",
    "TimestampMixin",
    "UUIDMixin",
    "get_db",
]
