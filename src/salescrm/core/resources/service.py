"""Generic CRUD service for tenant-scoped CRM records.

Subclasses declare the model, the permission resource, searchable and
filterable columns, and the foreign references a payload may carry.
Every query goes through ``TenantScope``; every mutation commits first
and then hands an audit entry to the recorder.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, TypeVar
from uuid import UUID

import structlog
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from salescrm.core.audit.models import AuditAction
from salescrm.core.audit.recorder import AuditEntry, AuditRecorder
from salescrm.core.audit.serialization import snapshot
from salescrm.core.auth.dependencies import RequestInfo
from salescrm.core.auth.flow import AuthContext
from salescrm.core.database.base import TenantScopedModel
from salescrm.core.database.pagination import Page, PageParams
from salescrm.core.database.tenant import QuerySpec, TenantScope
from salescrm.core.errors import ConflictError, NotFoundError, ValidationFailed
from salescrm.core.utils.text import escape_like


logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=TenantScopedModel)


@dataclass(frozen=True)
class Reference:
    """A payload field that must point at a row in the caller's tenant.

    Attributes:
        field: Attribute name on the payload and model, e.g. ``owner_id``
        model: Mapped class the id must resolve to
        label: Human-readable target name for error messages
    """

    field: str
    model: type[Any]
    label: str


class TenantResourceService(Generic[ModelT]):
    """List, read, create, update and soft-delete one record type.

    Missing rows and rows owned by another tenant both raise the same
    NotFoundError.
    """

    model: ClassVar[type[Any]]
    resource: ClassVar[str]
    label: ClassVar[str] = "Record"
    search_fields: ClassVar[tuple[str, ...]] = ()
    references: ClassVar[tuple[Reference, ...]] = ()
    parent_models: ClassVar[Mapping[str, type[Any]]] = {}

    def __init__(
        self,
        db: AsyncSession,
        auth: AuthContext,
        recorder: AuditRecorder,
        request_info: RequestInfo | None = None,
    ) -> None:
        self.db = db
        self.auth = auth
        self.recorder = recorder
        self.request_info = request_info
        self.scope = TenantScope(db, auth.tenant_id)

    # ------------------------------------------------------------------
    # Query building
    # ------------------------------------------------------------------

    def visibility_filters(self) -> list[ColumnElement[bool]]:
        """Extra predicates hiding rows from this caller. None by default."""
        return []

    def search_filter(self, search: str) -> ColumnElement[bool] | None:
        """Case-insensitive substring match over ``search_fields``."""
        term = search.strip()
        if not term or not self.search_fields:
            return None
        pattern = f"%{escape_like(term)}%"
        return or_(
            *(
                getattr(self.model, name).ilike(pattern, escape="\\")
                for name in self.search_fields
            )
        )

    def build_query(
        self,
        search: str | None = None,
        filters: dict[str, Any] | None = None,
    ) -> QuerySpec:
        """Translate list parameters into a query spec."""
        spec = QuerySpec(filters=self.visibility_filters())
        if search:
            clause = self.search_filter(search)
            if clause is not None:
                spec.filters.append(clause)
        for name, value in (filters or {}).items():
            if value is None:
                continue
            spec.filters.append(getattr(self.model, name) == value)
        return spec

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list(
        self,
        params: PageParams,
        search: str | None = None,
        filters: dict[str, Any] | None = None,
    ) -> Page[ModelT]:
        """Return one page of visible records."""
        return await self.scope.paginate(
            self.model, self.build_query(search, filters), params
        )

    async def get(self, item_id: UUID) -> ModelT:
        """Fetch one visible record.

        Raises:
            NotFoundError: If the id is unknown, inactive, hidden, or
                belongs to another tenant
        """
        obj = await self.scope.get(self.model, item_id)
        if obj is None or not self.is_visible(obj):
            raise NotFoundError(f"{self.label} not found", resource=self.resource)
        return obj

    async def search(self, term: str, limit: int) -> Sequence[ModelT]:
        """Return up to ``limit`` visible records matching ``term``."""
        statement = self.scope.build(self.model, self.build_query(search=term))
        result = await self.db.execute(statement.limit(limit))
        return result.scalars().all()

    def is_visible(self, obj: ModelT) -> bool:  # noqa: ARG002
        """Row-level visibility beyond tenant scoping."""
        return True

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def prepare_create(self, values: dict[str, Any]) -> dict[str, Any]:
        """Fill defaults before a create. Override per resource."""
        return values

    async def prepare_update(
        self,
        obj: ModelT,  # noqa: ARG002
        values: dict[str, Any],
    ) -> dict[str, Any]:
        """Adjust changes before an update. Override per resource."""
        return values

    async def validate_references(self, values: dict[str, Any]) -> None:
        """Ensure every referenced id exists in the caller's tenant.

        Raises:
            ValidationFailed: With one field error per bad reference
        """
        errors: list[dict[str, Any]] = []
        for ref in self.references:
            ref_id = values.get(ref.field)
            if ref_id is None:
                continue
            if not await self.scope.exists(ref.model, ref_id):
                errors.append(
                    {
                        "field": to_camel(ref.field),
                        "message": f"Referenced {ref.label} does not exist",
                        "type": "invalid_reference",
                    }
                )
        if errors:
            raise ValidationFailed("Invalid references", errors=errors)

    async def validate_parent(
        self, values: dict[str, Any], obj: ModelT | None = None
    ) -> None:
        """Check a polymorphic ``parent_type``/``parent_id`` pair.

        The pair is validated together, falling back to the stored values
        of ``obj`` for whichever half the payload leaves out.

        Raises:
            ValidationFailed: The parent is unknown, foreign, or half-set
        """
        if not self.parent_models:
            return
        if "parent_type" not in values and "parent_id" not in values:
            return
        parent_type = values.get("parent_type", getattr(obj, "parent_type", None))
        parent_id = values.get("parent_id", getattr(obj, "parent_id", None))
        if parent_type is None and parent_id is None:
            return
        model = self.parent_models.get(parent_type) if parent_type else None
        if (
            model is None
            or parent_id is None
            or not await self.scope.exists(model, parent_id)
        ):
            raise ValidationFailed(
                errors=[
                    {
                        "field": "parentId",
                        "message": "Referenced parent record does not exist",
                        "type": "invalid_reference",
                    }
                ]
            )

    def _check_required(self, values: dict[str, Any]) -> None:
        columns = self.model.__table__.columns
        errors = [
            {
                "field": to_camel(key),
                "message": "Field cannot be null",
                "type": "null_not_allowed",
            }
            for key, value in values.items()
            if value is None and key in columns and not columns[key].nullable
        ]
        if errors:
            raise ValidationFailed(errors=errors)

    async def create(self, data: BaseModel) -> ModelT:
        """Create a record in the caller's tenant and audit it."""
        values = await self.prepare_create(data.model_dump(exclude_unset=True))
        self._check_required(values)
        await self.validate_references(values)
        await self.validate_parent(values)

        obj = self.model(**values)
        self.scope.add(obj)
        await self._flush()
        await self.scope.refresh(obj)
        await self.scope.commit()

        logger.info(
            "record_created",
            resource=self.resource,
            resource_id=str(obj.id),
        )
        self.audit(AuditAction.CREATE, obj.id, after=snapshot(obj))
        return obj

    async def update(self, item_id: UUID, data: BaseModel) -> ModelT:
        """Apply a partial update and audit the before/after state."""
        obj = await self.get(item_id)
        values = await self.prepare_update(obj, data.model_dump(exclude_unset=True))
        self._check_required(values)
        await self.validate_references(values)
        await self.validate_parent(values, obj)

        before = snapshot(obj)
        for key, value in values.items():
            setattr(obj, key, value)
        await self._flush()
        await self.scope.refresh(obj)
        await self.scope.commit()

        self.audit(AuditAction.UPDATE, obj.id, before=before, after=snapshot(obj))
        return obj

    async def delete(self, item_id: UUID) -> None:
        """Soft-delete a record and audit it."""
        obj = await self.get(item_id)
        before = snapshot(obj)
        self.scope.soft_delete(obj)
        await self._flush()
        await self.scope.refresh(obj)
        await self.scope.commit()

        logger.info(
            "record_deleted",
            resource=self.resource,
            resource_id=str(obj.id),
        )
        self.audit(AuditAction.DELETE, obj.id, before=before, after=snapshot(obj))

    async def _flush(self) -> None:
        try:
            await self.scope.flush()
        except IntegrityError as e:
            await self.scope.rollback()
            logger.warning("record_conflict", resource=self.resource, error=str(e.orig))
            raise ConflictError(f"{self.label} conflicts with existing data") from None

    # ------------------------------------------------------------------
    # Audit
    # ------------------------------------------------------------------

    def audit(
        self,
        action: AuditAction,
        resource_id: UUID | str | None,
        before: dict[str, Any] | None = None,
        after: dict[str, Any] | None = None,
        resource_type: str | None = None,
    ) -> None:
        """Hand an audit entry to the recorder. Never raises."""
        info = self.request_info
        self.recorder.record(
            AuditEntry(
                tenant_id=self.auth.tenant_id,
                actor_id=self.auth.user_id,
                action=action,
                resource_type=resource_type or self.resource,
                resource_id=str(resource_id) if resource_id is not None else None,
                before=before,
                after=after,
                ip_address=info.ip_address if info else None,
                user_agent=info.user_agent if info else None,
                request_id=info.request_id if info else None,
            )
        )
