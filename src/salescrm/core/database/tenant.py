"""Tenant-scoped database access.

``TenantScope`` wraps an ``AsyncSession`` so that every statement built
through it carries the caller's tenant predicate, and soft-deleted rows
stay hidden unless an internal caller opts in.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, TypeVar
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.interfaces import ORMOption
from sqlalchemy.sql import ColumnElement

from salescrm.core.database.pagination import Page, PageMeta, PageParams


ModelT = TypeVar("ModelT")


class TenantContextRequired(Exception):
    """Raised when a tenant scope is built without a tenant id."""

    def __init__(self, message: str = "Tenant context is required for this operation"):
        self.message = message
        super().__init__(self.message)


@dataclass
class QuerySpec:
    """Describes a list query before tenant scoping is applied.

    Attributes:
        filters: Extra WHERE clauses
        order_by: ORDER BY clauses; defaults to most recently updated first
        options: Loader options such as ``selectinload``
    """

    filters: list[ColumnElement[bool]] = field(default_factory=list)
    order_by: list[Any] = field(default_factory=list)
    options: list[ORMOption] = field(default_factory=list)


class TenantScope:
    """Session wrapper bound to a single tenant.

    The tenant id must come from a validated session token, never from
    request input.

    Usage:
        scope = TenantScope(session, auth.tenant_id)
        account = await scope.get(Account, account_id)
    """

    def __init__(self, session: AsyncSession, tenant_id: UUID) -> None:
        if tenant_id is None:
            raise TenantContextRequired()
        self.session = session
        self.tenant_id = tenant_id

    def predicates(
        self, model: Any, *, include_inactive: bool = False
    ) -> list[ColumnElement[bool]]:
        """Return the tenant (and active-row) predicates for ``model``."""
        clauses: list[ColumnElement[bool]] = [model.tenant_id == self.tenant_id]
        if not include_inactive and hasattr(model, "is_active"):
            clauses.append(model.is_active.is_(True))
        return clauses

    def scoped(
        self,
        statement: Select[Any],
        model: Any,
        *,
        include_inactive: bool = False,
    ) -> Select[Any]:
        """Apply the tenant predicates for ``model`` to an existing statement."""
        return statement.where(
            *self.predicates(model, include_inactive=include_inactive)
        )

    def select(self, model: type[ModelT], *, include_inactive: bool = False) -> Select[Any]:
        """Start a SELECT on ``model`` limited to this tenant."""
        return self.scoped(select(model), model, include_inactive=include_inactive)

    def build(
        self,
        model: type[ModelT],
        spec: QuerySpec | None = None,
        *,
        include_inactive: bool = False,
    ) -> Select[Any]:
        """Build the full list statement for ``model`` from a query spec."""
        spec = spec or QuerySpec()
        statement = self.select(model, include_inactive=include_inactive).where(
            *spec.filters
        )
        if spec.options:
            statement = statement.options(*spec.options)
        order_by = spec.order_by or default_ordering(model)
        return statement.order_by(*order_by)

    async def get(
        self,
        model: type[ModelT],
        ident: UUID,
        *,
        include_inactive: bool = False,
    ) -> ModelT | None:
        """Fetch one row by id.

        Returns None when the row does not exist, is soft-deleted, or
        belongs to another tenant. The three cases are indistinguishable.
        """
        statement = self.select(model, include_inactive=include_inactive).where(
            model.id == ident  # type: ignore[attr-defined]
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def exists(self, model: Any, ident: UUID) -> bool:
        """Check that an active row with ``ident`` exists in this tenant."""
        statement = (
            select(func.count())
            .select_from(model)
            .where(model.id == ident, *self.predicates(model))
        )
        result = await self.session.execute(statement)
        return bool(result.scalar_one())

    async def all(self, model: type[ModelT], spec: QuerySpec | None = None) -> Sequence[ModelT]:
        """Return every visible row matching ``spec``."""
        result = await self.session.execute(self.build(model, spec))
        return result.scalars().all()

    async def paginate(
        self,
        model: type[ModelT],
        spec: QuerySpec | None,
        params: PageParams,
        *,
        include_inactive: bool = False,
    ) -> Page[ModelT]:
        """Run a counted, paginated list query.

        Args:
            model: Mapped class to list
            spec: Extra filters, ordering, and loader options
            params: Clamped page and limit
            include_inactive: Also list soft-deleted rows

        Returns:
            The requested slice plus page metadata
        """
        statement = self.build(model, spec, include_inactive=include_inactive)

        count_statement = select(func.count()).select_from(
            statement.order_by(None).subquery()
        )
        total = (await self.session.execute(count_statement)).scalar_one()

        result = await self.session.execute(
            statement.offset(params.skip).limit(params.limit)
        )
        items = list(result.scalars().all())
        return Page(items=items, meta=PageMeta.build(params, total))

    def add(self, instance: Any) -> None:
        """Add an instance, forcing it into this tenant.

        Any tenant_id already set on the instance is overwritten.
        """
        instance.tenant_id = self.tenant_id
        self.session.add(instance)

    def soft_delete(self, instance: Any) -> None:
        """Mark a row inactive instead of deleting it."""
        if instance.tenant_id != self.tenant_id:
            raise TenantContextRequired("Row does not belong to the current tenant")
        instance.is_active = False

    async def flush(self) -> None:
        """Flush pending changes to the database."""
        await self.session.flush()

    async def commit(self) -> None:
        """Commit the current transaction."""
        await self.session.commit()

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        await self.session.rollback()

    async def refresh(self, instance: Any) -> None:
        """Refresh an instance from the database."""
        await self.session.refresh(instance)


def default_ordering(model: Any) -> list[Any]:
    """Most recently updated first, with id as a stable tie-breaker."""
    clauses: list[Any] = []
    if hasattr(model, "updated_at"):
        clauses.append(model.updated_at.desc())
    clauses.append(model.id.desc())
    return clauses
