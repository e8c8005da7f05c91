"""Unit tests for tenant-scoped query building."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from sqlalchemy.dialects import sqlite

from salescrm.core.database.tenant import QuerySpec, TenantContextRequired, TenantScope
from salescrm.modules.accounts.models import Account
from salescrm.modules.users.models import User


pytestmark = pytest.mark.unit


def compile_sql(statement) -> str:
    return str(statement.compile(dialect=sqlite.dialect()))


@pytest.fixture
def scope() -> TenantScope:
    return TenantScope(AsyncMock(), uuid4())


class TestTenantScope:
    """Tests for TenantScope statement building."""

    def test_requires_tenant(self):
        with pytest.raises(TenantContextRequired):
            TenantScope(AsyncMock(), None)  # type: ignore[arg-type]

    def test_filters_tenant_and_active(self, scope: TenantScope):
        sql = compile_sql(scope.build(Account))

        assert "accounts.tenant_id = " in sql
        assert "accounts.is_active IS " in sql

    def test_include_inactive_keeps_tenant(self, scope: TenantScope):
        sql = compile_sql(scope.build(Account, include_inactive=True))

        assert "accounts.tenant_id = " in sql
        assert "is_active" not in sql.split("WHERE", 1)[1]

    def test_tenant_bound_from_scope(self, scope: TenantScope):
        params = scope.build(Account).compile(dialect=sqlite.dialect()).params

        assert scope.tenant_id in params.values()

    def test_extra_filters_cannot_drop_tenant(self, scope: TenantScope):
        """Caller filters are ANDed onto the tenant predicate."""
        other_tenant = uuid4()
        spec = QuerySpec(filters=[Account.tenant_id == other_tenant])

        statement = scope.build(Account, spec)
        params = statement.compile(dialect=sqlite.dialect()).params

        assert scope.tenant_id in params.values()
        assert other_tenant in params.values()
        assert " OR " not in compile_sql(statement)

    def test_default_ordering(self, scope: TenantScope):
        sql = compile_sql(scope.build(Account))

        assert "ORDER BY accounts.updated_at DESC, accounts.id DESC" in sql

    def test_explicit_ordering(self, scope: TenantScope):
        sql = compile_sql(scope.build(User, QuerySpec(order_by=[User.email])))

        assert sql.endswith("ORDER BY users.email")
