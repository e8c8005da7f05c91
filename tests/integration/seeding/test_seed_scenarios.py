"""Integration tests for seed.py scenarios.

These tests verify that the seeding scripts correctly create the demo
tenant, its users and roles, and the sample CRM records.
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from salescrm.core.auth.backend import verify_password
from salescrm.core.permissions.models import Role
from salescrm.modules.accounts.models import Account
from salescrm.modules.contacts.models import Contact
from salescrm.modules.leads.models import Lead
from salescrm.modules.opportunities.models import Opportunity
from salescrm.modules.tenants.models import Tenant
from salescrm.modules.users.models import User
from scripts.seed import DEMO_DOMAIN, DEMO_PASSWORD, SCENARIOS, seed_default, seed_demo


pytestmark = pytest.mark.integration


async def count(db: AsyncSession, model: type) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()


class TestSeedDefault:
    """Tests for the default seeding scenario."""

    async def test_creates_demo_tenant(self, db: AsyncSession):
        onboarding = await seed_default(db)

        assert onboarding is not None
        tenant = (
            await db.execute(select(Tenant).where(Tenant.domain == DEMO_DOMAIN))
        ).scalar_one()
        assert tenant.slug == "demo-company"

    async def test_creates_one_user_per_role(self, db: AsyncSession):
        await seed_default(db)

        stmt = select(User.email, Role.name).join(Role, Role.id == User.role_id)
        rows = dict((await db.execute(stmt)).all())

        assert rows == {
            f"admin@{DEMO_DOMAIN}": "Admin",
            f"manager@{DEMO_DOMAIN}": "Sales Manager",
            f"rep@{DEMO_DOMAIN}": "Sales Rep",
        }

    async def test_passwords_hashed(self, db: AsyncSession):
        await seed_default(db)

        user = (
            await db.execute(select(User).where(User.email == f"rep@{DEMO_DOMAIN}"))
        ).scalar_one()
        assert user.password_hash != DEMO_PASSWORD
        assert verify_password(DEMO_PASSWORD, user.password_hash)

    async def test_is_idempotent(self, db: AsyncSession):
        await seed_default(db)

        assert await seed_default(db) is None
        assert await count(db, Tenant) == 1
        assert await count(db, User) == 3


class TestSeedDemo:
    """Tests for the demo seeding scenario."""

    async def test_creates_sample_records(self, db: AsyncSession):
        await seed_demo(db)

        assert await count(db, Account) == 3
        assert await count(db, Contact) == 3
        assert await count(db, Opportunity) == 3
        assert await count(db, Lead) == 1

    async def test_records_belong_to_demo_tenant(self, db: AsyncSession):
        await seed_demo(db)

        tenant_ids = set((await db.execute(select(Account.tenant_id))).scalars().all())
        assert len(tenant_ids) == 1

    async def test_second_run_adds_nothing(self, db: AsyncSession):
        await seed_demo(db)
        await seed_demo(db)

        assert await count(db, Account) == 3


def test_scenarios_registered():
    assert set(SCENARIOS) == {"default", "demo"}
