#!/usr/bin/env python
"""
Generate demo/seed data for development.

Usage:
    python scripts/seed.py --scenario default
    python scripts/seed.py --scenario demo
"""

import argparse
import asyncio
import sys
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from salescrm.config import get_settings
from salescrm.core.database.session import Database
from salescrm.core.permissions.defaults import ADMIN, SALES_MANAGER, SALES_REP
from salescrm.modules.accounts.models import Account
from salescrm.modules.contacts.models import Contact
from salescrm.modules.leads.models import Lead
from salescrm.modules.opportunities.models import Opportunity
from salescrm.modules.tenants.models import Tenant
from salescrm.modules.tenants.services import Onboarding, TenantService


DEMO_DOMAIN = "demo.crm.com"
DEMO_PASSWORD = "Demo1234!"


async def seed_default(session: AsyncSession) -> Onboarding | None:
    """Create the demo tenant with an admin, a manager and a rep."""
    result = await session.execute(select(Tenant).where(Tenant.domain == DEMO_DOMAIN))
    existing = result.scalar_one_or_none()

    if existing:
        print(f"Demo tenant already exists: {existing.name}")
        return None

    service = TenantService(session)
    onboarding = await service.onboard(
        name="Demo Company",
        domain=DEMO_DOMAIN,
        admin_email=f"admin@{DEMO_DOMAIN}",
        admin_password=DEMO_PASSWORD,
        admin_first_name="Ada",
        admin_last_name="Admin",
        admin_role=ADMIN,
    )
    for email, role_name, first_name in (
        (f"manager@{DEMO_DOMAIN}", SALES_MANAGER, "Morgan"),
        (f"rep@{DEMO_DOMAIN}", SALES_REP, "Riley"),
    ):
        await service.add_user(
            onboarding.tenant,
            onboarding.roles,
            email=email,
            password=DEMO_PASSWORD,
            role_name=role_name,
            first_name=first_name,
            last_name="Demo",
        )

    await session.commit()
    print(f"Created tenant: {onboarding.tenant.name} ({onboarding.tenant.slug})")
    print(f"Users: admin@, manager@ and rep@{DEMO_DOMAIN} / {DEMO_PASSWORD}")
    return onboarding


async def seed_demo(session: AsyncSession) -> None:
    """Create the demo tenant plus a handful of CRM records."""
    onboarding = await seed_default(session)
    if onboarding is None:
        return

    tenant_id = onboarding.tenant.id
    owner_id = onboarding.admin.id
    first_stage = onboarding.stages[0]

    for name, industry in (
        ("Acme Corporation", "Manufacturing"),
        ("Globex Industries", "Energy"),
        ("Initech", "Software"),
    ):
        account = Account(
            tenant_id=tenant_id,
            name=name,
            industry=industry,
            account_type="prospect",
            owner_id=owner_id,
        )
        session.add(account)
        await session.flush()

        session.add(
            Contact(
                tenant_id=tenant_id,
                account_id=account.id,
                first_name="Pat",
                last_name=name.split()[0],
                email=f"pat@{name.split()[0].lower()}.example.com",
                owner_id=owner_id,
                is_primary=True,
            )
        )
        session.add(
            Opportunity(
                tenant_id=tenant_id,
                account_id=account.id,
                name=f"{name} renewal",
                amount=Decimal("25000.00"),
                stage_id=first_stage.id,
                probability=first_stage.probability,
                owner_id=owner_id,
            )
        )

    session.add(
        Lead(
            tenant_id=tenant_id,
            first_name="Jordan",
            last_name="Prospect",
            email="jordan@umbrella.example.com",
            company="Umbrella Corp",
            source="website",
            owner_id=owner_id,
        )
    )
    await session.commit()
    print("Created sample accounts, contacts, opportunities and a lead")


SCENARIOS = {
    "default": seed_default,
    "demo": seed_demo,
}


async def main(scenario: str) -> None:
    """Run the seeding based on scenario."""
    seed = SCENARIOS.get(scenario)
    if seed is None:
        print(f"Unknown scenario: {scenario}")
        print(f"Available scenarios: {', '.join(SCENARIOS)}")
        sys.exit(1)

    database = Database.from_settings(get_settings())
    try:
        async with database.session_factory() as session:
            await seed(session)
    finally:
        await database.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed database with demo data")
    parser.add_argument(
        "--scenario",
        "-s",
        default="default",
        help="Seed scenario to run (default, demo)",
    )
    args = parser.parse_args()

    asyncio.run(main(args.scenario))
