"""Tenant onboarding.

Creating a tenant also creates everything a new CRM workspace needs to
be usable: the system roles, the default sales pipeline, and the first
administrator.
"""

from dataclasses import dataclass, field
from typing import TypedDict

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from salescrm.core.auth.backend import hash_password
from salescrm.core.errors import ConflictError
from salescrm.core.permissions.defaults import DEFAULT_ROLES, SUPER_ADMIN
from salescrm.core.permissions.models import Role
from salescrm.core.utils.text import generate_slug
from salescrm.modules.opportunities.models import SalesStage
from salescrm.modules.tenants.models import Tenant
from salescrm.modules.users.models import User


logger = structlog.get_logger()


class StageDefinition(TypedDict):
    name: str
    probability: int
    is_closed_won: bool
    is_closed_lost: bool


DEFAULT_STAGES: list[StageDefinition] = [
    {
        "name": name,
        "probability": probability,
        "is_closed_won": name == "Closed Won",
        "is_closed_lost": name == "Closed Lost",
    }
    for name, probability in (
        ("Prospecting", 10),
        ("Qualification", 25),
        ("Proposal", 50),
        ("Negotiation", 75),
        ("Closed Won", 100),
        ("Closed Lost", 0),
    )
]


@dataclass
class Onboarding:
    """Everything created for a new tenant."""

    tenant: Tenant
    admin: User
    roles: dict[str, Role] = field(default_factory=dict)
    stages: list[SalesStage] = field(default_factory=list)


class TenantService:
    """Creates tenants and their initial users.

    Runs before any caller is authenticated, so it sets ``tenant_id``
    explicitly instead of going through a ``TenantScope``. Nothing is
    committed here; the caller owns the transaction.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _unique_slug(self, name: str) -> str:
        base = generate_slug(name)
        stmt = select(Tenant.slug).where(
            (Tenant.slug == base) | Tenant.slug.like(f"{base}-%")
        )
        taken = set((await self.session.execute(stmt)).scalars().all())
        if base not in taken:
            return base
        suffix = 2
        while f"{base}-{suffix}" in taken:
            suffix += 1
        return f"{base}-{suffix}"

    async def _check_domain_free(self, domain: str) -> None:
        stmt = select(func.count()).select_from(Tenant).where(
            func.lower(Tenant.domain) == domain.lower()
        )
        if (await self.session.execute(stmt)).scalar_one():
            raise ConflictError(
                "A workspace already exists for this domain",
                error_code="domain_exists",
                details={"domain": domain},
            )

    async def onboard(
        self,
        *,
        name: str,
        admin_email: str,
        admin_password: str,
        admin_first_name: str | None = None,
        admin_last_name: str | None = None,
        domain: str | None = None,
        admin_role: str = SUPER_ADMIN,
    ) -> Onboarding:
        """Create a tenant with its roles, pipeline and first user.

        Args:
            name: Organization name; the slug is derived from it
            admin_email: Sign-in email of the first user
            admin_password: Plain text password of the first user
            admin_first_name: Given name of the first user
            admin_last_name: Family name of the first user
            domain: Optional unique company domain
            admin_role: System role given to the first user

        Returns:
            The created rows

        Raises:
            ConflictError: If ``domain`` is already registered
        """
        if domain:
            await self._check_domain_free(domain)

        tenant = Tenant(name=name, slug=await self._unique_slug(name), domain=domain)
        self.session.add(tenant)
        await self.session.flush()

        roles: dict[str, Role] = {}
        for definition in DEFAULT_ROLES:
            role = Role(
                tenant_id=tenant.id,
                name=definition["name"],
                description=definition["description"],
                permissions=definition["permissions"],
                is_system_role=True,
            )
            self.session.add(role)
            roles[role.name] = role

        stages = [
            SalesStage(tenant_id=tenant.id, stage_order=order, **definition)
            for order, definition in enumerate(DEFAULT_STAGES, start=1)
        ]
        self.session.add_all(stages)
        await self.session.flush()

        admin = await self.add_user(
            tenant,
            roles,
            email=admin_email,
            password=admin_password,
            role_name=admin_role,
            first_name=admin_first_name,
            last_name=admin_last_name,
        )
        await self.session.refresh(tenant)

        logger.info(
            "tenant_onboarded",
            tenant_id=str(tenant.id),
            slug=tenant.slug,
            admin_id=str(admin.id),
        )
        return Onboarding(tenant=tenant, admin=admin, roles=roles, stages=stages)

    async def add_user(
        self,
        tenant: Tenant,
        roles: dict[str, Role],
        *,
        email: str,
        password: str,
        role_name: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User:
        """Create a user holding one of the tenant's system roles."""
        user = User(
            tenant_id=tenant.id,
            email=email.lower(),
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            role_id=roles[role_name].id,
        )
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user
