"""Pytest configuration and shared fixtures.

Every test gets its own SQLite database file, so tests never share rows.
The application is built with ``create_app`` against that database and
driven through httpx's ASGI transport.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from salescrm.config import Settings
from salescrm.core.audit.models import AuditLog
from salescrm.core.auth.backend import pwd_context
from salescrm.core.auth.schemas import TokenIdentity
from salescrm.core.database.session import Database
from salescrm.core.permissions.defaults import ADMIN, SALES_MANAGER, SALES_REP
from salescrm.main import create_app
from salescrm.models import Base
from salescrm.modules.tenants.services import Onboarding, TenantService
from salescrm.modules.users.models import User


# Minimum bcrypt cost keeps the suite fast
pwd_context.update(bcrypt__rounds=4)

PASSWORD = "Admin123!"
TEST_SECRET_KEY = "test-secret-key-that-is-at-least-32-characters"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        secret_key=TEST_SECRET_KEY,
        environment="test",
        log_level="WARNING",
        redis_url=None,
        default_page_size=10,
        max_page_size=100,
    )


@pytest.fixture
async def database(settings: Settings) -> AsyncGenerator[Database, None]:
    """Database with every table created."""
    database = Database.from_settings(settings)
    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield database
    await database.dispose()


@pytest.fixture
async def db(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """A session for arranging and inspecting rows directly."""
    async with database.session_factory() as session:
        yield session


@pytest.fixture
async def app(settings: Settings, database: Database) -> AsyncGenerator[FastAPI, None]:
    """Application wired to the test database.

    Pending audit writes are drained before the database is disposed.
    """
    application = create_app(settings, database)
    yield application
    await application.state.audit_recorder.drain()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated HTTP client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


# ============================================================
# Tenants and users
# ============================================================


async def onboard(database: Database, name: str, domain: str) -> Onboarding:
    """Create a tenant whose first user holds the Admin role."""
    async with database.session_factory() as session:
        onboarding = await TenantService(session).onboard(
            name=name,
            domain=domain,
            admin_email=f"admin@{domain}",
            admin_password=PASSWORD,
            admin_first_name="Ada",
            admin_last_name="Admin",
            admin_role=ADMIN,
        )
        await session.commit()
    return onboarding


@pytest.fixture
async def acme(database: Database) -> Onboarding:
    """Tenant A."""
    return await onboard(database, "Acme Corp", "acme.example.com")


@pytest.fixture
async def globex(database: Database) -> Onboarding:
    """Tenant B."""
    return await onboard(database, "Globex", "globex.example.com")


UserMaker = Callable[[Onboarding, str, str], Awaitable[User]]


@pytest.fixture
def make_user(database: Database) -> UserMaker:
    """Create a user with one of the tenant's system roles."""

    async def _make(onboarding: Onboarding, role_name: str, email: str) -> User:
        async with database.session_factory() as session:
            user = await TenantService(session).add_user(
                onboarding.tenant,
                onboarding.roles,
                email=email,
                password=PASSWORD,
                role_name=role_name,
                first_name=role_name.split()[-1],
                last_name="User",
            )
            await session.commit()
        return user

    return _make


@pytest.fixture
async def acme_rep(acme: Onboarding, make_user: UserMaker) -> User:
    return await make_user(acme, SALES_REP, "rep@acme.example.com")


@pytest.fixture
async def acme_manager(acme: Onboarding, make_user: UserMaker) -> User:
    return await make_user(acme, SALES_MANAGER, "manager@acme.example.com")


# ============================================================
# Tokens and authenticated clients
# ============================================================


def auth_headers(app: FastAPI, user: User) -> dict[str, str]:
    """Bearer header for ``user`` signed by the app's token service."""
    token = app.state.token_service.issue(
        TokenIdentity(
            user_id=user.id,
            tenant_id=user.tenant_id,
            role_id=user.role_id,
            email=user.email,
        )
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for(app: FastAPI) -> Callable[[User], dict[str, str]]:
    """Build a bearer header for any user."""
    return lambda user: auth_headers(app, user)


@pytest.fixture
def password() -> str:
    """Password shared by every fixture user."""
    return PASSWORD


@pytest.fixture
def admin_headers(app: FastAPI, acme: Onboarding) -> dict[str, str]:
    return auth_headers(app, acme.admin)


@pytest.fixture
def rep_headers(app: FastAPI, acme_rep: User) -> dict[str, str]:
    return auth_headers(app, acme_rep)


@pytest.fixture
def manager_headers(app: FastAPI, acme_manager: User) -> dict[str, str]:
    return auth_headers(app, acme_manager)


@pytest.fixture
def globex_headers(app: FastAPI, globex: Onboarding) -> dict[str, str]:
    return auth_headers(app, globex.admin)


# ============================================================
# Audit
# ============================================================


AuditFetcher = Callable[..., Awaitable[list[AuditLog]]]


@pytest.fixture
def audit_logs(app: FastAPI, database: Database) -> AuditFetcher:
    """Drain pending audit writes, then return matching rows oldest first."""

    async def _fetch(**filters: object) -> list[AuditLog]:
        await app.state.audit_recorder.drain()
        async with database.session_factory() as session:
            stmt = select(AuditLog).filter_by(**filters).order_by(AuditLog.timestamp)
            result = await session.execute(stmt)
            return list(result.scalars().all())

    return _fetch
