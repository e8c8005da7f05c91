"""Integration tests for role-based access control on the HTTP API."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from factories.tenant import RegisterRequestFactory
from salescrm.modules.tenants.services import Onboarding
from salescrm.modules.users.models import User


pytestmark = pytest.mark.integration


async def create_account(client: AsyncClient, headers: dict[str, str]) -> str:
    response = await client.post("/api/v1/accounts", json={"name": "Initech"}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["id"]


class TestSalesRep:
    """Reps read and write CRM records but never delete or administer."""

    @pytest.mark.parametrize(
        "path", ["accounts", "contacts", "leads", "opportunities", "activities", "tasks", "notes"]
    )
    async def test_can_list_crm_records(
        self, client: AsyncClient, acme, acme_rep, rep_headers, path: str
    ):
        response = await client.get(f"/api/v1/{path}", headers=rep_headers)

        assert response.status_code == 200

    async def test_cannot_delete(self, client: AsyncClient, acme, acme_rep, rep_headers):
        account_id = await create_account(client, rep_headers)

        response = await client.delete(f"/api/v1/accounts/{account_id}", headers=rep_headers)

        assert response.status_code == 403
        body = response.json()
        assert body["status"] == 403
        assert body["type"].endswith("/errors/forbidden")
        assert body["required_permission"] == "accounts:delete"
        assert "WWW-Authenticate" not in response.headers

    async def test_denied_delete_changes_nothing(
        self, client: AsyncClient, acme, acme_rep, rep_headers, audit_logs
    ):
        account_id = await create_account(client, rep_headers)

        await client.delete(f"/api/v1/accounts/{account_id}", headers=rep_headers)

        still_there = await client.get(f"/api/v1/accounts/{account_id}", headers=rep_headers)
        assert still_there.status_code == 200
        assert await audit_logs(action="DELETE") == []

    @pytest.mark.parametrize("path", ["users", "roles"])
    async def test_cannot_administer(
        self, client: AsyncClient, acme, acme_rep, rep_headers, path: str
    ):
        response = await client.get(f"/api/v1/{path}", headers=rep_headers)

        assert response.status_code == 403
        assert response.json()["required_permission"] == f"{path}:read"


class TestSalesManager:
    """Managers may delete CRM records but not manage users."""

    async def test_can_delete(
        self, client: AsyncClient, acme, acme_manager, manager_headers, admin_headers
    ):
        account_id = await create_account(client, admin_headers)

        response = await client.delete(
            f"/api/v1/accounts/{account_id}", headers=manager_headers
        )

        assert response.status_code == 204

    async def test_cannot_create_users(
        self, client: AsyncClient, acme, acme_manager, manager_headers, password
    ):
        response = await client.post(
            "/api/v1/users",
            json={"email": "hire@acme.example.com", "password": password},
            headers=manager_headers,
        )

        assert response.status_code == 403
        assert response.json()["required_permission"] == "users:write"


class TestSuperAdmin:
    """The wildcard role is granted everything in its tenant."""

    async def test_wildcard_grants_all(self, client: AsyncClient):
        signup = RegisterRequestFactory.build()
        registered = await client.post(
            "/api/v1/auth/register",
            json=signup.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        headers = {"Authorization": f"Bearer {registered.json()['accessToken']}"}

        account_id = await create_account(client, headers)

        assert (await client.get("/api/v1/users", headers=headers)).status_code == 200
        assert (await client.get("/api/v1/roles", headers=headers)).status_code == 200
        assert (
            await client.delete(f"/api/v1/accounts/{account_id}", headers=headers)
        ).status_code == 204


class TestNoRole:
    """Users without a role can sign in but are granted nothing."""

    @pytest.fixture
    async def roleless(self, acme_rep: User, db: AsyncSession) -> User:
        user = await db.get(User, acme_rep.id)
        user.role_id = None
        await db.commit()
        return user

    async def test_denied_everywhere(
        self, client: AsyncClient, acme: Onboarding, roleless: User, rep_headers
    ):
        response = await client.get("/api/v1/accounts", headers=rep_headers)

        assert response.status_code == 403

    async def test_profile_still_available(
        self, client: AsyncClient, acme: Onboarding, roleless: User, rep_headers
    ):
        response = await client.get("/api/v1/auth/me", headers=rep_headers)

        assert response.status_code == 200
        assert response.json()["role"] is None
        assert response.json()["permissions"] == {}

    async def test_search_returns_nothing(
        self, client: AsyncClient, acme: Onboarding, roleless: User, rep_headers
    ):
        response = await client.get(
            "/api/v1/search", params={"q": "anything"}, headers=rep_headers
        )

        assert response.status_code == 200
        assert response.json()["results"] == {}


class TestUnauthenticated:
    """Every business endpoint needs a session token."""

    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("GET", "/api/v1/accounts"),
            ("POST", "/api/v1/accounts"),
            ("GET", "/api/v1/users"),
            ("GET", "/api/v1/roles"),
            ("GET", "/api/v1/opportunities/stages"),
            ("POST", "/api/v1/auth/logout"),
        ],
    )
    async def test_missing_token(self, client: AsyncClient, method: str, path: str):
        response = await client.request(method, path)

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    async def test_wrong_scheme(self, client: AsyncClient, acme):
        response = await client.get(
            "/api/v1/accounts", headers={"Authorization": "Basic YWRtaW46cGFzcw=="}
        )

        assert response.status_code == 401
