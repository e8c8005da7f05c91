"""Integration tests for user and role administration."""

import pytest
from httpx import AsyncClient

from factories.user import UserCreateFactory
from salescrm.core.permissions.defaults import SUPER_ADMIN
from salescrm.modules.tenants.services import Onboarding
from salescrm.modules.users.models import User


pytestmark = pytest.mark.integration


class TestUsers:
    """Tests for /users."""

    async def test_create_user(
        self, client: AsyncClient, acme: Onboarding, admin_headers, password, audit_logs
    ):
        rep_role = acme.roles["Sales Rep"]

        response = await client.post(
            "/api/v1/users",
            json={
                "email": "New.Hire@Acme.example.com",
                "password": password,
                "firstName": "Nia",
                "roleId": str(rep_role.id),
            },
            headers=admin_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "new.hire@acme.example.com"
        assert data["roleId"] == str(rep_role.id)
        assert data["tenantId"] == str(acme.tenant.id)
        assert data["isActive"] is True
        assert "password" not in data
        assert "passwordHash" not in data

        logs = await audit_logs(resource_type="users", action="CREATE")
        assert logs[0].resource_id == data["id"]
        assert "password_hash" not in logs[0].after_data

    async def test_new_user_can_login(
        self, client: AsyncClient, acme: Onboarding, admin_headers
    ):
        hire = UserCreateFactory.build(role_id=acme.roles["Sales Rep"].id)
        await client.post(
            "/api/v1/users",
            json=hire.model_dump(mode="json", by_alias=True, exclude_none=True),
            headers=admin_headers,
        )

        response = await client.post(
            "/api/v1/auth/login",
            json={"email": hire.email, "password": hire.password},
        )

        assert response.status_code == 200
        assert response.json()["user"]["role"] == "Sales Rep"

    async def test_duplicate_email(self, client: AsyncClient, acme, admin_headers, password):
        response = await client.post(
            "/api/v1/users",
            json={"email": "ADMIN@acme.example.com", "password": password},
            headers=admin_headers,
        )

        assert response.status_code == 409
        assert response.json()["type"].endswith("/errors/email_exists")

    async def test_same_email_allowed_in_other_tenant(
        self, client: AsyncClient, acme, globex, globex_headers, password
    ):
        response = await client.post(
            "/api/v1/users",
            json={"email": "admin@acme.example.com", "password": password},
            headers=globex_headers,
        )

        assert response.status_code == 201

    async def test_foreign_role_rejected(
        self, client: AsyncClient, acme, globex: Onboarding, admin_headers, password
    ):
        response = await client.post(
            "/api/v1/users",
            json={
                "email": "hire@acme.example.com",
                "password": password,
                "roleId": str(globex.roles["Admin"].id),
            },
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "roleId"

    async def test_weak_password(self, client: AsyncClient, acme, admin_headers):
        response = await client.post(
            "/api/v1/users",
            json={"email": "hire@acme.example.com", "password": "password1"},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "password"

    async def test_password_without_symbol(self, client: AsyncClient, acme, admin_headers):
        response = await client.post(
            "/api/v1/users",
            json={"email": "hire@acme.example.com", "password": "Password123"},
            headers=admin_headers,
        )

        assert response.status_code == 400
        error = response.json()["errors"][0]
        assert error["field"] == "password"
        assert "special character" in error["message"]

    async def test_list_includes_deactivated(
        self, client: AsyncClient, acme, acme_rep: User, admin_headers
    ):
        await client.delete(f"/api/v1/users/{acme_rep.id}", headers=admin_headers)

        response = await client.get("/api/v1/users", headers=admin_headers)

        users = {u["email"]: u["isActive"] for u in response.json()["data"]}
        assert users == {"admin@acme.example.com": True, "rep@acme.example.com": False}

    async def test_list_search(self, client: AsyncClient, acme, acme_rep, admin_headers):
        response = await client.get(
            "/api/v1/users", params={"search": "rep@"}, headers=admin_headers
        )

        assert [u["email"] for u in response.json()["data"]] == ["rep@acme.example.com"]

    async def test_update_role(
        self, client: AsyncClient, acme: Onboarding, acme_rep: User, admin_headers, rep_headers
    ):
        manager_role = acme.roles["Sales Manager"]

        response = await client.patch(
            f"/api/v1/users/{acme_rep.id}",
            json={"roleId": str(manager_role.id)},
            headers=admin_headers,
        )
        assert response.json()["roleId"] == str(manager_role.id)

        me = await client.get("/api/v1/auth/me", headers=rep_headers)
        assert me.json()["role"] == "Sales Manager"

    async def test_cannot_deactivate_self(self, client: AsyncClient, acme: Onboarding, admin_headers):
        response = await client.delete(f"/api/v1/users/{acme.admin.id}", headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["type"].endswith("/errors/self_deactivation")

    async def test_cannot_deactivate_self_by_update(
        self, client: AsyncClient, acme: Onboarding, admin_headers
    ):
        response = await client.patch(
            f"/api/v1/users/{acme.admin.id}", json={"isActive": False}, headers=admin_headers
        )

        assert response.status_code == 400

    async def test_reactivate(self, client: AsyncClient, acme, acme_rep: User, admin_headers):
        await client.delete(f"/api/v1/users/{acme_rep.id}", headers=admin_headers)

        response = await client.patch(
            f"/api/v1/users/{acme_rep.id}", json={"isActive": True}, headers=admin_headers
        )

        assert response.json()["isActive"] is True

    async def test_deactivated_user_cannot_login(
        self, client: AsyncClient, acme, acme_rep: User, admin_headers, password
    ):
        await client.delete(f"/api/v1/users/{acme_rep.id}", headers=admin_headers)

        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "rep@acme.example.com", "password": password},
        )

        assert response.status_code == 401

    async def test_manager_cannot_manage_users(
        self, client: AsyncClient, acme, acme_manager, manager_headers
    ):
        response = await client.get("/api/v1/users", headers=manager_headers)

        assert response.status_code == 403
        assert response.json()["required_permission"] == "users:read"


class TestRoles:
    """Tests for /roles."""

    async def test_list_roles(self, client: AsyncClient, acme, admin_headers):
        response = await client.get("/api/v1/roles", headers=admin_headers)

        assert response.status_code == 200
        assert [r["name"] for r in response.json()] == [
            "Admin",
            "Sales Manager",
            "Sales Rep",
            "Super Admin",
        ]
        assert all(r["isSystemRole"] for r in response.json())

    async def test_get_role(self, client: AsyncClient, acme: Onboarding, admin_headers):
        rep_role = acme.roles["Sales Rep"]

        response = await client.get(f"/api/v1/roles/{rep_role.id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["permissions"]["accounts"] == ["read", "write"]

    async def test_foreign_role_not_found(
        self, client: AsyncClient, acme, globex: Onboarding, admin_headers
    ):
        response = await client.get(
            f"/api/v1/roles/{globex.roles['Admin'].id}", headers=admin_headers
        )

        assert response.status_code == 404

    async def test_permission_change_applies_immediately(
        self, client: AsyncClient, acme: Onboarding, acme_rep, admin_headers, rep_headers
    ):
        rep_role = acme.roles["Sales Rep"]
        assert (await client.get("/api/v1/accounts", headers=rep_headers)).status_code == 200

        response = await client.patch(
            f"/api/v1/roles/{rep_role.id}",
            json={"permissions": {"leads": ["write", "read"]}},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["permissions"] == {"leads": ["read", "write"]}
        assert (await client.get("/api/v1/accounts", headers=rep_headers)).status_code == 403
        assert (await client.get("/api/v1/leads", headers=rep_headers)).status_code == 200

    async def test_invalid_permissions(self, client: AsyncClient, acme: Onboarding, admin_headers):
        rep_role = acme.roles["Sales Rep"]

        response = await client.patch(
            f"/api/v1/roles/{rep_role.id}",
            json={"permissions": {"accounts": ["fly"]}},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "permissions"

    async def test_system_role_cannot_be_renamed(
        self, client: AsyncClient, acme: Onboarding, admin_headers
    ):
        response = await client.patch(
            f"/api/v1/roles/{acme.roles['Sales Manager'].id}",
            json={"name": "Boss"},
            headers=admin_headers,
        )

        assert response.status_code == 400

    async def test_description_can_change(
        self, client: AsyncClient, acme: Onboarding, admin_headers, audit_logs
    ):
        role = acme.roles["Sales Rep"]

        response = await client.patch(
            f"/api/v1/roles/{role.id}",
            json={"description": "Front line"},
            headers=admin_headers,
        )

        assert response.json()["description"] == "Front line"
        logs = await audit_logs(resource_type="roles")
        assert logs[0].before_data["description"] == "Works their own pipeline"
        assert logs[0].after_data["description"] == "Front line"

    async def test_rep_cannot_edit_roles(
        self, client: AsyncClient, acme: Onboarding, acme_rep, rep_headers
    ):
        response = await client.patch(
            f"/api/v1/roles/{acme.roles['Sales Rep'].id}",
            json={"permissions": {"*": ["*"]}},
            headers=rep_headers,
        )

        assert response.status_code == 403


class TestPrivilegeEscalation:
    """Administrators cannot hand out access they do not hold."""

    @pytest.fixture
    async def acme_owner(self, acme: Onboarding, make_user) -> User:
        return await make_user(acme, SUPER_ADMIN, "owner@acme.example.com")

    @pytest.fixture
    def owner_headers(self, acme_owner: User, headers_for) -> dict[str, str]:
        return headers_for(acme_owner)

    async def test_cannot_widen_own_role(
        self, client: AsyncClient, acme: Onboarding, admin_headers, audit_logs
    ):
        response = await client.patch(
            f"/api/v1/roles/{acme.roles['Admin'].id}",
            json={"permissions": {"*": ["*"]}},
            headers=admin_headers,
        )

        assert response.status_code == 403
        assert response.json()["type"].endswith("/errors/forbidden")
        me = await client.get("/api/v1/auth/me", headers=admin_headers)
        assert "*" not in me.json()["permissions"]
        assert await audit_logs(resource_type="roles") == []

    @pytest.mark.parametrize(
        "permissions",
        [
            {"*": ["*"]},
            {"*": ["read"]},
            {"accounts": ["*"]},
            {"reports": ["read", "write"]},
        ],
    )
    async def test_cannot_grant_unheld_permissions(
        self, client: AsyncClient, acme: Onboarding, admin_headers, permissions
    ):
        rep_role = acme.roles["Sales Rep"]

        response = await client.patch(
            f"/api/v1/roles/{rep_role.id}",
            json={"permissions": permissions},
            headers=admin_headers,
        )

        assert response.status_code == 403
        unchanged = await client.get(f"/api/v1/roles/{rep_role.id}", headers=admin_headers)
        assert unchanged.json()["permissions"]["accounts"] == ["read", "write"]

    async def test_can_grant_held_permissions(
        self, client: AsyncClient, acme: Onboarding, admin_headers
    ):
        response = await client.patch(
            f"/api/v1/roles/{acme.roles['Sales Rep'].id}",
            json={"permissions": {"accounts": ["read", "write", "delete"]}},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["permissions"] == {"accounts": ["delete", "read", "write"]}

    async def test_cannot_edit_broader_role(
        self, client: AsyncClient, acme: Onboarding, admin_headers
    ):
        response = await client.patch(
            f"/api/v1/roles/{acme.roles['Super Admin'].id}",
            json={"permissions": {"accounts": ["read"]}},
            headers=admin_headers,
        )

        assert response.status_code == 403

    async def test_cannot_assign_self_super_admin(
        self, client: AsyncClient, acme: Onboarding, admin_headers
    ):
        response = await client.patch(
            f"/api/v1/users/{acme.admin.id}",
            json={"roleId": str(acme.roles["Super Admin"].id)},
            headers=admin_headers,
        )

        assert response.status_code == 403
        me = await client.get("/api/v1/auth/me", headers=admin_headers)
        assert me.json()["role"] == "Admin"
        assert "*" not in me.json()["permissions"]

    async def test_cannot_change_own_role(
        self, client: AsyncClient, acme: Onboarding, admin_headers
    ):
        response = await client.patch(
            f"/api/v1/users/{acme.admin.id}",
            json={"roleId": str(acme.roles["Sales Rep"].id)},
            headers=admin_headers,
        )

        assert response.status_code == 403

    async def test_cannot_promote_to_super_admin(
        self, client: AsyncClient, acme: Onboarding, acme_rep: User, admin_headers
    ):
        response = await client.patch(
            f"/api/v1/users/{acme_rep.id}",
            json={"roleId": str(acme.roles["Super Admin"].id)},
            headers=admin_headers,
        )

        assert response.status_code == 403

    async def test_cannot_create_super_admin(
        self, client: AsyncClient, acme: Onboarding, admin_headers, password
    ):
        response = await client.post(
            "/api/v1/users",
            json={
                "email": "crown@acme.example.com",
                "password": password,
                "roleId": str(acme.roles["Super Admin"].id),
            },
            headers=admin_headers,
        )

        assert response.status_code == 403
        listed = await client.get(
            "/api/v1/users", params={"search": "crown"}, headers=admin_headers
        )
        assert listed.json()["data"] == []

    async def test_cannot_deactivate_broader_user(
        self, client: AsyncClient, acme, acme_owner: User, admin_headers
    ):
        response = await client.delete(f"/api/v1/users/{acme_owner.id}", headers=admin_headers)

        assert response.status_code == 403

    async def test_superuser_may_edit_any_role(
        self, client: AsyncClient, acme: Onboarding, admin_headers, owner_headers
    ):
        response = await client.patch(
            f"/api/v1/roles/{acme.roles['Admin'].id}",
            json={"permissions": {"*": ["*"]}},
            headers=owner_headers,
        )

        assert response.status_code == 200
        me = await client.get("/api/v1/auth/me", headers=admin_headers)
        assert me.json()["permissions"] == {"*": ["*"]}

    async def test_superuser_may_assign_super_admin(
        self, client: AsyncClient, acme: Onboarding, acme_rep: User, owner_headers
    ):
        response = await client.patch(
            f"/api/v1/users/{acme_rep.id}",
            json={"roleId": str(acme.roles["Super Admin"].id)},
            headers=owner_headers,
        )

        assert response.status_code == 200
        assert response.json()["roleId"] == str(acme.roles["Super Admin"].id)
