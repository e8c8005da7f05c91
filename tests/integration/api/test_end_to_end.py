"""End-to-end flow against the seeded demo tenant."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from scripts.seed import DEMO_DOMAIN, DEMO_PASSWORD, seed_default


pytestmark = pytest.mark.integration


async def test_demo_admin_session(
    client: AsyncClient, db: AsyncSession, globex, globex_headers, audit_logs
):
    onboarding = await seed_default(db)

    login = await client.post(
        "/api/v1/auth/login",
        json={"email": f"admin@{DEMO_DOMAIN}", "password": DEMO_PASSWORD},
    )
    assert login.status_code == 200
    session = login.json()
    assert session["user"]["role"] == "Admin"
    headers = {"Authorization": f"Bearer {session['accessToken']}"}

    created = await client.post(
        "/api/v1/accounts",
        json={"name": "Initech", "ownerId": session["user"]["id"]},
        headers=headers,
    )
    assert created.status_code == 201
    account = created.json()
    assert account["tenantId"] == str(onboarding.tenant.id)

    logs = await audit_logs(resource_type="accounts", action="CREATE")
    assert [log.resource_id for log in logs] == [account["id"]]
    assert logs[0].tenant_id == onboarding.tenant.id
    assert logs[0].user_id == onboarding.admin.id

    # The demo admin's id means nothing inside another tenant
    foreign = await client.post(
        "/api/v1/accounts",
        json={"name": "Copycat", "ownerId": session["user"]["id"]},
        headers=globex_headers,
    )
    assert foreign.status_code == 400
    assert foreign.json()["errors"][0]["field"] == "ownerId"
    assert "Initech" not in foreign.text
