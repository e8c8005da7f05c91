"""Integration tests for global search."""

import pytest
from httpx import AsyncClient

from salescrm.modules.tenants.services import Onboarding


pytestmark = pytest.mark.integration

URL = "/api/v1/search"


@pytest.fixture
async def records(client: AsyncClient, acme: Onboarding, admin_headers) -> dict[str, str]:
    account = await client.post(
        "/api/v1/accounts",
        json={"name": "Umbrella Corp", "industry": "Pharma"},
        headers=admin_headers,
    )
    contact = await client.post(
        "/api/v1/contacts",
        json={"firstName": "Ada", "lastName": "Umbrella", "email": "ada@umbrella.example.com"},
        headers=admin_headers,
    )
    lead = await client.post(
        "/api/v1/leads",
        json={"firstName": "Jordan", "lastName": "Lee", "company": "Umbrella Labs"},
        headers=admin_headers,
    )
    await client.post(
        "/api/v1/accounts", json={"name": "Hooli"}, headers=admin_headers
    )
    return {
        "account": account.json()["id"],
        "contact": contact.json()["id"],
        "lead": lead.json()["id"],
    }


class TestSearch:
    """Tests for GET /search."""

    async def test_groups_hits_by_entity(self, client: AsyncClient, records, admin_headers):
        response = await client.get(URL, params={"q": "umbrella"}, headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["query"] == "umbrella"
        results = data["results"]
        assert results["accounts"] == [
            {"id": records["account"], "title": "Umbrella Corp", "subtitle": "Pharma"}
        ]
        assert results["contacts"] == [
            {
                "id": records["contact"],
                "title": "Ada Umbrella",
                "subtitle": "ada@umbrella.example.com",
            }
        ]
        assert results["leads"] == [
            {"id": records["lead"], "title": "Jordan Lee", "subtitle": "Umbrella Labs"}
        ]
        assert results["opportunities"] == []

    async def test_entity_subset(self, client: AsyncClient, records, admin_headers):
        response = await client.get(
            URL, params={"q": "umbrella", "entities": "accounts, leads"}, headers=admin_headers
        )

        assert set(response.json()["results"]) == {"accounts", "leads"}

    async def test_unknown_entity(self, client: AsyncClient, acme, admin_headers):
        response = await client.get(
            URL, params={"q": "umbrella", "entities": "accounts,planets"}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["message"] == "Unknown entity 'planets'"

    async def test_query_too_short(self, client: AsyncClient, acme, admin_headers):
        response = await client.get(URL, params={"q": "u"}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "q"

    async def test_query_required(self, client: AsyncClient, acme, admin_headers):
        response = await client.get(URL, headers=admin_headers)

        assert response.status_code == 400

    async def test_other_tenants_not_searched(
        self, client: AsyncClient, records, globex, globex_headers
    ):
        response = await client.get(URL, params={"q": "umbrella"}, headers=globex_headers)

        assert all(hits == [] for hits in response.json()["results"].values())

    async def test_unreadable_entities_skipped(
        self, client: AsyncClient, acme: Onboarding, records, acme_rep, admin_headers, rep_headers
    ):
        await client.patch(
            f"/api/v1/roles/{acme.roles['Sales Rep'].id}",
            json={"permissions": {"contacts": ["read"]}},
            headers=admin_headers,
        )

        response = await client.get(URL, params={"q": "umbrella"}, headers=rep_headers)

        assert response.status_code == 200
        assert list(response.json()["results"]) == ["contacts"]

    async def test_requires_authentication(self, client: AsyncClient):
        response = await client.get(URL, params={"q": "umbrella"})

        assert response.status_code == 401
