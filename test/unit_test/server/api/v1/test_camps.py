from datetime import date, timedelta

import pytest
from httpx import AsyncClient

from empowered_camps.core.models.domain.enums import UserRole

pytestmark = pytest.mark.asyncio

URL = "/api/v1/camps"


def _dates(offset_days=14, length=4):
    start = date.today() + timedelta(days=offset_days)
    return {"start_date": start.isoformat(), "end_date": (start + timedelta(days=length)).isoformat()}


async def test_public_listing_hides_finished_camps(client: AsyncClient, auth, finished_camp):
    auth.logout()

    camps = (await client.get(f"{URL}/public")).json()

    assert [c["id"] for c in camps] == []


async def test_public_listing_shows_open_camps(client: AsyncClient, auth, camp):
    auth.logout()

    camps = (await client.get(f"{URL}/public")).json()

    assert [c["id"] for c in camps] == [camp.id]


async def test_create_in_own_tenant(client: AsyncClient, auth, tenant):
    auth.login(role=UserRole.director, tenant_id=tenant.id)

    response = await client.post(URL, json={"name": "Fall Clinic", "tenant_id": "elsewhere", **_dates()})

    assert response.status_code == 201
    body = response.json()
    assert body["tenant_id"] == tenant.id
    assert body["status"] == "draft"


async def test_hq_must_name_tenant(client: AsyncClient):
    response = await client.post(URL, json={"name": "Fall Clinic", **_dates()})

    assert response.status_code == 400
    assert response.json()["error"] == "tenant_id is required"


async def test_end_before_start_is_rejected(client: AsyncClient, tenant):
    start = date.today() + timedelta(days=10)
    response = await client.post(
        URL,
        json={
            "name": "Backwards",
            "tenant_id": tenant.id,
            "start_date": start.isoformat(),
            "end_date": (start - timedelta(days=1)).isoformat(),
        },
    )

    assert response.status_code == 400
    assert response.json()["error"] == "end_date cannot be before start_date"


async def test_update_checks_ages(client: AsyncClient, camp):
    response = await client.patch(f"{URL}/{camp.id}", json={"min_age": 12, "max_age": 8})

    assert response.status_code == 400
    assert response.json()["error"] == "min_age cannot be greater than max_age"


async def test_update_camp(client: AsyncClient, camp):
    response = await client.patch(f"{URL}/{camp.id}", json={"capacity": 25, "location_name": "Lincoln Park"})

    body = response.json()
    assert body["capacity"] == 25
    assert body["location_name"] == "Lincoln Park"
    assert body["price_cents"] == 30000


async def test_other_tenant_camp_is_hidden(client: AsyncClient, auth, camp):
    auth.login(role=UserRole.director, tenant_id="elsewhere")

    assert (await client.get(f"{URL}/{camp.id}")).status_code == 404
    assert (await client.get(URL)).json() == []


async def test_parent_cannot_manage_camps(client: AsyncClient, auth):
    auth.login(role=UserRole.parent)

    assert (await client.get(URL)).status_code == 403
