import pytest
from httpx import AsyncClient

from empowered_camps.core.models.domain.enums import UserRole

pytestmark = pytest.mark.asyncio

URL = "/api/v1/curriculum"


async def _global_template(client):
    response = await client.post(
        f"{URL}/templates",
        json={"name": "Multi-Sport Week", "is_global": True, "total_days": 1, "age_min": 6, "age_max": 12},
    )
    assert response.status_code == 201
    return response.json()


async def _global_block(client, title="Dynamic Warmup", minutes=10):
    response = await client.post(
        f"{URL}/blocks", json={"title": title, "duration_minutes": minutes, "category": "warmup", "is_global": True}
    )
    assert response.status_code == 201
    return response.json()


async def test_create_rejects_inverted_age_range(client: AsyncClient):
    response = await client.post(f"{URL}/templates", json={"name": "Bad", "age_min": 12, "age_max": 6})

    assert response.status_code == 400
    assert response.json()["error"] == "age_min cannot be greater than age_max"


async def test_only_hq_creates_global_records(client: AsyncClient, auth, tenant):
    auth.login(role=UserRole.director, tenant_id=tenant.id)

    response = await client.post(f"{URL}/templates", json={"name": "Ours", "is_global": True})

    assert response.status_code == 403
    assert response.json()["error"] == "Only HQ admins can create global curriculum"


async def test_licensee_sees_global_but_cannot_edit(client: AsyncClient, auth, tenant):
    template = await _global_template(client)
    auth.login(role=UserRole.director, tenant_id=tenant.id)

    listed = (await client.get(f"{URL}/templates")).json()
    response = await client.patch(f"{URL}/templates/{template['id']}", json={"name": "Renamed"})

    assert [t["id"] for t in listed] == [template["id"]]
    assert response.status_code == 403


async def test_other_licensee_templates_are_hidden(client: AsyncClient, auth, tenant):
    auth.login(role=UserRole.licensee_owner, tenant_id=tenant.id)
    own = (await client.post(f"{URL}/templates", json={"name": "Chicago Plan"})).json()
    auth.login(role=UserRole.licensee_owner, tenant_id="someone-else")

    assert (await client.get(f"{URL}/templates")).json() == []
    assert (await client.get(f"{URL}/templates/{own['id']}")).status_code == 404


async def test_age_filter_keeps_overlapping_ranges(client: AsyncClient):
    await _global_template(client)

    assert len((await client.get(f"{URL}/templates", params={"age_min": 10})).json()) == 1
    assert (await client.get(f"{URL}/templates", params={"age_min": 13})).json() == []


async def test_build_day_plan(client: AsyncClient):
    template = await _global_template(client)
    warmup = await _global_block(client)
    drill = await _global_block(client, "Passing Drill", 20)

    days_url = f"{URL}/templates/{template['id']}/days"
    day = (await client.post(days_url, json={"day_number": 2, "title": "Day Two"})).json()
    first = (await client.post(f"{URL}/days/{day['id']}/blocks", json={"block_id": warmup["id"]})).json()
    second = (
        await client.post(
            f"{URL}/days/{day['id']}/blocks", json={"block_id": drill["id"], "custom_duration_minutes": 25}
        )
    ).json()

    assert (first["order_index"], second["order_index"]) == (0, 1)

    reordered = await client.put(
        f"{URL}/days/{day['id']}/blocks/order", json={"day_block_ids": [second["id"], first["id"]]}
    )
    assert reordered.status_code == 204

    detail = (await client.get(f"{URL}/templates/{template['id']}")).json()
    assert detail["total_days"] == 2
    assert detail["days"][0]["total_minutes"] == 35
    assert [b["block"]["title"] for b in detail["days"][0]["blocks"]] == ["Passing Drill", "Dynamic Warmup"]


async def test_reorder_rejects_foreign_day_block(client: AsyncClient):
    template = await _global_template(client)
    day = (await client.post(f"{URL}/templates/{template['id']}/days", json={"day_number": 1, "title": "One"})).json()

    response = await client.put(f"{URL}/days/{day['id']}/blocks/order", json={"day_block_ids": ["nope"]})

    assert response.status_code == 400


async def test_placed_block_is_deactivated_not_deleted(client: AsyncClient):
    template = await _global_template(client)
    block = await _global_block(client)
    spare = await _global_block(client, "Cooldown", 5)
    day = (await client.post(f"{URL}/templates/{template['id']}/days", json={"day_number": 1, "title": "One"})).json()
    await client.post(f"{URL}/days/{day['id']}/blocks", json={"block_id": block["id"]})

    assert (await client.delete(f"{URL}/blocks/{block['id']}")).json() == {"deleted": False}
    assert (await client.delete(f"{URL}/blocks/{spare['id']}")).json() == {"deleted": True}
    assert (await client.get(f"{URL}/blocks")).json() == []


async def test_duplicate_copies_days_into_own_scope(client: AsyncClient, auth, tenant):
    template = await _global_template(client)
    block = await _global_block(client)
    day = (await client.post(f"{URL}/templates/{template['id']}/days", json={"day_number": 1, "title": "One"})).json()
    await client.post(f"{URL}/days/{day['id']}/blocks", json={"block_id": block["id"]})
    auth.login(role=UserRole.director, tenant_id=tenant.id)

    response = await client.post(f"{URL}/templates/{template['id']}/duplicate")

    assert response.status_code == 201
    copy = response.json()
    assert copy["name"] == "Multi-Sport Week (Copy)"
    assert copy["licensee_id"] == tenant.id
    assert copy["is_global"] is False
    assert copy["days"][0]["blocks"][0]["block_id"] == block["id"]


async def test_assign_and_read_camp_curriculum(client: AsyncClient, camp):
    template = await _global_template(client)

    assigned = await client.post(f"{URL}/assignments", json={"camp_id": camp.id, "template_id": template["id"]})

    assert assigned.json()["template_name"] == "Multi-Sport Week"
    curriculum = (await client.get(f"{URL}/camps/{camp.id}")).json()
    assert curriculum["template"]["id"] == template["id"]
    camps = (await client.get(f"{URL}/camps")).json()["camps"]
    assert camps[0]["template_name"] == "Multi-Sport Week"
    assignments = (await client.get(f"{URL}/assignments")).json()
    assert assignments[0]["camp_name"] == "Summer Multi-Sport Week"

    assert (await client.delete(f"{URL}/assignments/{camp.id}")).json() == {"removed": True}
    assert (await client.get(f"{URL}/camps/{camp.id}")).json()["assignment"] is None


async def test_other_tenant_camp_is_not_found(client: AsyncClient, auth, camp):
    auth.login(role=UserRole.director, tenant_id="someone-else")

    assert (await client.get(f"{URL}/camps/{camp.id}")).status_code == 404


async def test_parent_is_forbidden(client: AsyncClient, auth):
    auth.login(role=UserRole.parent)

    assert (await client.get(f"{URL}/templates")).status_code == 403


async def test_explicit_null_keeps_required_fields(client: AsyncClient):
    template = await _global_template(client)

    response = await client.patch(
        f"{URL}/templates/{template['id']}", json={"name": None, "is_active": None, "age_max": None}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Multi-Sport Week"
    assert body["is_active"] is True
    assert body["age_max"] is None
