import pytest
from httpx import AsyncClient

from empowered_camps.core.models.domain.enums import UserRole

pytestmark = pytest.mark.asyncio

URL = "/api/v1/cit/applications"

FORM = {"first_name": "Jordan", "last_name": "Lee", "email": " Jordan.Lee@Example.com ", "school_name": "Lincoln High"}


async def _submit(client, **overrides):
    response = await client.post(URL, json={**FORM, **overrides})
    assert response.status_code == 201
    return response.json()


async def test_public_submission(client: AsyncClient, auth):
    auth.logout()

    application = await _submit(client)

    assert application["status"] == "applied"
    assert application["email"] == "jordan.lee@example.com"
    assert application["user_id"] is None
    assert [e["type"] for e in application["progress_events"]] == ["application_submitted"]


async def test_signed_in_applicant_is_linked(client: AsyncClient, auth):
    auth.login(role=UserRole.parent, user_id="teen-1")

    application = await _submit(client)

    assert application["user_id"] == "teen-1"


async def test_submission_validates_names(client: AsyncClient):
    response = await client.post(URL, json={**FORM, "first_name": ""})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"


async def test_listing_is_hq_only(client: AsyncClient, auth, tenant):
    auth.login(role=UserRole.director, tenant_id=tenant.id)

    assert (await client.get(URL)).status_code == 403


async def test_list_filters_and_pages(client: AsyncClient):
    await _submit(client)
    await _submit(client, first_name="Casey", email="casey@example.com", school_name="Roosevelt")
    await _submit(client, first_name="Riley", email="riley@example.com", school_name="Roosevelt")

    page = (await client.get(URL, params={"search": "roosevelt", "page_size": 1})).json()

    assert page["total"] == 2
    assert page["total_pages"] == 2
    assert len(page["applications"]) == 1


async def test_status_change_is_recorded(client: AsyncClient, tenant):
    application = await _submit(client)

    response = await client.post(
        f"{URL}/{application['id']}/status",
        json={"status": "under_review", "assigned_licensee_id": tenant.id},
    )

    body = response.json()
    assert body["status"] == "under_review"
    assert body["assigned_licensee_id"] == tenant.id
    change = next(e for e in body["progress_events"] if e["type"] == "status_change")
    assert change["from_status"] == "applied"
    assert change["to_status"] == "under_review"
    assert change["details"] == "Status changed from applied to under_review"
    assert change["changed_by_user_id"] == "user-1"


async def test_add_note(client: AsyncClient):
    application = await _submit(client)

    response = await client.post(f"{URL}/{application['id']}/notes", json={"note": "Great references"})

    assert response.status_code == 201
    assert response.json()["type"] == "note_added"
    detail = (await client.get(f"{URL}/{application['id']}")).json()
    assert len(detail["progress_events"]) == 2


async def test_unknown_application(client: AsyncClient):
    response = await client.post(f"{URL}/missing/notes", json={"note": "x"})

    assert response.status_code == 404
    assert response.json()["error"] == "Application not found"


async def test_status_counts(client: AsyncClient):
    first = await _submit(client)
    await _submit(client, email="second@example.com")
    await client.post(f"{URL}/{first['id']}/status", json={"status": "rejected"})

    counts = (await client.get(f"{URL}/counts")).json()

    assert counts["applied"] == 1
    assert counts["rejected"] == 1
    assert counts["total"] == 2
