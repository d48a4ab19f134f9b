import pytest
from httpx import AsyncClient

from empowered_camps.core.models.domain.enums import UserRole

pytestmark = pytest.mark.asyncio

URL = "/api/v1/certifications"

DOCUMENT = {"document_url": "https://files.example.com/bg.pdf", "document_type": "background_check"}


@pytest.fixture
def volunteer(auth, tenant):
    return auth.login(role=UserRole.cit_volunteer, tenant_id=tenant.id, user_id="volunteer-1")


async def _submit(client):
    response = await client.post(URL, json=DOCUMENT)
    assert response.status_code == 201
    return response.json()


async def test_submit_starts_pending(client: AsyncClient, volunteer, tenant):
    certification = await _submit(client)

    assert certification["status"] == "pending_review"
    assert certification["profile_id"] == "volunteer-1"
    assert certification["tenant_id"] == tenant.id


async def test_requires_authentication(client: AsyncClient, auth):
    auth.logout()

    assert (await client.post(URL, json=DOCUMENT)).status_code == 401


async def test_list_own_only(client: AsyncClient, auth, volunteer, tenant):
    await _submit(client)
    auth.login(role=UserRole.cit_volunteer, tenant_id=tenant.id, user_id="volunteer-2")

    assert (await client.get(URL)).json() == []


async def test_delete_pending(client: AsyncClient, volunteer):
    certification = await _submit(client)

    response = await client.delete(f"{URL}/{certification['id']}")

    assert response.status_code == 204
    assert (await client.get(URL)).json() == []


async def test_review_then_delete_is_rejected(client: AsyncClient, auth, volunteer, tenant):
    certification = await _submit(client)
    auth.login(role=UserRole.director, tenant_id=tenant.id, user_id="director-1")

    reviewed = await client.post(
        f"{URL}/{certification['id']}/review", json={"status": "approved", "reviewer_notes": "Looks good"}
    )

    body = reviewed.json()
    assert body["status"] == "approved"
    assert body["reviewed_by_profile_id"] == "director-1"
    assert body["reviewed_at"] is not None

    auth.login(role=UserRole.cit_volunteer, tenant_id=tenant.id, user_id="volunteer-1")
    response = await client.delete(f"{URL}/{certification['id']}")
    assert response.status_code == 400
    assert response.json()["error"] == "Only pending certifications can be deleted"


async def test_review_requires_final_status(client: AsyncClient, auth, volunteer):
    certification = await _submit(client)
    auth.login()

    response = await client.post(f"{URL}/{certification['id']}/review", json={"status": "expired"})

    assert response.status_code == 400


async def test_review_queue_is_tenant_scoped(client: AsyncClient, auth, volunteer):
    await _submit(client)
    auth.login(role=UserRole.director, tenant_id="someone-else")

    assert (await client.get(f"{URL}/review")).json() == []

    auth.login()
    queue = (await client.get(f"{URL}/review", params={"status": "pending_review"})).json()
    assert len(queue) == 1
