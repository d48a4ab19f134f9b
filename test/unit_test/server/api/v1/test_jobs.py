import pytest
from httpx import AsyncClient

from empowered_camps.core.models.domain.enums import UserRole
from empowered_camps.server.services.jobs import slugify, unique_slug

URL = "/api/v1/jobs"
ADMIN_URL = "/api/v1/admin/jobs"

POSTING = {
    "title": "Camp Director - Chicago!",
    "short_description": "Lead a summer camp",
    "full_description": "Run daily operations.",
    "location_label": "Chicago, IL",
    "employment_type": "seasonal",
}


@pytest.mark.parametrize(
    "title,slug",
    [("Camp Director - Chicago!", "camp-director-chicago"), ("  Coach  ", "coach"), ("!!!", "job")],
)
def test_slugify(title, slug):
    assert slugify(title) == slug


def test_unique_slug_appends_first_free_suffix():
    assert unique_slug("coach", []) == "coach"
    assert unique_slug("coach", ["coach", "coach-2"]) == "coach-3"


async def _create(client, **overrides):
    response = await client.post(ADMIN_URL, json={**POSTING, **overrides})
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_duplicate_titles_get_suffixed_slugs(client: AsyncClient):
    first = await _create(client)
    second = await _create(client)

    assert first["slug"] == "camp-director-chicago"
    assert second["slug"] == "camp-director-chicago-2"


@pytest.mark.asyncio
async def test_compensation_range_is_checked(client: AsyncClient):
    response = await client.post(ADMIN_URL, json={**POSTING, "min_comp_cents": 5000, "max_comp_cents": 1000})

    assert response.status_code == 400
    assert response.json()["error"] == "min_comp_cents cannot exceed max_comp_cents"


@pytest.mark.asyncio
async def test_public_board_shows_open_postings_only(client: AsyncClient, auth):
    await _create(client, title="Draft Role")
    low = await _create(client, title="Coach", status="open", priority=1)
    high = await _create(client, title="Director", status="open", priority=5)
    assert high["published_at"] is not None
    auth.logout()

    listed = (await client.get(URL)).json()

    assert [job["slug"] for job in listed] == [high["slug"], low["slug"]]
    assert (await client.get(f"{URL}/coach")).json()["id"] == low["id"]
    assert (await client.get(f"{URL}/draft-role")).status_code == 404


@pytest.mark.asyncio
async def test_publishing_sets_published_at(client: AsyncClient):
    job = await _create(client)
    assert job["published_at"] is None

    updated = (await client.patch(f"{ADMIN_URL}/{job['id']}", json={"status": "open", "title": "Head Coach"})).json()

    assert updated["published_at"] is not None
    assert updated["slug"] == "head-coach"


@pytest.mark.asyncio
async def test_delete_archives(client: AsyncClient):
    job = await _create(client, status="open")

    archived = (await client.delete(f"{ADMIN_URL}/{job['id']}")).json()

    assert archived["status"] == "archived"
    assert (await client.get(f"{ADMIN_URL}/{job['id']}")).json()["status"] == "archived"
    counts = (await client.get(f"{ADMIN_URL}/counts")).json()
    assert counts["archived"] == 1
    assert counts["total"] == 1


@pytest.mark.asyncio
async def test_admin_routes_are_hq_only(client: AsyncClient, auth, tenant):
    auth.login(role=UserRole.licensee_owner, tenant_id=tenant.id)

    assert (await client.get(ADMIN_URL)).status_code == 403


@pytest.mark.asyncio
async def test_unknown_posting(client: AsyncClient):
    response = await client.get(f"{ADMIN_URL}/missing")

    assert response.status_code == 404
    assert response.json()["error"] == "Job posting not found"


@pytest.mark.asyncio
async def test_explicit_null_keeps_required_fields(client: AsyncClient):
    job = await _create(client)

    response = await client.patch(
        f"{ADMIN_URL}/{job['id']}", json={"title": None, "status": None, "location_label": None, "comp_frequency": None}
    )

    assert response.status_code == 200
    updated = response.json()
    assert updated["title"] == job["title"]
    assert updated["slug"] == job["slug"]
    assert updated["status"] == job["status"]
    assert updated["location_label"] == "Chicago, IL"
    assert updated["comp_frequency"] is None
