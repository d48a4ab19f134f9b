from datetime import date, datetime, timedelta, timezone

import pytest
from httpx import AsyncClient

from empowered_camps.core.models.domain.enums import UserRole
from empowered_camps.server.services.analytics import period_label, period_start

URL = "/api/v1/admin/analytics"


@pytest.mark.parametrize(
    "granularity,expected",
    [("day", date(2026, 3, 11)), ("week", date(2026, 3, 8)), ("month", date(2026, 3, 1))],
)
def test_period_start(granularity, expected):
    # 2026-03-11 is a Wednesday
    assert period_start(date(2026, 3, 11), granularity) == expected


def test_period_start_on_sunday_is_same_day():
    assert period_start(date(2026, 3, 8), "week") == date(2026, 3, 8)


def test_period_labels():
    assert period_label(date(2026, 3, 8), "day") == "3/8"
    assert period_label(date(2026, 3, 8), "week") == "Week of Mar 8"
    assert period_label(date(2026, 3, 1), "month") == "Mar 2026"


@pytest.mark.asyncio
async def test_overview_without_invoices(client: AsyncClient, finished_camp):
    body = (await client.get(f"{URL}/overview")).json()

    assert body["total_system_gross_revenue"] == 340.0
    assert body["total_campers"] == 1
    assert body["sessions_held"] == 1
    assert body["average_enrollment_per_session"] == 1.0
    assert body["average_revenue_per_camper"] == 340.0
    assert body["royalty_compliance_rate"] == 100
    assert body["active_licensees"] == 1
    assert body["new_licenses_signed"] == 1


@pytest.mark.asyncio
async def test_overview_counts_paid_royalties(client: AsyncClient, finished_camp):
    generated = await client.post("/api/v1/admin/royalties", json={"action": "generate", "camp_id": finished_camp.id})
    invoice_id = generated.json()["data"]["id"]
    await client.post(
        "/api/v1/admin/royalties", json={"action": "update-status", "invoice_id": invoice_id, "status": "paid"}
    )

    body = (await client.get(f"{URL}/overview")).json()

    assert body["expected_royalty_income"] == 34.0
    assert body["total_royalty_income"] == 34.0
    assert body["royalty_compliance_rate"] == 100

    trends = (await client.get(f"{URL}/revenue-trends")).json()
    assert sum(point["royalty_income"] for point in trends["points"]) == 34.0


@pytest.mark.asyncio
async def test_licensee_breakdown(client: AsyncClient, finished_camp):
    licensees = (await client.get(f"{URL}/licensees")).json()["licensees"]

    assert len(licensees) == 1
    assert licensees[0]["licensee_name"] == "Empowered Chicago"
    assert licensees[0]["revenue"] == 340.0
    assert licensees[0]["sessions_held"] == 1


@pytest.mark.asyncio
async def test_revenue_trends_buckets(client: AsyncClient, finished_camp):
    body = (await client.get(f"{URL}/revenue-trends", params={"granularity": "week"})).json()

    assert body["granularity"] == "week"
    points = body["points"]
    assert all(point["period_label"].startswith("Week of") for point in points)
    assert sum(point["campers"] for point in points) == 1
    assert points[-1]["revenue"] == 340.0


@pytest.mark.asyncio
async def test_invalid_granularity(client: AsyncClient):
    response = await client.get(f"{URL}/revenue-trends", params={"granularity": "year"})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_inverted_range(client: AsyncClient):
    response = await client.get(f"{URL}/overview", params={"from": "2026-02-01T00:00:00", "to": "2026-01-01T00:00:00"})

    assert response.status_code == 400
    assert response.json()["error"] == "'from' must be before 'to'"


@pytest.mark.asyncio
async def test_browser_timestamps_with_offset(client: AsyncClient, finished_camp):
    # toISOString() form sent by the dashboard
    since = (datetime.now(timezone.utc) - timedelta(days=30)).strftime("%Y-%m-%dT%H:%M:%S.000Z")
    until = (datetime.now(timezone.utc) + timedelta(days=1)).strftime("%Y-%m-%dT%H:%M:%S.000Z")

    response = await client.get(f"{URL}/overview", params={"from": since, "to": until})

    assert response.status_code == 200
    assert response.json()["total_system_gross_revenue"] == 340.0


@pytest.mark.asyncio
async def test_mixed_offset_and_naive_bounds(client: AsyncClient, finished_camp):
    response = await client.get(
        f"{URL}/revenue-trends", params={"from": "2026-01-01T00:00:00Z", "to": "2026-01-31T00:00:00"}
    )

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_hq_only(client: AsyncClient, auth, tenant):
    auth.login(role=UserRole.licensee_owner, tenant_id=tenant.id)

    assert (await client.get(f"{URL}/overview")).status_code == 403
