from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient

from empowered_camps.core.models.domain.enums import UserRole

pytestmark = pytest.mark.asyncio

URL = "/api/v1/admin/royalties"


async def _generate(client, camp_id):
    response = await client.post(URL, json={"action": "generate", "camp_id": camp_id})
    assert response.status_code == 200
    return response.json()["data"]


async def test_requires_authentication(client: AsyncClient, auth):
    auth.logout()

    response = await client.get(URL)

    assert response.status_code == 401
    assert response.json()["error"] == "Unauthorized"


async def test_licensee_owner_is_forbidden(client: AsyncClient, auth, tenant):
    auth.login(role=UserRole.licensee_owner, tenant_id=tenant.id)

    response = await client.get(URL, params={"action": "summary"})

    assert response.status_code == 403
    assert response.json()["error"] == "Forbidden"


async def test_generate_requires_camp_id(client: AsyncClient):
    response = await client.post(URL, json={"action": "generate"})

    assert response.status_code == 400
    assert response.json()["error"] == "camp_id is required"


async def test_generate_and_list(client: AsyncClient, finished_camp):
    invoice = await _generate(client, finished_camp.id)

    assert invoice["royalty_due_cents"] == 3400
    assert invoice["camp_name"] == "Summer Multi-Sport Week"
    assert len(invoice["line_items"]) == 2

    response = await client.get(URL, params={"search": "chicago"})
    body = response.json()
    assert body["total_count"] == 1
    assert body["items"][0]["id"] == invoice["id"]
    assert body["items"][0]["tenant_name"] == "Empowered Chicago"


async def test_detail_requires_invoice_id(client: AsyncClient):
    response = await client.get(URL, params={"action": "detail"})

    assert response.status_code == 400
    assert response.json()["error"] == "invoice_id is required"


async def test_detail_unknown_invoice(client: AsyncClient):
    response = await client.get(URL, params={"action": "detail", "invoice_id": "nope"})

    assert response.status_code == 404
    assert response.json()["error"] == "Invoice not found"


async def test_update_status_to_paid(client: AsyncClient, finished_camp):
    invoice = await _generate(client, finished_camp.id)

    response = await client.post(
        URL,
        json={"action": "update-status", "invoice_id": invoice["id"], "status": "paid", "payment_reference": "ACH-1"},
    )

    data = response.json()["data"]
    assert data["status"] == "paid"
    assert data["paid_amount_cents"] == 3400
    assert data["payment_reference"] == "ACH-1"

    summary = (await client.get(URL, params={"action": "summary"})).json()["summary"]
    assert summary["status_counts"]["paid"] == 1


async def test_update_status_requires_fields(client: AsyncClient):
    response = await client.post(URL, json={"action": "update-status", "invoice_id": "x"})

    assert response.status_code == 400
    assert response.json()["error"] == "invoice_id and status are required"


async def test_invalid_transition_is_rejected(client: AsyncClient, finished_camp):
    invoice = await _generate(client, finished_camp.id)
    await client.post(URL, json={"action": "update-status", "invoice_id": invoice["id"], "status": "waived"})

    response = await client.post(URL, json={"action": "update-status", "invoice_id": invoice["id"], "status": "paid"})

    assert response.status_code == 400


async def test_bulk_generate_reports_failures(client: AsyncClient, finished_camp):
    response = await client.post(URL, json={"action": "bulk-generate", "camp_ids": [finished_camp.id, "missing"]})

    data = response.json()["data"]
    assert data["success"] == 1
    assert data["failed"] == 1
    assert data["errors"] == ["missing: Camp not found"]


async def test_bulk_generate_requires_ids(client: AsyncClient):
    response = await client.post(URL, json={"action": "bulk-generate"})

    assert response.json()["error"] == "camp_ids array is required"


async def test_mark_overdue_action(client: AsyncClient):
    response = await client.post(URL, json={"action": "mark-overdue"})

    assert response.json() == {"data": {"count": 0}}


async def test_camps_without_invoices_action(client: AsyncClient, finished_camp):
    response = await client.get(URL, params={"action": "camps-without-invoices"})

    assert [c["id"] for c in response.json()["camps"]] == [finished_camp.id]


async def test_licensees_action(client: AsyncClient, finished_camp):
    await _generate(client, finished_camp.id)

    licensees = (await client.get(URL, params={"action": "licensees"})).json()["licensees"]

    assert licensees[0]["name"] == "Empowered Chicago"
    assert licensees[0]["invoices"] == 1
    assert licensees[0]["outstanding_cents"] == 3400


async def test_list_filters_due_dates_with_offsets(client: AsyncClient, finished_camp):
    invoice = await _generate(client, finished_camp.id)
    now = datetime.now(timezone.utc)

    def iso(moment):
        return moment.strftime("%Y-%m-%dT%H:%M:%S.000Z")

    upcoming = await client.get(URL, params={"from": iso(now), "to": iso(now + timedelta(days=45))})
    past = await client.get(URL, params={"from": iso(now - timedelta(days=45)), "to": iso(now)})

    assert [item["id"] for item in upcoming.json()["items"]] == [invoice["id"]]
    assert past.json()["total_count"] == 0


async def test_adjust_action(client: AsyncClient, finished_camp):
    invoice = await _generate(client, finished_camp.id)

    response = await client.post(
        URL, json={"action": "adjust", "invoice_id": invoice["id"], "adjustment_cents": 250, "notes": "Late fee"}
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["adjustment_cents"] == 250
    assert data["total_due_cents"] == 3650
    assert "Adjustment: +$2.50 - Late fee" in data["adjustment_notes"]


async def test_adjust_requires_fields(client: AsyncClient):
    response = await client.post(URL, json={"action": "adjust", "invoice_id": "x", "adjustment_cents": 100})

    assert response.status_code == 400
    assert response.json()["error"] == "invoice_id, adjustment_cents and notes are required"


async def test_adjusting_waived_invoice_is_rejected(client: AsyncClient, finished_camp):
    invoice = await _generate(client, finished_camp.id)
    await client.post(URL, json={"action": "update-status", "invoice_id": invoice["id"], "status": "waived"})

    response = await client.post(
        URL, json={"action": "adjust", "invoice_id": invoice["id"], "adjustment_cents": 100, "notes": "Fee"}
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Cannot adjust a paid or waived invoice"
