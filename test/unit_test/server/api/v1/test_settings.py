import pytest
from httpx import AsyncClient

from empowered_camps.core.models.domain.enums import UserRole

pytestmark = pytest.mark.asyncio

URL = "/api/v1/admin/settings"


async def test_global_scope_starts_empty(client: AsyncClient):
    response = await client.get(URL)

    assert response.status_code == 200
    assert response.json() == {"scope": "global", "settings": []}


async def test_effective_scope_returns_defaults(client: AsyncClient):
    settings = (await client.get(URL, params={"scope": "effective"})).json()["settings"]

    assert settings["platform_name"] == "Empowered Sports Camp"
    assert settings["max_athletes_per_registration"] == 5


async def test_tenant_scope_requires_tenant_id(client: AsyncClient):
    response = await client.get(URL, params={"scope": "tenant"})

    assert response.status_code == 400
    assert response.json()["error"] == "tenant_id is required for tenant scope"


async def test_tenant_scope_unknown_tenant(client: AsyncClient):
    response = await client.get(URL, params={"scope": "tenant", "tenant_id": "missing"})

    assert response.status_code == 404


async def test_schema_and_categories_included_on_request(client: AsyncClient):
    body = (await client.get(URL, params={"include_schema": True, "include_categories": True})).json()

    assert body["schema"]["waitlist_enabled"]["tenant_overridable"] is True
    assert "rule" not in body["schema"]["waitlist_enabled"]
    assert body["categories"]["payments"] == "Payments"


async def test_global_update_skips_invalid_and_unknown(client: AsyncClient):
    response = await client.put(
        URL,
        json={
            "updates": [
                {"key": "platform_name", "value": "Empowered HQ"},
                {"key": "max_athletes_per_registration", "value": "5"},
                {"key": "no_such_key", "value": 1},
            ]
        },
    )

    assert response.json() == {"updated": 1, "skipped": ["max_athletes_per_registration", "no_such_key"]}
    settings = (await client.get(URL, params={"scope": "effective"})).json()["settings"]
    assert settings["platform_name"] == "Empowered HQ"


async def test_tenant_override_wins_for_overridable_keys(client: AsyncClient, tenant):
    await client.put(URL, json={"updates": [{"key": "refund_window_days", "value": 14}]})
    response = await client.put(
        URL,
        json={
            "tenant_id": tenant.id,
            "updates": [
                {"key": "refund_window_days", "value": 3},
                {"key": "payments_enabled", "value": False},
            ],
        },
    )

    assert response.json() == {"updated": 1, "skipped": ["payments_enabled"]}
    effective = (await client.get(URL, params={"scope": "effective", "tenant_id": tenant.id})).json()["settings"]
    assert effective["refund_window_days"] == 3
    assert effective["payments_enabled"] is True
    global_only = (await client.get(URL, params={"scope": "effective"})).json()["settings"]
    assert global_only["refund_window_days"] == 14


async def test_updates_are_audited(client: AsyncClient):
    await client.put(URL, json={"updates": [{"key": "waitlist_enabled", "value": False}]})
    await client.put(URL, json={"updates": [{"key": "waitlist_enabled", "value": True}], "source": "API"})

    audit = (await client.get(URL, params={"include_audit": True})).json()["audit_log"]

    assert len(audit) == 2
    assert {(entry["old_value"], entry["new_value"]) for entry in audit} == {(None, False), (False, True)}
    assert {entry["source"] for entry in audit} == {"ADMIN_UI", "API"}


async def test_reset_tenant_override(client: AsyncClient, tenant):
    await client.put(URL, json={"tenant_id": tenant.id, "updates": [{"key": "waitlist_enabled", "value": False}]})

    response = await client.delete(f"{URL}/tenant/{tenant.id}/waitlist_enabled")

    assert response.json() == {"reset": True}
    tenant_rows = (await client.get(URL, params={"scope": "tenant", "tenant_id": tenant.id})).json()["settings"]
    assert tenant_rows == []
    again = await client.delete(f"{URL}/tenant/{tenant.id}/waitlist_enabled")
    assert again.json() == {"reset": False}


async def test_hq_only(client: AsyncClient, auth, tenant):
    auth.login(role=UserRole.licensee_owner, tenant_id=tenant.id)

    assert (await client.get(URL)).status_code == 403
