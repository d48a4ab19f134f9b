import pytest
from httpx import AsyncClient

from empowered_camps.server.api.v1 import cron
from test.settings import test_settings

pytestmark = pytest.mark.asyncio

URL = "/api/v1/cron/royalties"


def _auth_header(secret=test_settings.cron_secret):
    return {"Authorization": f"Bearer {secret}"}


async def test_missing_header_is_unauthorized(client: AsyncClient):
    response = await client.get(URL)

    assert response.status_code == 401


async def test_wrong_secret_is_unauthorized(client: AsyncClient):
    response = await client.post(URL, headers=_auth_header("nope"))

    assert response.status_code == 401


async def test_unset_secret_refuses_every_call(client: AsyncClient, monkeypatch):
    monkeypatch.setattr(cron.settings, "cron_secret", None)

    response = await client.get(URL, headers=_auth_header())

    assert response.status_code == 401


@pytest.mark.parametrize("method", ["GET", "POST"])
async def test_runs_royalty_job(client: AsyncClient, finished_camp, method):
    response = await client.request(method, URL, headers=_auth_header())

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["results"]["invoices_generated"] == 1
    assert body["results"]["invoices_marked_overdue"] == 0
    assert "timestamp" in body
