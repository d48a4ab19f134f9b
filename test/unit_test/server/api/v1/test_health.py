import pytest
from httpx import AsyncClient

from empowered_camps.server.core import constant

pytestmark = pytest.mark.asyncio


async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_version(client: AsyncClient):
    response = await client.get("/version")

    assert response.json() == {"version": constant.API_VERSION, "schema_version": constant.SCHEMA_VERSION}


async def test_unknown_route_uses_error_body(client: AsyncClient):
    response = await client.get("/api/v1/nope")

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}
