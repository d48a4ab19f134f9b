"""Unit tests for the generic SQLModel repository.

The CRUD helpers are exercised through TenantRepository against an
in-memory SQLite database.
"""

from __future__ import annotations

import pytest

from empowered_camps.core.database.entities import Tenant
from empowered_camps.core.database.repositories.tenants import TenantRepository
from empowered_camps.core.models.domain.enums import LicenseStatus


class TestSQLModelRepository:
    """CRUD operations shared by every table repository."""

    @pytest.fixture
    def repository(self, in_memory_session):
        return TenantRepository(in_memory_session)

    @pytest.mark.asyncio
    async def test_create_and_get(self, repository):
        created = await repository.create(Tenant(name="Empowered Austin", slug="austin"))

        fetched = await repository.get_by_id(created.id)

        assert fetched is not None
        assert fetched.slug == "austin"
        assert fetched.license_status == LicenseStatus.active

    @pytest.mark.asyncio
    async def test_get_many_skips_missing(self, repository):
        first = await repository.create(Tenant(name="A", slug="a"))
        second = await repository.create(Tenant(name="B", slug="b"))

        found = await repository.get_many([first.id, second.id, "missing"])

        assert {tenant.id for tenant in found} == {first.id, second.id}
        assert await repository.get_many([]) == []

    @pytest.mark.asyncio
    async def test_update_touches_updated_at(self, repository):
        tenant = await repository.create(Tenant(name="Old", slug="old"))
        before = tenant.updated_at

        tenant.name = "New"
        updated = await repository.update(tenant)

        assert updated.name == "New"
        assert updated.updated_at >= before

    @pytest.mark.asyncio
    async def test_delete(self, repository):
        tenant = await repository.create(Tenant(name="Gone", slug="gone"))

        assert await repository.delete(tenant.id) is True
        assert await repository.get_by_id(tenant.id) is None
        assert await repository.delete(tenant.id) is False

    @pytest.mark.asyncio
    async def test_list_filters_and_pagination(self, repository):
        for index in range(3):
            await repository.create(Tenant(name=f"T{index}", slug=f"t{index}"))
        await repository.create(Tenant(name="S", slug="s", license_status=LicenseStatus.suspended))

        assert len(await repository.list(filters={"license_status": LicenseStatus.active})) == 3
        assert len(await repository.list(limit=2)) == 2
        assert len(await repository.list(limit=10, offset=3)) == 1
        # None values and unknown columns are ignored
        assert len(await repository.list(filters={"license_status": None, "nope": 1})) == 4

    @pytest.mark.asyncio
    async def test_count_and_count_by(self, repository):
        await repository.create(Tenant(name="A", slug="a"))
        await repository.create(Tenant(name="B", slug="b", license_status=LicenseStatus.terminated))

        assert await repository.count() == 2
        assert await repository.count({"license_status": [LicenseStatus.terminated]}) == 1
        counts = await repository.count_by("license_status")
        assert counts[LicenseStatus.active] == 1
        assert counts[LicenseStatus.terminated] == 1


class TestTenantRepository:
    @pytest.mark.asyncio
    async def test_search_matches_territory_and_city(self, in_memory_session, sample_tenant):
        repository = TenantRepository(in_memory_session)

        assert [t.id for t in await repository.search(search="METRO")] == [sample_tenant.id]
        assert [t.id for t in await repository.search(search="denver")] == [sample_tenant.id]
        assert await repository.search(search="boston") == []
        assert await repository.search(status=LicenseStatus.suspended) == []

    @pytest.mark.asyncio
    async def test_get_by_slug(self, in_memory_session, sample_tenant):
        repository = TenantRepository(in_memory_session)

        assert (await repository.get_by_slug("denver-metro")).id == sample_tenant.id
        assert await repository.get_by_slug("nowhere") is None
