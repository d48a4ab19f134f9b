"""
Licensee Service.

HQ management of franchise territories (tenants).
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from empowered_camps.core.database.base import apply_changes
from empowered_camps.core.database.entities.tenants import Tenant
from empowered_camps.core.database.repositories import TenantRepository
from empowered_camps.core.errors import BadRequestError, NotFoundError
from empowered_camps.core.logging_config import get_logger
from empowered_camps.core.models.domain.enums import LicenseStatus
from empowered_camps.core.models.io.licensees import LicenseeCreate, LicenseeUpdate

logger = get_logger(__name__)


class LicenseeService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.tenants = TenantRepository(session)

    async def list(self, status: Optional[LicenseStatus] = None, search: Optional[str] = None) -> List[Tenant]:
        return await self.tenants.search(status, search)

    async def get(self, tenant_id: str) -> Tenant:
        tenant = await self.tenants.get_by_id(tenant_id)
        if tenant is None:
            raise NotFoundError("Licensee not found")
        return tenant

    async def create(self, payload: LicenseeCreate) -> Tenant:
        if await self.tenants.get_by_slug(payload.slug) is not None:
            raise BadRequestError("A licensee with this slug already exists")
        tenant = await self.tenants.create(Tenant(**payload.model_dump()))
        logger.info(f"Created licensee {tenant.slug}")
        return tenant

    async def update(self, tenant_id: str, payload: LicenseeUpdate) -> Tenant:
        tenant = await self.get(tenant_id)
        apply_changes(tenant, payload.model_dump(exclude_unset=True))
        return await self.tenants.update(tenant)

    async def set_status(self, tenant_id: str, status: LicenseStatus) -> Tenant:
        tenant = await self.get(tenant_id)
        tenant.license_status = status
        tenant = await self.tenants.update(tenant)
        logger.info(f"Licensee {tenant.slug} is now {status.value}")
        return tenant

    async def deactivate(self, tenant_id: str) -> Tenant:
        return await self.set_status(tenant_id, LicenseStatus.suspended)

    async def activate(self, tenant_id: str) -> Tenant:
        return await self.set_status(tenant_id, LicenseStatus.active)
