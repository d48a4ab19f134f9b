"""
Camp Service.

Camp sessions are tenant-owned; callers below HQ only see and change
camps of their own tenant.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from empowered_camps.core.database.base import apply_changes
from empowered_camps.core.database.entities.camps import Camp
from empowered_camps.core.database.repositories import CampRepository, TenantRepository
from empowered_camps.core.errors import BadRequestError, NotFoundError
from empowered_camps.core.models.domain.enums import CampStatus
from empowered_camps.core.models.io.licensees import CampCreate, CampUpdate


def _check_dates(camp: Camp) -> None:
    if camp.end_date < camp.start_date:
        raise BadRequestError("end_date cannot be before start_date")
    if camp.min_age is not None and camp.max_age is not None and camp.min_age > camp.max_age:
        raise BadRequestError("min_age cannot be greater than max_age")


class CampService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.camps = CampRepository(session)
        self.tenants = TenantRepository(session)

    async def list(
        self, tenant_id: Optional[str] = None, status: Optional[CampStatus] = None, search: Optional[str] = None
    ) -> List[Camp]:
        return await self.camps.search(tenant_id, status, search)

    async def list_public(self, tenant_id: Optional[str] = None) -> List[Camp]:
        """Camps open to parents that have not ended."""
        return await self.camps.list_public(tenant_id, date.today())

    async def get(self, camp_id: str, tenant_id: Optional[str] = None) -> Camp:
        """Fetch a camp; with ``tenant_id`` a camp of another tenant is reported as missing."""
        camp = await self.camps.get_by_id(camp_id)
        if camp is None or (tenant_id is not None and camp.tenant_id != tenant_id):
            raise NotFoundError("Camp not found")
        return camp

    async def create(self, payload: CampCreate) -> Camp:
        if not payload.tenant_id:
            raise BadRequestError("tenant_id is required")
        if await self.tenants.get_by_id(payload.tenant_id) is None:
            raise NotFoundError("Licensee not found")
        camp = Camp(**payload.model_dump())
        _check_dates(camp)
        return await self.camps.create(camp)

    async def update(self, camp_id: str, payload: CampUpdate, tenant_id: Optional[str] = None) -> Camp:
        camp = await self.get(camp_id, tenant_id)
        apply_changes(camp, payload.model_dump(exclude_unset=True))
        _check_dates(camp)
        return await self.camps.update(camp)
