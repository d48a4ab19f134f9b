"""
Camp and add-on repositories.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from empowered_camps.core.models.domain.enums import CampStatus, RegistrationStatus

from ..entities.camps import Addon, AddonVariant, Camp
from ..entities.registrations import Registration
from ..entities.royalties import RoyaltyInvoice
from .base import QueryBuilder, SQLModelRepository

PUBLIC_CAMP_STATUSES = (CampStatus.published, CampStatus.registration_open)
SPOT_HOLDING_STATUSES = (RegistrationStatus.pending, RegistrationStatus.confirmed)


class CampRepository(SQLModelRepository[Camp]):
    """Repository for camp sessions."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Camp)

    async def search(
        self,
        tenant_id: Optional[str] = None,
        status: Optional[CampStatus] = None,
        search: Optional[str] = None,
    ) -> List[Camp]:
        stmt = select(Camp)
        stmt = QueryBuilder.apply_filters(stmt, Camp, {"tenant_id": tenant_id, "status": status})
        stmt = QueryBuilder.apply_search(stmt, [Camp.name, Camp.location_name], search)
        result = await self.session.execute(stmt.order_by(col(Camp.start_date).desc()))
        return list(result.scalars().all())

    async def list_public(self, tenant_id: Optional[str] = None, today: Optional[date] = None) -> List[Camp]:
        """Camps visible to parents: published or open for registration and not yet ended."""
        stmt = select(Camp).where(col(Camp.status).in_(PUBLIC_CAMP_STATUSES))
        if today is not None:
            stmt = stmt.where(Camp.end_date >= today)
        stmt = QueryBuilder.apply_filters(stmt, Camp, {"tenant_id": tenant_id})
        result = await self.session.execute(stmt.order_by(Camp.start_date))
        return list(result.scalars().all())

    async def count_active_registrations(self, camp_id: str) -> int:
        """Registrations that hold a spot (pending or confirmed)."""
        stmt = (
            select(func.count())
            .select_from(Registration)
            .where(Registration.camp_id == camp_id, col(Registration.status).in_(SPOT_HOLDING_STATUSES))
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def completed_without_invoice(self) -> List[Camp]:
        invoiced = select(RoyaltyInvoice.camp_id).where(col(RoyaltyInvoice.camp_id).is_not(None))
        stmt = (
            select(Camp)
            .where(
                Camp.status == CampStatus.completed,
                col(Camp.tenant_id).is_not(None),
                col(Camp.id).not_in(invoiced),
            )
            .order_by(col(Camp.end_date).desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def held_between(self, start: date, end: date, tenant_id: Optional[str] = None) -> List[Camp]:
        """Completed or running camps whose dates overlap ``[start, end]``."""
        stmt = select(Camp).where(
            col(Camp.status).in_((CampStatus.completed, CampStatus.in_progress)),
            Camp.start_date <= end,
            Camp.end_date >= start,
        )
        stmt = QueryBuilder.apply_filters(stmt, Camp, {"tenant_id": tenant_id})
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def not_ended(self, today: date, tenant_id: Optional[str] = None) -> List[Camp]:
        stmt = select(Camp).where(Camp.end_date >= today)
        stmt = QueryBuilder.apply_filters(stmt, Camp, {"tenant_id": tenant_id})
        result = await self.session.execute(stmt.order_by(Camp.start_date))
        return list(result.scalars().all())

    async def names_by_id(self, camp_ids: Sequence[str]) -> Dict[str, str]:
        ids = [camp_id for camp_id in camp_ids if camp_id]
        if not ids:
            return {}
        result = await self.session.execute(select(Camp.id, Camp.name).where(col(Camp.id).in_(ids)))
        return {camp_id: name for camp_id, name in result.all()}


class AddonRepository(SQLModelRepository[Addon]):
    """Repository for the add-on catalogue and its variants."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Addon)

    async def variants_by_id(self, variant_ids: Sequence[str]) -> Dict[str, AddonVariant]:
        ids = [variant_id for variant_id in variant_ids if variant_id]
        if not ids:
            return {}
        result = await self.session.execute(select(AddonVariant).where(col(AddonVariant.id).in_(ids)))
        return {variant.id: variant for variant in result.scalars().all()}

    async def add_variant(self, variant: AddonVariant) -> AddonVariant:
        self.session.add(variant)
        await self.session.commit()
        await self.session.refresh(variant)
        return variant
