"""
Tenant and profile repositories.

Data access for licensee accounts, user profiles and the athletes that
parents register.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from empowered_camps.core.models.domain.enums import LicenseStatus

from ..entities.profiles import Athlete, Profile
from ..entities.tenants import Tenant
from .base import QueryBuilder, SQLModelRepository


class TenantRepository(SQLModelRepository[Tenant]):
    """Repository for licensee accounts."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Tenant)

    async def get_by_slug(self, slug: str) -> Optional[Tenant]:
        result = await self.session.execute(select(Tenant).where(Tenant.slug == slug))
        return result.scalar_one_or_none()

    async def search(self, status: Optional[LicenseStatus] = None, search: Optional[str] = None) -> List[Tenant]:
        """Tenants by name, optionally filtered by license status and a name/slug/territory/city search."""
        stmt = select(Tenant)
        stmt = QueryBuilder.apply_filters(stmt, Tenant, {"license_status": status})
        stmt = QueryBuilder.apply_search(stmt, [Tenant.name, Tenant.slug, Tenant.territory_name, Tenant.city], search)
        result = await self.session.execute(stmt.order_by(Tenant.name))
        return list(result.scalars().all())

    async def count_created_between(self, start: datetime, end: datetime) -> int:
        stmt = (
            select(func.count())
            .select_from(Tenant)
            .where(Tenant.created_at >= start, Tenant.created_at <= end)
        )
        return int((await self.session.execute(stmt)).scalar_one())


class ProfileRepository(SQLModelRepository[Profile]):
    """Repository for user profiles."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Profile)

    async def get_by_email(self, email: str) -> Optional[Profile]:
        """Case-insensitive lookup; emails are stored lowercased."""
        stmt = select(Profile).where(func.lower(Profile.email) == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalars().first()


class AthleteRepository(SQLModelRepository[Athlete]):
    """Repository for athletes."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Athlete)

    async def find_for_parent(self, parent_id: str, first_name: str, last_name: str) -> Optional[Athlete]:
        stmt = select(Athlete).where(
            Athlete.parent_id == parent_id,
            Athlete.first_name == first_name,
            Athlete.last_name == last_name,
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def names_by_id(self, athlete_ids: List[str]) -> dict[str, str]:
        if not athlete_ids:
            return {}
        stmt = select(Athlete).where(col(Athlete.id).in_(athlete_ids))
        result = await self.session.execute(stmt)
        return {athlete.id: athlete.full_name for athlete in result.scalars().all()}
