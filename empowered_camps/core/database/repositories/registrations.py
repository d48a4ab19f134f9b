"""
Registration repository.

Besides CRUD this repository answers the money questions asked by checkout,
the Stripe webhook, reconciliation and royalty generation: which
registrations belong to a payment, and what their add-on rows actually sum to.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from empowered_camps.core.models.domain.enums import RegistrationStatus

from ..entities.registrations import Registration, RegistrationAddon
from .base import SQLModelRepository


class RegistrationRepository(SQLModelRepository[Registration]):
    """Repository for registrations and their purchased add-ons."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Registration)

    async def get_for_camp(self, registration_ids: Sequence[str], camp_id: Optional[str] = None) -> List[Registration]:
        if not registration_ids:
            return []
        stmt = select(Registration).where(col(Registration.id).in_(list(registration_ids)))
        if camp_id:
            stmt = stmt.where(Registration.camp_id == camp_id)
        result = await self.session.execute(stmt.order_by(Registration.created_at))
        return list(result.scalars().all())

    async def by_payment_intent(self, payment_intent_id: str) -> List[Registration]:
        stmt = select(Registration).where(Registration.stripe_payment_intent_id == payment_intent_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def by_checkout_session(self, session_id: str) -> List[Registration]:
        stmt = select(Registration).where(Registration.stripe_checkout_session_id == session_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def confirmed_for_camp(self, camp_id: str) -> List[Registration]:
        stmt = (
            select(Registration)
            .where(Registration.camp_id == camp_id, Registration.status == RegistrationStatus.confirmed)
            .order_by(Registration.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def confirmed_between(
        self, start: datetime, end: datetime, tenant_id: Optional[str] = None
    ) -> List[Registration]:
        """Confirmed registrations created within ``[start, end]``."""
        stmt = select(Registration).where(
            Registration.status == RegistrationStatus.confirmed,
            Registration.created_at >= start,
            Registration.created_at <= end,
        )
        if tenant_id:
            stmt = stmt.where(Registration.tenant_id == tenant_id)
        result = await self.session.execute(stmt.order_by(Registration.created_at))
        return list(result.scalars().all())

    async def add_addon(self, addon: RegistrationAddon) -> RegistrationAddon:
        self.session.add(addon)
        await self.session.flush()
        return addon

    async def addons_for(self, registration_ids: Sequence[str]) -> Dict[str, List[RegistrationAddon]]:
        """Add-on rows grouped by registration id."""
        grouped: Dict[str, List[RegistrationAddon]] = defaultdict(list)
        if not registration_ids:
            return grouped
        stmt = (
            select(RegistrationAddon)
            .where(col(RegistrationAddon.registration_id).in_(list(registration_ids)))
            .order_by(RegistrationAddon.created_at)
        )
        result = await self.session.execute(stmt)
        for row in result.scalars().all():
            grouped[row.registration_id].append(row)
        return grouped

    async def actual_addon_totals(self, registration_ids: Sequence[str]) -> Dict[str, int]:
        """Sum of add-on row totals per registration; registrations without rows map to 0."""
        totals = {registration_id: 0 for registration_id in registration_ids}
        if not registration_ids:
            return totals
        stmt = (
            select(RegistrationAddon.registration_id, func.coalesce(func.sum(RegistrationAddon.price_cents), 0))
            .where(col(RegistrationAddon.registration_id).in_(list(registration_ids)))
            .group_by(RegistrationAddon.registration_id)
        )
        result = await self.session.execute(stmt)
        for registration_id, total in result.all():
            totals[registration_id] = int(total)
        return totals

    async def usage_counts(self, promo_code_ids: Sequence[str]) -> Dict[str, int]:
        """Number of registrations that used each promo code."""
        if not promo_code_ids:
            return {}
        stmt = (
            select(Registration.promo_code_id, func.count())
            .where(col(Registration.promo_code_id).in_(list(promo_code_ids)))
            .group_by(Registration.promo_code_id)
        )
        result = await self.session.execute(stmt)
        return {promo_code_id: int(total) for promo_code_id, total in result.all()}

    async def waitlisted_for_camp(self, camp_id: str) -> List[Registration]:
        """Waitlisted registrations of a camp in line order."""
        stmt = (
            select(Registration)
            .where(Registration.camp_id == camp_id, Registration.status == RegistrationStatus.waitlisted)
            .order_by(col(Registration.waitlist_position).asc(), Registration.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def listed_for_athlete(self, camp_id: str, athlete_id: str) -> Optional[Registration]:
        """A registration of the athlete at the camp that is pending, confirmed or waitlisted."""
        stmt = select(Registration).where(
            Registration.camp_id == camp_id,
            Registration.athlete_id == athlete_id,
            col(Registration.status).in_(
                [RegistrationStatus.pending, RegistrationStatus.confirmed, RegistrationStatus.waitlisted]
            ),
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def waitlisted_for_parent(self, camp_id: str, parent_id: str) -> Optional[Registration]:
        stmt = (
            select(Registration)
            .where(
                Registration.camp_id == camp_id,
                Registration.parent_id == parent_id,
                Registration.status == RegistrationStatus.waitlisted,
            )
            .order_by(col(Registration.waitlist_position).asc())
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def by_offer_token(self, token: str) -> Optional[Registration]:
        stmt = select(Registration).where(Registration.waitlist_offer_token == token)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def count_open_offers(self, camp_id: str, now: datetime) -> int:
        """Waitlist offers of a camp that were sent and have not expired; each holds a spot."""
        stmt = (
            select(func.count())
            .select_from(Registration)
            .where(
                Registration.camp_id == camp_id,
                Registration.status == RegistrationStatus.waitlisted,
                col(Registration.waitlist_offer_sent_at).is_not(None),
                Registration.waitlist_offer_expires_at > now,
            )
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def expired_offers(self, now: datetime) -> List[Registration]:
        stmt = (
            select(Registration)
            .where(
                Registration.status == RegistrationStatus.waitlisted,
                col(Registration.waitlist_offer_sent_at).is_not(None),
                Registration.waitlist_offer_expires_at <= now,
            )
            .order_by(Registration.waitlist_offer_expires_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
