"""
Camp Waitlist Service.

When a camp is full, parents can put athletes on a waitlist instead of
registering. Waitlisted registrations are priced when they join and hold no
spot until an offer is sent. An offer holds a spot for ``OFFER_WINDOW``; the
parent accepts it (and pays through the normal checkout) or declines it.
Expired offers move their registration to the end of the line. Offer
notifications are logged; delivery is left to the email integration.
"""

from __future__ import annotations

import secrets
from datetime import timedelta
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from empowered_camps.core.database.base import as_utc, utc_now
from empowered_camps.core.database.entities.camps import Camp
from empowered_camps.core.database.entities.registrations import Registration
from empowered_camps.core.database.repositories import (
    AthleteRepository,
    CampRepository,
    ProfileRepository,
    RegistrationRepository,
)
from empowered_camps.core.errors import BadRequestError, ForbiddenError, NotFoundError
from empowered_camps.core.logging_config import get_logger
from empowered_camps.core.models.domain.enums import RegistrationStatus
from empowered_camps.core.models.io.waitlist import WaitlistEntry, WaitlistPosition

from .platform_settings import PlatformSettingsService

logger = get_logger(__name__)

OFFER_WINDOW = timedelta(hours=48)


def _clear_offer(registration: Registration) -> None:
    registration.waitlist_offer_token = None
    registration.waitlist_offer_sent_at = None
    registration.waitlist_offer_expires_at = None


def clear_waitlist_fields(registration: Registration) -> None:
    """Drop every waitlist marker, used once the registration holds a real spot."""
    _clear_offer(registration)
    registration.waitlist_position = None


class WaitlistService:
    """Waitlist positions and spot offers for full camps."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.camps = CampRepository(session)
        self.registrations = RegistrationRepository(session)
        self.athletes = AthleteRepository(session)
        self.profiles = ProfileRepository(session)
        self.settings = PlatformSettingsService(session)

    async def spots_taken(self, camp_id: str) -> int:
        """Pending and confirmed registrations plus offers that have not expired."""
        active = await self.camps.count_active_registrations(camp_id)
        return active + await self.registrations.count_open_offers(camp_id, utc_now())

    async def ensure_open(self, camp: Camp) -> None:
        """
        Raise unless athletes may join the waitlist of ``camp``.

        Raises:
            ForbiddenError: ``waitlist_enabled`` is off for the camp's tenant.
            BadRequestError: The camp still has room.
        """
        if not await self.settings.get_value("waitlist_enabled", camp.tenant_id):
            raise ForbiddenError("Waitlist is not enabled for this camp")
        if camp.capacity is None or await self.camps.count_active_registrations(camp.id) < camp.capacity:
            raise BadRequestError("Camp still has spots available, please register normally")

    async def enqueue(self, registration: Registration) -> Registration:
        """Add ``registration`` at the end of its camp's line; the caller commits."""
        existing = await self.registrations.listed_for_athlete(registration.camp_id, registration.athlete_id)
        if existing is not None:
            if existing.status == RegistrationStatus.waitlisted:
                raise BadRequestError("This athlete is already on the waitlist for this camp")
            raise BadRequestError("This athlete is already registered for this camp")

        registration.status = RegistrationStatus.waitlisted
        registration.waitlist_position = await self._next_position(registration.camp_id)
        registration.waitlist_joined_at = utc_now()
        return await self.registrations.create(registration, commit=False)

    async def _next_position(self, camp_id: str) -> int:
        waitlisted = await self.registrations.waitlisted_for_camp(camp_id)
        return max((r.waitlist_position or 0 for r in waitlisted), default=0) + 1

    async def reorder(self, camp_id: str) -> None:
        """Renumber the line of ``camp_id`` to 1..n keeping its order."""
        for index, registration in enumerate(await self.registrations.waitlisted_for_camp(camp_id), start=1):
            if registration.waitlist_position != index:
                registration.waitlist_position = index
                await self.registrations.update(registration, commit=False)

    async def position(self, camp_id: str, parent_id: str) -> WaitlistPosition:
        registration = await self.registrations.waitlisted_for_parent(camp_id, parent_id)
        if registration is None:
            raise NotFoundError("Not on the waitlist for this camp")
        waitlisted = await self.registrations.waitlisted_for_camp(camp_id)
        return WaitlistPosition(
            registration_id=registration.id,
            position=registration.waitlist_position,
            total_waitlisted=len(waitlisted),
        )

    async def _camp_for(self, camp_id: str, tenant_id: Optional[str]) -> Camp:
        camp = await self.camps.get_by_id(camp_id)
        if camp is None or (tenant_id and camp.tenant_id != tenant_id):
            raise NotFoundError("Camp not found")
        return camp

    async def list_for_camp(self, camp_id: str, tenant_id: Optional[str] = None) -> List[WaitlistEntry]:
        await self._camp_for(camp_id, tenant_id)
        waitlisted = await self.registrations.waitlisted_for_camp(camp_id)
        athlete_names = await self.athletes.names_by_id([r.athlete_id for r in waitlisted])
        parents = {p.id: p for p in await self.profiles.get_many([r.parent_id for r in waitlisted])}
        now = utc_now()

        entries = []
        for registration in waitlisted:
            parent = parents.get(registration.parent_id)
            if registration.waitlist_offer_sent_at is None:
                offer_status = "waiting"
            elif as_utc(registration.waitlist_offer_expires_at) > now:
                offer_status = "offer_sent"
            else:
                offer_status = "offer_expired"
            entries.append(
                WaitlistEntry(
                    registration_id=registration.id,
                    position=registration.waitlist_position,
                    athlete_id=registration.athlete_id,
                    athlete_name=athlete_names.get(registration.athlete_id),
                    parent_email=parent.email if parent else None,
                    parent_name=parent.full_name if parent else None,
                    joined_at=registration.waitlist_joined_at,
                    offer_status=offer_status,
                    offer_expires_at=registration.waitlist_offer_expires_at,
                    total_price_cents=registration.total_price_cents,
                )
            )
        return entries

    async def _waitlisted(self, camp_id: str, registration_id: str, tenant_id: Optional[str]) -> Registration:
        await self._camp_for(camp_id, tenant_id)
        registration = await self.registrations.get_by_id(registration_id)
        if (
            registration is None
            or registration.camp_id != camp_id
            or registration.status != RegistrationStatus.waitlisted
        ):
            raise NotFoundError("Registration not found or not in waitlisted state")
        return registration

    async def remove(self, camp_id: str, registration_id: str, tenant_id: Optional[str] = None) -> None:
        registration = await self._waitlisted(camp_id, registration_id, tenant_id)
        had_offer = registration.waitlist_offer_sent_at is not None
        registration.status = RegistrationStatus.cancelled
        registration.cancellation_reason = "Removed from waitlist by admin"
        clear_waitlist_fields(registration)
        await self.registrations.update(registration, commit=False)
        await self.reorder(camp_id)
        if had_offer:
            await self.on_spot_opened(camp_id)
        await self.session.commit()
        logger.info(f"Removed registration {registration_id} from the waitlist of camp {camp_id}")

    def _offer(self, registration: Registration) -> None:
        now = utc_now()
        registration.waitlist_offer_token = secrets.token_urlsafe(32)
        registration.waitlist_offer_sent_at = now
        registration.waitlist_offer_expires_at = now + OFFER_WINDOW
        logger.info(
            f"Waitlist offer for registration {registration.id} at camp {registration.camp_id} "
            f"expires {registration.waitlist_offer_expires_at.isoformat()}"
        )

    async def send_offer(self, camp_id: str, registration_id: str, tenant_id: Optional[str] = None) -> Registration:
        """Offer a spot to a specific waitlisted registration (admin action), ignoring its place in line."""
        registration = await self._waitlisted(camp_id, registration_id, tenant_id)
        self._offer(registration)
        await self.registrations.update(registration)
        return registration

    async def on_spot_opened(self, camp_id: str) -> Optional[Registration]:
        """
        Offer a freed spot to the first registration in line without an open offer.

        Does not commit. Returns the offered registration, or ``None`` when the
        camp is still full or nobody is waiting.
        """
        camp = await self.camps.get_by_id(camp_id)
        if camp is None or camp.capacity is None:
            return None
        if await self.spots_taken(camp_id) >= camp.capacity:
            return None

        now = utc_now()
        for registration in await self.registrations.waitlisted_for_camp(camp_id):
            offer_open = (
                registration.waitlist_offer_sent_at is not None
                and as_utc(registration.waitlist_offer_expires_at) > now
            )
            if not offer_open:
                self._offer(registration)
                return await self.registrations.update(registration, commit=False)
        return None

    async def claim_offer(self, token: str) -> Registration:
        """
        Validate an offer before its registration goes to checkout.

        Raises:
            NotFoundError: No waitlisted registration carries ``token``.
            BadRequestError: The offer expired or the camp filled up meanwhile.
        """
        registration = await self.registrations.by_offer_token(token)
        if registration is None or registration.status != RegistrationStatus.waitlisted:
            raise NotFoundError("Invalid or expired offer token")
        expires_at = as_utc(registration.waitlist_offer_expires_at)
        if expires_at is None or expires_at <= utc_now():
            raise BadRequestError("This offer has expired")
        camp = await self.camps.get_by_id(registration.camp_id)
        if camp is not None and camp.capacity is not None:
            if await self.camps.count_active_registrations(camp.id) >= camp.capacity:
                raise BadRequestError("Sorry, the spot is no longer available")
        return registration

    async def decline_offer(self, token: str) -> None:
        registration = await self.registrations.by_offer_token(token)
        if registration is None or registration.status != RegistrationStatus.waitlisted:
            raise NotFoundError("Invalid offer token")
        registration.status = RegistrationStatus.cancelled
        registration.cancellation_reason = "Waitlist offer declined"
        clear_waitlist_fields(registration)
        await self.registrations.update(registration, commit=False)
        await self.reorder(registration.camp_id)
        await self.on_spot_opened(registration.camp_id)
        await self.session.commit()
        logger.info(f"Waitlist offer for registration {registration.id} declined")

    async def expire_stale_offers(self) -> Dict[str, int]:
        """
        Move registrations whose offer ran out to the end of their line and offer the spot onward.

        Returns:
            ``{"expired": n, "new_offers": m}``
        """
        expired = await self.registrations.expired_offers(utc_now())
        camp_ids: List[str] = []
        for registration in expired:
            _clear_offer(registration)
            registration.waitlist_position = await self._next_position(registration.camp_id)
            await self.registrations.update(registration, commit=False)
            if registration.camp_id not in camp_ids:
                camp_ids.append(registration.camp_id)

        new_offers = 0
        for camp_id in camp_ids:
            await self.reorder(camp_id)
            if await self.on_spot_opened(camp_id) is not None:
                new_offers += 1
        await self.session.commit()
        if expired:
            logger.info(f"Expired {len(expired)} waitlist offer(s), sent {new_offers} new offer(s)")
        return {"expired": len(expired), "new_offers": new_offers}
