"""
Registration Checkout Service.

Creates the parent profile, athletes, registrations and add-on rows for a
checkout request, then hands the registrations to the payment service. If
the payment session cannot be created every registration of the request is
cancelled so it no longer holds a spot. Full camps take waitlist signups
instead, priced the same way, and accepted waitlist offers reuse the payment
step.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from empowered_camps.core.database.entities.profiles import Athlete, Profile
from empowered_camps.core.database.entities.promo_codes import PromoCode
from empowered_camps.core.database.entities.registrations import Registration, RegistrationAddon
from empowered_camps.core.database.repositories import (
    AddonRepository,
    AthleteRepository,
    CampRepository,
    ProfileRepository,
    PromoCodeRepository,
    RegistrationRepository,
    TenantRepository,
)
from empowered_camps.core.errors import BadRequestError, EmpoweredCampsError, NotFoundError, PaymentProviderError
from empowered_camps.core.logging_config import get_logger
from empowered_camps.core.models.domain.enums import PaymentStatus, RegistrationStatus
from empowered_camps.core.models.io.registrations import CheckoutAddon, CheckoutCamper, CheckoutParent, CheckoutRequest
from empowered_camps.core.models.io.waitlist import WaitlistJoinRequest
from empowered_camps.server.auth import AuthUser
from empowered_camps.server.core.config import settings

from .payments import PaymentService
from .pricing import AddonLine, CamperQuote, quote_registration
from .stripe_gateway import StripeGateway
from .waitlist import WaitlistService

logger = get_logger(__name__)

PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "phone",
    "address_line1",
    "address_line2",
    "city",
    "state",
    "zip_code",
    "emergency_contact_name",
    "emergency_contact_phone",
    "emergency_contact_relationship",
)


def _registration(
    tenant_id: str,
    camp_id: str,
    parent_id: str,
    athlete_id: str,
    camper: CheckoutCamper,
    quote: CamperQuote,
    promo: Optional[PromoCode],
) -> Registration:
    return Registration(
        tenant_id=tenant_id,
        camp_id=camp_id,
        athlete_id=athlete_id,
        parent_id=parent_id,
        status=RegistrationStatus.pending,
        payment_status=PaymentStatus.pending,
        base_price_cents=quote.base_price_cents,
        discount_cents=quote.discount_cents,
        promo_discount_cents=quote.promo_discount_cents,
        addons_total_cents=quote.addons_total_cents,
        tax_cents=quote.tax_cents,
        total_price_cents=quote.total_cents,
        promo_code_id=promo.id if promo is not None and quote.promo_discount_cents else None,
        shirt_size=camper.t_shirt_size,
        special_considerations=camper.special_considerations,
    )


class CheckoutService:
    """Registration checkout workflow."""

    def __init__(self, session: AsyncSession, gateway: StripeGateway) -> None:
        self.session = session
        self.payments = PaymentService(session, gateway)
        self.camps = CampRepository(session)
        self.tenants = TenantRepository(session)
        self.profiles = ProfileRepository(session)
        self.athletes = AthleteRepository(session)
        self.addons = AddonRepository(session)
        self.promo_codes = PromoCodeRepository(session)
        self.registrations = RegistrationRepository(session)
        self.waitlist = WaitlistService(session)

    async def _resolve_parent(self, parent: CheckoutParent, user: Optional[AuthUser]) -> Profile:
        """Find the parent by email or create one; non-empty submitted fields update an existing profile."""
        email = parent.email.strip().lower()
        profile = await self.profiles.get_by_email(email)
        if profile is None and user is not None:
            profile = await self.profiles.get_by_id(user.id)

        submitted = {field: getattr(parent, field) for field in PROFILE_FIELDS if getattr(parent, field)}
        if profile is None:
            profile = Profile(email=email, **submitted)
            if user is not None:
                profile.id = user.id
            return await self.profiles.create(profile, commit=False)

        for field, value in submitted.items():
            setattr(profile, field, value)
        return await self.profiles.update(profile, commit=False)

    async def _resolve_athlete(self, parent_id: str, camper: CheckoutCamper) -> Athlete:
        if camper.existing_athlete_id:
            athlete = await self.athletes.get_by_id(camper.existing_athlete_id)
            if athlete is not None and athlete.parent_id == parent_id:
                return athlete
        athlete = await self.athletes.find_for_parent(parent_id, camper.first_name, camper.last_name)
        if athlete is not None:
            return athlete
        return await self.athletes.create(
            Athlete(
                parent_id=parent_id,
                first_name=camper.first_name,
                last_name=camper.last_name,
                date_of_birth=camper.date_of_birth,
                grade=camper.grade,
                t_shirt_size=camper.t_shirt_size,
                medical_notes=camper.medical_notes,
                allergies=camper.allergies,
            ),
            commit=False,
        )

    async def _price_addons(self, selections: Sequence[CheckoutAddon], camper_count: int) -> List[List[AddonLine]]:
        """Price add-ons from the catalogue and group them per camper; unassigned ones go to the first camper."""
        per_camper: List[List[AddonLine]] = [[] for _ in range(camper_count)]
        if not selections:
            return per_camper
        catalogue = {addon.id: addon for addon in await self.addons.get_many([s.addon_id for s in selections])}
        variants = await self.addons.variants_by_id([s.variant_id for s in selections if s.variant_id])

        for selection in selections:
            addon = catalogue.get(selection.addon_id)
            if addon is None or not addon.is_active:
                raise BadRequestError("Add-on not available")
            unit_price = addon.price_cents
            variant = variants.get(selection.variant_id) if selection.variant_id else None
            if variant is not None and variant.price_override_cents is not None:
                unit_price = variant.price_override_cents
            index = selection.camper_index if selection.camper_index is not None else 0
            if index >= camper_count:
                raise BadRequestError("Add-on assigned to an unknown camper")
            per_camper[index].append(
                AddonLine(
                    addon_id=addon.id,
                    variant_id=variant.id if variant else None,
                    name=addon.name,
                    unit_price_cents=unit_price,
                    quantity=selection.quantity,
                    is_taxable=addon.is_taxable,
                )
            )
        return per_camper

    async def checkout(self, request: CheckoutRequest, user: Optional[AuthUser] = None) -> Dict[str, object]:
        """
        Register every camper of ``request`` and start payment.

        Returns:
            ``{"registration_ids": [...], "checkout_url": ..., "session_id": ...}``

        Raises:
            BadRequestError: Missing fields, no capacity left, or unknown add-ons.
            NotFoundError: The camp does not exist in the tenant.
            PaymentProviderError: The checkout session could not be created.
        """
        if not request.camp_id or not request.tenant_id or request.parent is None or not request.campers:
            raise BadRequestError("Missing required fields")

        camp = await self.camps.get_by_id(request.camp_id)
        if camp is None or camp.tenant_id != request.tenant_id:
            raise NotFoundError("Camp not found")
        tenant = await self.tenants.get_by_id(request.tenant_id)

        if camp.capacity is not None:
            taken = await self.waitlist.spots_taken(camp.id)
            if taken + len(request.campers) > camp.capacity:
                raise BadRequestError("Not enough spots available")

        promo = None
        if request.promo_code:
            promo = await self.promo_codes.get_by_code(request.tenant_id, request.promo_code, active_only=True)

        addons_per_camper = await self._price_addons(request.addons, len(request.campers))
        quotes = quote_registration(
            camp.price_on(date.today()),
            addons_per_camper,
            promo,
            tenant.tax_rate_percent if tenant else None,
        )

        parent = await self._resolve_parent(request.parent, user)
        registration_ids: List[str] = []
        for camper, quote in zip(request.campers, quotes):
            athlete = await self._resolve_athlete(parent.id, camper)
            registration = await self.registrations.create(
                _registration(request.tenant_id, camp.id, parent.id, athlete.id, camper, quote, promo), commit=False
            )
            for line in quote.addons:
                await self.registrations.add_addon(
                    RegistrationAddon(
                        registration_id=registration.id,
                        addon_id=line.addon_id,
                        variant_id=line.variant_id,
                        quantity=line.quantity,
                        price_cents=line.total_cents,
                    )
                )
            registration_ids.append(registration.id)
        await self.session.commit()
        logger.info(f"Created {len(registration_ids)} pending registration(s) for camp {camp.id}")

        base_url = settings.app_base_url.rstrip("/")
        success_url = request.success_url or f"{base_url}/register/confirmation?camp={camp.id}"
        cancel_url = request.cancel_url or f"{base_url}/camps/{camp.id}/register?cancelled=true"
        try:
            payment = await self.payments.create_checkout_session(
                camp_id=camp.id,
                registration_ids=registration_ids,
                success_url=success_url,
                cancel_url=cancel_url,
                tenant_id=request.tenant_id,
                customer_email=parent.email,
            )
        except EmpoweredCampsError as e:
            await self._cancel(registration_ids)
            logger.error(f"Checkout creation failed for camp {camp.id}: {e.message}")
            raise PaymentProviderError("Failed to create checkout session") from e

        return {"registration_ids": registration_ids, **payment}

    async def join_waitlist(self, request: WaitlistJoinRequest, user: Optional[AuthUser] = None) -> Dict[str, object]:
        """
        Put every camper of ``request`` on the waitlist of a full camp.

        Campers are priced now, the same way checkout prices them without
        add-ons, so an accepted offer goes straight to payment.

        Returns:
            ``{"registration_ids": [...], "waitlist_position": <first camper's place>}``

        Raises:
            BadRequestError: Missing fields, the camp still has room, or a camper is already listed.
            ForbiddenError: The waitlist is turned off for the camp's tenant.
            NotFoundError: The camp does not exist in the tenant.
        """
        if not request.camp_id or request.parent is None or not request.campers:
            raise BadRequestError("Missing required fields")

        camp = await self.camps.get_by_id(request.camp_id)
        if camp is None or (request.tenant_id and camp.tenant_id != request.tenant_id):
            raise NotFoundError("Camp not found")
        if not camp.tenant_id:
            raise BadRequestError("Tenant not found")
        await self.waitlist.ensure_open(camp)

        tenant = await self.tenants.get_by_id(camp.tenant_id)
        promo = None
        if request.promo_code:
            promo = await self.promo_codes.get_by_code(camp.tenant_id, request.promo_code, active_only=True)
        quotes = quote_registration(
            camp.price_on(date.today()),
            [[] for _ in request.campers],
            promo,
            tenant.tax_rate_percent if tenant else None,
        )

        parent = await self._resolve_parent(request.parent, user)
        registrations: List[Registration] = []
        for camper, quote in zip(request.campers, quotes):
            athlete = await self._resolve_athlete(parent.id, camper)
            registrations.append(
                await self.waitlist.enqueue(
                    _registration(camp.tenant_id, camp.id, parent.id, athlete.id, camper, quote, promo)
                )
            )
        await self.session.commit()
        logger.info(f"Added {len(registrations)} athlete(s) to the waitlist of camp {camp.id}")
        return {
            "registration_ids": [registration.id for registration in registrations],
            "waitlist_position": registrations[0].waitlist_position,
        }

    async def accept_waitlist_offer(self, token: str) -> Dict[str, str]:
        """
        Send the registration behind an open waitlist offer to payment.

        Returns:
            ``{"registration_id": ..., "checkout_url": ..., "session_id": ...}``
        """
        registration = await self.waitlist.claim_offer(token)
        parent = await self.profiles.get_by_id(registration.parent_id)
        base_url = settings.app_base_url.rstrip("/")
        payment = await self.payments.create_checkout_session(
            camp_id=registration.camp_id,
            registration_ids=[registration.id],
            success_url=f"{base_url}/register/confirmation?camp={registration.camp_id}",
            cancel_url=f"{base_url}/waitlist/offer/{token}",
            tenant_id=registration.tenant_id,
            customer_email=parent.email if parent else None,
        )
        logger.info(f"Waitlist offer accepted for registration {registration.id}")
        return {"registration_id": registration.id, **payment}

    async def _cancel(self, registration_ids: Sequence[str]) -> None:
        for registration in await self.registrations.get_many(registration_ids):
            registration.status = RegistrationStatus.cancelled
            registration.cancellation_reason = "Checkout creation failed"
            await self.registrations.update(registration, commit=False)
        await self.session.commit()
