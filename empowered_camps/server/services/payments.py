"""
Payment Service.

Turns pending registrations into a Stripe Checkout Session and applies the
Stripe webhook events that settle them:

- ``checkout.session.completed``: registrations become paid and confirmed
- ``payment_intent.succeeded``: the payment intent id is recorded
- ``payment_intent.payment_failed``: payment status becomes failed
- ``charge.refunded``: the refunded amount is split across the
  registrations of the charge in proportion to their totals; a full refund
  offers the freed spots to the camp's waitlist

Admin refunds are requested from Stripe and land through ``charge.refunded``.

Free registrations are confirmed immediately. Without Stripe credentials a
demo session is issued that ``confirm_demo_payment`` settles.
"""

from __future__ import annotations

import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from empowered_camps.core.database.base import utc_now
from empowered_camps.core.database.entities.registrations import Registration, RegistrationAddon
from empowered_camps.core.database.repositories import (
    AddonRepository,
    AthleteRepository,
    CampRepository,
    RegistrationRepository,
)
from empowered_camps.core.errors import BadRequestError, NotFoundError
from empowered_camps.core.logging_config import get_logger
from empowered_camps.core.models.domain.enums import PaymentStatus, RegistrationStatus
from empowered_camps.core.money import allocate_proportionally
from empowered_camps.core.monitoring import log_payment_event

from .stripe_gateway import StripeGateway
from .waitlist import WaitlistService, clear_waitlist_fields

logger = get_logger(__name__)

FREE_SESSION_ID = "free_registration"
DEMO_SESSION_PREFIX = "demo_"
REFUNDABLE_STATUSES = (PaymentStatus.paid, PaymentStatus.partial)


def _with_query(url: str, query: str) -> str:
    return f"{url}{'&' if '?' in url else '?'}{query}"


def registration_ids_from_metadata(metadata: Dict[str, str]) -> List[str]:
    """Registration ids carried by Stripe metadata: ``registrationIds`` (comma-joined) or ``registrationId``."""
    joined = metadata.get("registrationIds") or ""
    ids = [value.strip() for value in joined.split(",") if value.strip()]
    if not ids and metadata.get("registrationId"):
        ids = [metadata["registrationId"]]
    return ids


def _price_line(name: str, amount_cents: int, currency: str) -> Dict[str, Any]:
    return {
        "price_data": {"currency": currency, "product_data": {"name": name}, "unit_amount": amount_cents},
        "quantity": 1,
    }


def build_line_items(
    registrations: Sequence[Registration],
    addons_by_registration: Dict[str, List[RegistrationAddon]],
    camp_name: str,
    athlete_names: Dict[str, str],
    addon_names: Dict[str, str],
    currency: str = "usd",
) -> List[Dict[str, Any]]:
    """
    Stripe line items for a group of registrations.

    The camp line of each registration carries the sibling and promo
    discounts. A promo larger than the discounted camp price spills over onto
    that registration's add-ons, split in proportion to their prices. Tax is
    summed into a single "Sales Tax" line and zero-amount lines are omitted,
    so the items always add up to the sum of the registration totals.
    """
    items: List[Dict[str, Any]] = []
    tax_total = 0
    for registration in registrations:
        athlete = athlete_names.get(registration.athlete_id, "Camper")
        after_discount = max(0, registration.base_price_cents - registration.discount_cents)
        promo_on_camp = min(registration.promo_discount_cents, after_discount)
        camp_net = max(0, after_discount - promo_on_camp)
        if camp_net > 0:
            items.append(_price_line(f"{camp_name} - {athlete}", camp_net, currency))

        addon_rows = addons_by_registration.get(registration.id, [])
        overflow = registration.promo_discount_cents - promo_on_camp
        shares = (
            allocate_proportionally(overflow, [row.price_cents for row in addon_rows])
            if overflow > 0 and addon_rows
            else [0] * len(addon_rows)
        )
        for row, share in zip(addon_rows, shares):
            amount = max(0, row.price_cents - share)
            if amount <= 0:
                continue
            name = addon_names.get(row.addon_id, "Add-on")
            if row.quantity > 1:
                name = f"{name} x{row.quantity}"
            items.append(_price_line(f"{name} - {athlete}", amount, currency))
        tax_total += registration.tax_cents

    if tax_total > 0:
        items.append(_price_line("Sales Tax", tax_total, currency))
    return items


class PaymentService:
    """Checkout sessions and Stripe webhook processing."""

    def __init__(self, session: AsyncSession, gateway: StripeGateway) -> None:
        self.session = session
        self.gateway = gateway
        self.registrations = RegistrationRepository(session)
        self.camps = CampRepository(session)
        self.athletes = AthleteRepository(session)
        self.addons = AddonRepository(session)
        self.waitlist = WaitlistService(session)

    async def _mark_paid(self, registrations: Sequence[Registration], **stripe_ids: Optional[str]) -> None:
        now = utc_now()
        waitlisted_camps = set()
        for registration in registrations:
            if registration.status == RegistrationStatus.waitlisted:
                waitlisted_camps.add(registration.camp_id)
                clear_waitlist_fields(registration)
            registration.payment_status = PaymentStatus.paid
            registration.status = RegistrationStatus.confirmed
            registration.paid_at = now
            for field, value in stripe_ids.items():
                if value:
                    setattr(registration, field, value)
            await self.registrations.update(registration, commit=False)
        for camp_id in waitlisted_camps:
            await self.waitlist.reorder(camp_id)

    async def create_checkout_session(
        self,
        camp_id: str,
        registration_ids: Sequence[str],
        success_url: str,
        cancel_url: str,
        tenant_id: str,
        customer_email: Optional[str] = None,
    ) -> Dict[str, str]:
        """
        Start payment for ``registration_ids``.

        Returns:
            ``{"checkout_url": ..., "session_id": ...}``

        Raises:
            NotFoundError: None of the registrations exist for the camp.
            PaymentProviderError: Stripe rejected the session.
        """
        registrations = await self.registrations.get_for_camp(registration_ids, camp_id)
        if not registrations:
            raise NotFoundError("Registration not found")

        primary_id = registrations[0].id
        total = sum(registration.total_price_cents for registration in registrations)

        if total <= 0:
            await self._mark_paid(registrations, payment_method="free")
            await self.session.commit()
            logger.info(f"Confirmed {len(registrations)} free registration(s) for camp {camp_id}")
            return {"checkout_url": _with_query(success_url, "free=true"), "session_id": FREE_SESSION_ID}

        if not self.gateway.is_configured:
            session_id = f"{DEMO_SESSION_PREFIX}{primary_id}_{int(time.time() * 1000)}"
            for registration in registrations:
                registration.stripe_checkout_session_id = session_id
                registration.payment_method = "demo"
                await self.registrations.update(registration, commit=False)
            await self.session.commit()
            logger.warning(f"Stripe not configured; issued demo checkout session {session_id}")
            return {
                "checkout_url": _with_query(success_url, f"session_id={session_id}&demo=true"),
                "session_id": session_id,
            }

        camp = await self.camps.get_by_id(camp_id)
        ids = [registration.id for registration in registrations]
        addons_by_registration = await self.registrations.addons_for(ids)
        addon_ids = {row.addon_id for rows in addons_by_registration.values() for row in rows}
        addon_names = {addon.id: addon.name for addon in await self.addons.get_many(list(addon_ids))}
        athlete_names = await self.athletes.names_by_id([registration.athlete_id for registration in registrations])

        line_items = build_line_items(
            registrations,
            addons_by_registration,
            camp.name if camp else "Camp Registration",
            athlete_names,
            addon_names,
            self.gateway.currency,
        )
        metadata = {
            "type": "registration",
            "registrationId": primary_id,
            "registrationIds": ",".join(ids),
            "campSessionId": camp_id,
            "tenantId": tenant_id,
        }
        checkout = await self.gateway.create_checkout_session(
            line_items=line_items,
            success_url=_with_query(success_url, "session_id={CHECKOUT_SESSION_ID}"),
            cancel_url=cancel_url,
            metadata=metadata,
            customer_email=customer_email,
        )

        for registration in registrations:
            registration.stripe_checkout_session_id = checkout["id"]
            registration.payment_method = "stripe"
            await self.registrations.update(registration, commit=False)
        await self.session.commit()
        logger.info(f"Created Stripe checkout session {checkout['id']} for {len(ids)} registration(s)")
        return {"checkout_url": checkout["url"], "session_id": checkout["id"]}

    async def confirm_demo_payment(self, session_id: str) -> List[str]:
        """Settle a demo checkout session; returns the confirmed registration ids."""
        if not session_id.startswith(DEMO_SESSION_PREFIX):
            raise BadRequestError("Invalid demo session")
        registrations = await self.registrations.by_checkout_session(session_id)
        if not registrations:
            raise NotFoundError("Registration not found")
        await self._mark_paid(registrations)
        await self.session.commit()
        return [registration.id for registration in registrations]

    async def refund_registration(
        self,
        registration_id: str,
        amount_cents: Optional[int] = None,
        reason: Optional[str] = None,
        tenant_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Ask Stripe to refund a paid registration.

        ``amount_cents`` defaults to whatever has not been refunded yet. The
        registration itself changes when Stripe reports the refund through
        the ``charge.refunded`` webhook.

        Returns:
            ``{"refund_id": ..., "amount_cents": ...}``

        Raises:
            BadRequestError: Stripe is not configured, nothing was paid, or the
                amount exceeds what is left to refund.
            NotFoundError: Unknown registration, or one of another tenant.
            PaymentProviderError: Stripe rejected the refund.
        """
        if not self.gateway.is_configured:
            raise BadRequestError("Stripe is not configured. Please set up Stripe to process refunds.")
        registration = await self.registrations.get_by_id(registration_id)
        if registration is None or (tenant_id is not None and registration.tenant_id != tenant_id):
            raise NotFoundError("Registration not found")
        if not registration.stripe_payment_intent_id or registration.payment_status not in REFUNDABLE_STATUSES:
            raise BadRequestError("No payment to refund")

        remaining = registration.total_price_cents - registration.refund_amount_cents
        if remaining <= 0:
            raise BadRequestError("Registration is already fully refunded")
        amount = remaining if amount_cents is None else amount_cents
        if amount > remaining:
            raise BadRequestError("Refund amount exceeds the amount left to refund")

        refund = await self.gateway.create_refund(
            registration.stripe_payment_intent_id,
            amount,
            metadata={
                "processedByUserId": user_id or "",
                "resourceType": "REGISTRATION",
                "resourceId": registration.id,
                "internalReason": reason or "Refund requested",
            },
        )
        logger.info(f"Requested refund {refund['id']} of {amount} cents for registration {registration.id}")
        return {"refund_id": refund["id"], "amount_cents": refund.get("amount") or amount}

    async def sync_addon_totals(self, registrations: Sequence[Registration]) -> Dict[str, tuple]:
        """
        Align stored add-on totals with the add-on rows and recompute totals.

        Returns:
            Mapping of registration id to ``(old_addons, new_addons, old_total, new_total)``
            for the registrations that changed.
        """
        actual = await self.registrations.actual_addon_totals([registration.id for registration in registrations])
        changes: Dict[str, tuple] = {}
        for registration in registrations:
            addons_total = actual.get(registration.id, 0)
            new_total = registration.computed_total(addons_total)
            if addons_total == registration.addons_total_cents and new_total == registration.total_price_cents:
                continue
            changes[registration.id] = (
                registration.addons_total_cents,
                addons_total,
                registration.total_price_cents,
                new_total,
            )
            registration.addons_total_cents = addons_total
            registration.total_price_cents = new_total
            await self.registrations.update(registration, commit=False)
        return changes

    async def handle_webhook(self, payload: bytes, signature: Optional[str]) -> Dict[str, Any]:
        """
        Verify and apply a Stripe webhook event.

        Returns:
            ``{"processed": bool, "event_type": str, "resource_id": str | None}``
        """
        if not self.gateway.is_configured:
            logger.warning("Stripe webhook received but Stripe is not configured")
            return {"processed": False, "event_type": "unknown", "resource_id": None}

        event = self.gateway.verify_webhook(payload, signature)
        event_type = event.get("type", "unknown")
        obj = event.get("data", {}).get("object", {}) or {}

        handlers: Dict[str, Callable[[Dict[str, Any]], Awaitable[Optional[str]]]] = {
            "checkout.session.completed": self._on_checkout_completed,
            "payment_intent.succeeded": self._on_payment_succeeded,
            "payment_intent.payment_failed": self._on_payment_failed,
            "charge.refunded": self._on_charge_refunded,
        }
        handler = handlers.get(event_type)
        resource_id: Optional[str] = None
        if handler is None:
            logger.debug(f"Unhandled Stripe event type {event_type}")
        else:
            resource_id = await handler(obj)
            await self.session.commit()
        log_payment_event(event_type, resource_id, True)
        return {"processed": True, "event_type": event_type, "resource_id": resource_id}

    async def _on_checkout_completed(self, checkout: Dict[str, Any]) -> Optional[str]:
        metadata = checkout.get("metadata") or {}
        if metadata.get("type") != "registration":
            return None
        registrations = await self.registrations.get_for_camp(registration_ids_from_metadata(metadata))
        if not registrations:
            logger.warning(f"Checkout session {checkout.get('id')} references no known registrations")
            return None

        await self._mark_paid(
            registrations,
            stripe_payment_intent_id=checkout.get("payment_intent"),
            stripe_checkout_session_id=checkout.get("id"),
        )
        await self.sync_addon_totals(registrations)
        logger.info(f"Checkout {checkout.get('id')} confirmed {len(registrations)} registration(s)")
        return metadata.get("registrationId") or registrations[0].id

    async def _on_payment_succeeded(self, intent: Dict[str, Any]) -> Optional[str]:
        primary_id = (intent.get("metadata") or {}).get("registrationId")
        registration = await self.registrations.get_by_id(primary_id) if primary_id else None
        if registration is None:
            return None
        registration.stripe_payment_intent_id = intent.get("id")
        await self.registrations.update(registration, commit=False)
        return registration.id

    async def _on_payment_failed(self, intent: Dict[str, Any]) -> Optional[str]:
        ids = registration_ids_from_metadata(intent.get("metadata") or {})
        registrations = await self.registrations.get_for_camp(ids)
        if not registrations and intent.get("id"):
            registrations = await self.registrations.by_payment_intent(intent["id"])
        if not registrations:
            return None
        for registration in registrations:
            registration.payment_status = PaymentStatus.failed
            await self.registrations.update(registration, commit=False)
        logger.warning(f"Payment failed for {len(registrations)} registration(s)")
        return registrations[0].id

    async def _on_charge_refunded(self, charge: Dict[str, Any]) -> Optional[str]:
        intent_id = charge.get("payment_intent")
        if not intent_id:
            return None
        registrations = await self.registrations.by_payment_intent(intent_id)
        if not registrations:
            intent = await self.gateway.retrieve_payment_intent(intent_id)
            registrations = await self.registrations.get_for_camp(registration_ids_from_metadata(intent["metadata"]))
            for registration in registrations:
                registration.stripe_payment_intent_id = intent_id
        if not registrations:
            logger.warning(f"Refund for payment intent {intent_id} matches no registrations")
            return None

        amount_refunded = int(charge.get("amount_refunded") or 0)
        charge_amount = int(charge.get("amount") or 0)
        fully_refunded = charge_amount > 0 and amount_refunded >= charge_amount
        # Shares follow the stored totals so they always add up to the refunded amount
        shares = allocate_proportionally(amount_refunded, [r.total_price_cents for r in registrations])
        now = utc_now()
        for registration, share in zip(registrations, shares):
            registration.refund_amount_cents = share
            registration.refunded_at = now
            if fully_refunded:
                registration.payment_status = PaymentStatus.refunded
                registration.status = RegistrationStatus.refunded
            else:
                registration.payment_status = PaymentStatus.partial
            await self.registrations.update(registration, commit=False)
        logger.info(f"Applied refund of {amount_refunded} cents across {len(registrations)} registration(s)")
        if fully_refunded:
            for camp_id in {registration.camp_id for registration in registrations}:
                await self.waitlist.on_spot_opened(camp_id)
        return registrations[0].id
