"""
Stripe Reconciliation Service.

Compares what Stripe actually charged for each completed registration
checkout with the totals stored in the database, and repairs the stored
records. Registrations are matched through the checkout session metadata
because older rows may lack a payment intent id.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from empowered_camps.core.database.repositories import AthleteRepository, RegistrationRepository
from empowered_camps.core.errors import BadRequestError
from empowered_camps.core.logging_config import get_logger
from empowered_camps.core.money import format_dollars

from .payments import registration_ids_from_metadata
from .stripe_gateway import StripeGateway

logger = get_logger(__name__)

# Stripe and the stored totals may disagree by a cent of rounding.
TOLERANCE_CENTS = 1


def charge_status(difference_cents: int) -> str:
    if difference_cents == 0:
        return "match"
    if abs(difference_cents) <= TOLERANCE_CENTS:
        return "ok"
    return "discrepancy"


class ReconciliationService:
    """Stripe versus database comparison and repair."""

    def __init__(self, session: AsyncSession, gateway: StripeGateway) -> None:
        self.session = session
        self.gateway = gateway
        self.registrations = RegistrationRepository(session)
        self.athletes = AthleteRepository(session)

    async def _registration_sessions(self) -> List[Dict[str, Any]]:
        if not self.gateway.is_configured:
            raise BadRequestError("Stripe is not configured")
        sessions = await self.gateway.list_completed_checkout_sessions()
        charges = []
        for checkout in sessions:
            if checkout["metadata"].get("type") != "registration":
                continue
            ids = registration_ids_from_metadata(checkout["metadata"])
            if ids:
                charges.append({**checkout, "registration_ids": ids})
        return charges

    async def report(self) -> Dict[str, Any]:
        """Per-charge comparison plus a summary of totals and discrepancies."""
        charges = await self._registration_sessions()
        all_ids = [registration_id for charge in charges for registration_id in charge["registration_ids"]]
        registrations = {r.id: r for r in await self.registrations.get_many(all_ids)}
        actual_addons = await self.registrations.actual_addon_totals(list(registrations))
        names = await self.athletes.names_by_id([r.athlete_id for r in registrations.values()])

        comparisons: List[Dict[str, Any]] = []
        stripe_total = db_total = discrepancies = 0
        for charge in charges:
            regs = [registrations[i] for i in charge["registration_ids"] if i in registrations]
            if not regs:
                continue
            charge_db_total = sum(r.total_price_cents for r in regs)
            difference = charge_db_total - charge["amount_total"]
            stripe_total += charge["amount_total"]
            db_total += charge_db_total
            status = charge_status(difference)
            if status == "discrepancy":
                discrepancies += 1

            comparisons.append(
                {
                    "checkout_session_id": charge["id"],
                    "payment_intent_id": charge["payment_intent"],
                    "customer_email": charge["customer_email"],
                    "created": (
                        datetime.fromtimestamp(charge["created"], tz=timezone.utc).isoformat()
                        if charge.get("created")
                        else None
                    ),
                    "registration_ids": charge["registration_ids"],
                    "athlete_names": [names.get(r.athlete_id, "") for r in regs],
                    "stripe_amount_cents": charge["amount_total"],
                    "db_total_cents": charge_db_total,
                    "difference_cents": difference,
                    "stripe_amount": format_dollars(charge["amount_total"]),
                    "db_total": format_dollars(charge_db_total),
                    "status": status,
                    "registrations": [
                        {
                            "registration_id": r.id,
                            "athlete_name": names.get(r.athlete_id, ""),
                            "db_total_cents": r.total_price_cents,
                            "stored_addons_cents": r.addons_total_cents,
                            "actual_addons_cents": actual_addons.get(r.id, 0),
                            "addon_mismatch": actual_addons.get(r.id, 0) != r.addons_total_cents,
                        }
                        for r in regs
                    ],
                }
            )

        return {
            "summary": {
                "stripe_charges": len(charges),
                "db_registrations": len(registrations),
                "discrepancy_count": discrepancies,
                "stripe_total": format_dollars(stripe_total),
                "db_total": format_dollars(db_total),
                "difference": format_dollars(db_total - stripe_total),
            },
            "comparisons": comparisons,
        }

    async def fix(self) -> Dict[str, Any]:
        """
        Repair registrations referenced by completed checkouts.

        Backfills missing payment intent and checkout session ids, resets the
        stored add-on total from the add-on rows and recomputes the total.
        """
        charges = await self._registration_sessions()
        fixes: List[Dict[str, Any]] = []
        for charge in charges:
            regs = await self.registrations.get_many(charge["registration_ids"])
            if not regs:
                continue
            actual_addons = await self.registrations.actual_addon_totals([r.id for r in regs])
            names = await self.athletes.names_by_id([r.athlete_id for r in regs])
            for registration in regs:
                changes: List[str] = []
                if not registration.stripe_payment_intent_id and charge["payment_intent"]:
                    changes.append(f"stripe_payment_intent_id: null → {charge['payment_intent']}")
                    registration.stripe_payment_intent_id = charge["payment_intent"]
                if not registration.stripe_checkout_session_id:
                    changes.append(f"stripe_checkout_session_id: null → {charge['id']}")
                    registration.stripe_checkout_session_id = charge["id"]

                addons_total = actual_addons.get(registration.id, 0)
                if addons_total != registration.addons_total_cents:
                    changes.append(f"addons_total_cents: {registration.addons_total_cents} → {addons_total}")
                    registration.addons_total_cents = addons_total
                new_total = registration.computed_total()
                if new_total != registration.total_price_cents:
                    changes.append(f"total_price_cents: {registration.total_price_cents} → {new_total}")
                    registration.total_price_cents = new_total

                if changes:
                    await self.registrations.update(registration, commit=False)
                    fixes.append(
                        {
                            "registration_id": registration.id,
                            "athlete_name": names.get(registration.athlete_id, ""),
                            "changes": changes,
                        }
                    )
        await self.session.commit()
        logger.info(f"Stripe reconciliation fixed {len(fixes)} registration(s)")
        return {"fixed": len(fixes), "fixes": fixes}
