"""
Royalty Service.

Generates per-camp royalty invoices from confirmed registrations and drives
their lifecycle:

    pending  -> invoiced | waived
    invoiced -> paid | overdue | disputed | waived
    overdue  -> paid | disputed | waived
    disputed -> invoiced | paid | waived
    paid, waived: terminal

Keeping the current status is always allowed so notes can be appended.
"""

from __future__ import annotations

import re
import string
import time
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from empowered_camps.core.database.base import as_utc, utc_now
from empowered_camps.core.database.entities.royalties import RoyaltyInvoice, RoyaltyLineItem
from empowered_camps.core.database.entities.tenants import Tenant
from empowered_camps.core.database.repositories import (
    AddonRepository,
    AthleteRepository,
    CampRepository,
    RegistrationRepository,
    RoyaltyInvoiceRepository,
    TenantRepository,
)
from empowered_camps.core.errors import BadRequestError, NotFoundError
from empowered_camps.core.logging_config import get_logger
from empowered_camps.core.models.domain.enums import LicenseStatus, RoyaltyInvoiceStatus
from empowered_camps.core.models.io.royalties import RoyaltyInvoiceRead, RoyaltyLineItemRead
from empowered_camps.core.money import bps_of, format_dollars, round_cents
from empowered_camps.core.monitoring import log_royalty_event
from empowered_camps.server.core.config import settings

logger = get_logger(__name__)

S = RoyaltyInvoiceStatus

ALLOWED_TRANSITIONS: Dict[RoyaltyInvoiceStatus, frozenset] = {
    S.pending: frozenset({S.invoiced, S.waived}),
    S.invoiced: frozenset({S.paid, S.overdue, S.disputed, S.waived}),
    S.overdue: frozenset({S.paid, S.disputed, S.waived}),
    S.disputed: frozenset({S.invoiced, S.paid, S.waived}),
    S.paid: frozenset(),
    S.waived: frozenset(),
}

LOCKED_STATUSES = (S.paid, S.waived)
NOTE_SEPARATOR = "\n---\n"

_BASE36 = string.digits + string.ascii_uppercase


def can_transition(current: RoyaltyInvoiceStatus, new: RoyaltyInvoiceStatus) -> bool:
    return current == new or new in ALLOWED_TRANSITIONS[current]


def to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def invoice_number(tenant_slug: str, camp_id: Optional[str], timestamp_ms: Optional[int] = None) -> str:
    """``ESC-{first 6 alphanumerics of slug}-{first 4 of camp id or GEN}-{base36 millis}``, all uppercase."""
    tenant_part = re.sub(r"[^A-Za-z0-9]", "", tenant_slug)[:6].upper()
    camp_part = camp_id[:4].upper() if camp_id else "GEN"
    millis = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    return f"ESC-{tenant_part}-{camp_part}-{to_base36(millis)}"


def royalty_rate_bps(tenant: Tenant) -> int:
    """Tenant's fractional rate in basis points; the configured default when unset."""
    if tenant.royalty_rate is None:
        return settings.royalty.default_rate_bps
    return round_cents(tenant.royalty_rate * 10000)


def append_note(existing: Optional[str], note: str, when: datetime) -> str:
    entry = f"[{when.isoformat()}] {note}"
    return f"{existing}{NOTE_SEPARATOR}{entry}" if existing else entry


def compliance_rate(paid: int, total: int) -> int:
    return round_cents(paid / total * 100) if total else 100


def summarize(invoices: Iterable[RoyaltyInvoice]) -> Dict[str, Any]:
    """Totals and status counts across ``invoices``."""
    invoices = list(invoices)
    counts = {status.value: 0 for status in RoyaltyInvoiceStatus}
    for invoice in invoices:
        counts[invoice.status.value] += 1
    open_invoices = [i for i in invoices if i.status not in LOCKED_STATUSES]
    return {
        "total_gross_revenue_cents": sum(i.gross_revenue_cents for i in invoices),
        "total_royalty_due_cents": sum(i.royalty_due_cents for i in invoices),
        "total_royalty_paid_cents": sum(i.paid_amount_cents or 0 for i in invoices if i.status == S.paid),
        "total_outstanding_cents": sum(i.royalty_due_cents for i in open_invoices),
        "invoices_count": len(invoices),
        "status_counts": counts,
        "compliance_rate": compliance_rate(counts[S.paid.value], len(invoices)),
    }


class RoyaltyService:
    """Royalty invoice generation, reporting and status management."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.invoices = RoyaltyInvoiceRepository(session)
        self.camps = CampRepository(session)
        self.tenants = TenantRepository(session)
        self.registrations = RegistrationRepository(session)
        self.athletes = AthleteRepository(session)
        self.addons = AddonRepository(session)

    async def generate_invoice_for_camp(
        self, camp_id: str, due_in_days: Optional[int] = None, user_id: Optional[str] = None
    ) -> RoyaltyInvoice:
        """
        Build (or rebuild) the royalty invoice of one camp session.

        Raises:
            NotFoundError: Unknown camp or tenant.
            BadRequestError: The camp has no tenant, or its invoice is already paid or waived.
        """
        camp = await self.camps.get_by_id(camp_id)
        if camp is None:
            raise NotFoundError("Camp not found")
        if not camp.tenant_id:
            raise BadRequestError("Camp has no licensee")
        tenant = await self.tenants.get_by_id(camp.tenant_id)
        if tenant is None:
            raise NotFoundError("Licensee not found")

        existing = await self.invoices.get_by_camp(camp_id)
        adjustment_cents, adjustment_notes = 0, None
        if existing is not None:
            if existing.status in LOCKED_STATUSES:
                raise BadRequestError("An active royalty invoice already exists for this camp")
            # Manual adjustments survive regeneration
            adjustment_cents, adjustment_notes = existing.adjustment_cents, existing.adjustment_notes
            await self.invoices.delete_with_items(existing)

        registrations = await self.registrations.confirmed_for_camp(camp_id)
        ids = [r.id for r in registrations]
        addon_rows = await self.registrations.addons_for(ids)
        names = await self.athletes.names_by_id([r.athlete_id for r in registrations])
        addon_ids = {row.addon_id for rows in addon_rows.values() for row in rows}
        addon_names = {a.id: a.name for a in await self.addons.get_many(list(addon_ids))}
        variant_ids = [row.variant_id for rows in addon_rows.values() for row in rows if row.variant_id]
        variants = await self.addons.variants_by_id(variant_ids)

        line_items: List[RoyaltyLineItem] = []
        registration_revenue = addon_revenue = 0
        for registration in registrations:
            athlete = names.get(registration.athlete_id, "Camper")
            camp_amount = registration.total_price_cents - registration.addons_total_cents
            registration_revenue += camp_amount
            line_items.append(
                RoyaltyLineItem(
                    invoice_id="",
                    registration_id=registration.id,
                    item_type="registration",
                    description=f"Registration: {athlete}",
                    quantity=1,
                    unit_price_cents=camp_amount,
                    total_cents=camp_amount,
                )
            )
            for row in addon_rows.get(registration.id, []):
                addon_revenue += row.price_cents
                label = addon_names.get(row.addon_id, "Add-on")
                variant = variants.get(row.variant_id) if row.variant_id else None
                if variant is not None:
                    label = f"{label} ({variant.name})"
                line_items.append(
                    RoyaltyLineItem(
                        invoice_id="",
                        registration_id=registration.id,
                        item_type="addon",
                        description=f"{label} - {athlete}",
                        quantity=row.quantity,
                        unit_price_cents=round_cents(row.price_cents / row.quantity) if row.quantity else 0,
                        total_cents=row.price_cents,
                    )
                )

        gross = registration_revenue + addon_revenue
        refunds = 0
        net = gross - refunds
        rate_bps = royalty_rate_bps(tenant)
        royalty_due = bps_of(net, rate_bps)
        now = utc_now()
        days = due_in_days if due_in_days is not None else settings.royalty.due_in_days

        invoice = await self.invoices.create(
            RoyaltyInvoice(
                tenant_id=tenant.id,
                camp_id=camp.id,
                invoice_number=invoice_number(tenant.slug, camp.id),
                period_start=camp.start_date,
                period_end=camp.end_date,
                period_type="camp_session",
                registration_revenue_cents=registration_revenue,
                addon_revenue_cents=addon_revenue,
                gross_revenue_cents=gross,
                refunds_cents=refunds,
                net_revenue_cents=net,
                royalty_rate_bps=rate_bps,
                royalty_due_cents=royalty_due,
                adjustment_cents=adjustment_cents,
                adjustment_notes=adjustment_notes,
                total_due_cents=royalty_due + adjustment_cents,
                status=S.invoiced,
                generated_at=now,
                generated_by_user_id=user_id,
                due_date=now + timedelta(days=days),
            ),
            commit=False,
        )
        for item in line_items:
            item.invoice_id = invoice.id
        await self.invoices.add_line_items(line_items)
        await self.session.commit()
        await self.session.refresh(invoice)

        log_royalty_event("generated", invoice.id, camp_id=camp.id, royalty_due_cents=royalty_due)
        logger.info(f"Generated royalty invoice {invoice.invoice_number} for camp {camp.id}: {royalty_due} cents due")
        return invoice

    async def update_status(
        self,
        invoice_id: str,
        status: RoyaltyInvoiceStatus,
        user_id: Optional[str] = None,
        notes: Optional[str] = None,
        paid_amount_cents: Optional[int] = None,
        payment_method: Optional[str] = None,
        payment_reference: Optional[str] = None,
    ) -> RoyaltyInvoice:
        """Move an invoice to ``status``, applying the side effects of the target status."""
        invoice = await self.invoices.get_by_id(invoice_id)
        if invoice is None:
            raise NotFoundError("Invoice not found")
        current = invoice.status
        if not can_transition(current, status):
            raise BadRequestError(f"Cannot change invoice status from {current.value} to {status.value}")

        now = utc_now()
        if status == S.paid and current != S.paid:
            invoice.paid_at = now
            invoice.paid_amount_cents = paid_amount_cents if paid_amount_cents is not None else invoice.total_due_cents
            invoice.paid_by_user_id = user_id
            invoice.payment_method = payment_method
            invoice.payment_reference = payment_reference
        if current == S.disputed and status != S.disputed:
            invoice.resolved_at = now

        if status == S.disputed and notes:
            invoice.dispute_reason = notes
            invoice.disputed_at = now
        elif notes:
            invoice.notes = append_note(invoice.notes, notes, now)

        invoice.status = status
        invoice = await self.invoices.update(invoice)
        log_royalty_event("status_change", invoice.id, from_status=current.value, to_status=status.value)
        return invoice

    async def add_adjustment(
        self, invoice_id: str, adjustment_cents: int, notes: str, user_id: Optional[str] = None
    ) -> RoyaltyInvoice:
        """
        Add a signed manual adjustment to an open invoice.

        The total due becomes the royalty due plus every adjustment so far, and
        a dated line is appended to the adjustment notes.

        Raises:
            NotFoundError: Unknown invoice.
            BadRequestError: The invoice is paid or waived.
        """
        invoice = await self.invoices.get_by_id(invoice_id)
        if invoice is None:
            raise NotFoundError("Invoice not found")
        if invoice.status in LOCKED_STATUSES:
            raise BadRequestError("Cannot adjust a paid or waived invoice")

        invoice.adjustment_cents += adjustment_cents
        invoice.total_due_cents = invoice.royalty_due_cents + invoice.adjustment_cents
        sign = "+" if adjustment_cents >= 0 else ""
        note = f"Adjustment: {sign}{format_dollars(adjustment_cents)} - {notes}"
        if user_id:
            note = f"{note} (by {user_id})"
        invoice.adjustment_notes = append_note(invoice.adjustment_notes, note, utc_now())
        invoice = await self.invoices.update(invoice)
        log_royalty_event(
            "adjusted", invoice.id, adjustment_cents=adjustment_cents, total_due_cents=invoice.total_due_cents
        )
        return invoice

    async def mark_overdue(self) -> int:
        """Invoiced invoices past their due date become overdue; returns how many changed."""
        now = utc_now()
        overdue = await self.invoices.due_before(S.invoiced, now)
        for invoice in overdue:
            invoice.status = S.overdue
            await self.invoices.update(invoice, commit=False)
        await self.session.commit()
        if overdue:
            log_royalty_event("marked_overdue", count=len(overdue))
        return len(overdue)

    async def bulk_generate(
        self, camp_ids: Sequence[str], due_in_days: Optional[int] = None, user_id: Optional[str] = None
    ) -> Dict[str, Any]:
        success = failed = 0
        errors: List[str] = []
        for camp_id in camp_ids:
            try:
                await self.generate_invoice_for_camp(camp_id, due_in_days, user_id)
                success += 1
            except (BadRequestError, NotFoundError) as e:
                await self.session.rollback()
                failed += 1
                errors.append(f"{camp_id}: {e.message}")
        return {"success": success, "failed": failed, "errors": errors}

    async def camps_without_invoices(self) -> List[Dict[str, Any]]:
        camps = await self.camps.completed_without_invoice()
        tenants = {t.id: t.name for t in await self.tenants.get_many([c.tenant_id for c in camps if c.tenant_id])}
        result = []
        for camp in camps:
            confirmed = await self.registrations.confirmed_for_camp(camp.id)
            result.append(
                {
                    "id": camp.id,
                    "name": camp.name,
                    "tenant_id": camp.tenant_id,
                    "tenant_name": tenants.get(camp.tenant_id, "Unknown Tenant"),
                    "start_date": camp.start_date.isoformat(),
                    "end_date": camp.end_date.isoformat(),
                    "status": camp.status.value,
                    "registration_count": len(confirmed),
                    "estimated_revenue_cents": sum(r.total_price_cents for r in confirmed),
                }
            )
        return result

    async def list_invoices(
        self,
        status: Optional[RoyaltyInvoiceStatus] = None,
        tenant_id: Optional[str] = None,
        due_from: Optional[datetime] = None,
        due_to: Optional[datetime] = None,
        search: Optional[str] = None,
        sort_by: str = "due_date",
        sort_order: str = "desc",
        limit: int = 50,
        offset: int = 0,
    ) -> Dict[str, Any]:
        rows, total = await self.invoices.search(
            status, tenant_id, as_utc(due_from), as_utc(due_to), search, sort_by, sort_order, limit, offset
        )
        items = [
            RoyaltyInvoiceRead.model_validate(invoice).model_copy(
                update={"tenant_name": tenant_name, "camp_name": camp_name}
            )
            for invoice, tenant_name, camp_name in rows
        ]
        return {"items": [item.model_dump(mode="json") for item in items], "total_count": total}

    async def get_invoice(self, invoice_id: str) -> RoyaltyInvoiceRead:
        invoice = await self.invoices.get_by_id(invoice_id)
        if invoice is None:
            raise NotFoundError("Invoice not found")
        tenant = await self.tenants.get_by_id(invoice.tenant_id)
        camp = await self.camps.get_by_id(invoice.camp_id) if invoice.camp_id else None
        items = await self.invoices.line_items(invoice.id)
        return RoyaltyInvoiceRead.model_validate(invoice).model_copy(
            update={
                "tenant_name": tenant.name if tenant else None,
                "camp_name": camp.name if camp else None,
                "line_items": [RoyaltyLineItemRead.model_validate(item) for item in items],
            }
        )

    async def summary(self, tenant_id: Optional[str] = None) -> Dict[str, Any]:
        return summarize(await self.invoices.all_for(tenant_id))

    async def licensee_summary(self) -> List[Dict[str, Any]]:
        """Per-licensee camp, invoice and royalty totals for active licensees."""
        tenants = await self.tenants.search(status=LicenseStatus.active)
        invoices_by_tenant: Dict[str, List[RoyaltyInvoice]] = defaultdict(list)
        for invoice in await self.invoices.all_for():
            invoices_by_tenant[invoice.tenant_id].append(invoice)

        result = []
        for tenant in tenants:
            invoices = invoices_by_tenant.get(tenant.id, [])
            totals = summarize(invoices)
            result.append(
                {
                    "id": tenant.id,
                    "name": tenant.name,
                    "slug": tenant.slug,
                    "camps": len({i.camp_id for i in invoices if i.camp_id}),
                    "invoices": totals["invoices_count"],
                    "gross_revenue_cents": totals["total_gross_revenue_cents"],
                    "royalty_due_cents": totals["total_royalty_due_cents"],
                    "royalty_paid_cents": totals["total_royalty_paid_cents"],
                    "outstanding_cents": totals["total_outstanding_cents"],
                    "compliance_rate": totals["compliance_rate"],
                }
            )
        return result

    async def run_scheduled(self) -> Dict[str, Any]:
        """Daily job: invoice finished camps, flag overdue invoices, count invoices due soon."""
        camps = await self.camps_without_invoices()
        generated = await self.bulk_generate([camp["id"] for camp in camps])
        marked = await self.mark_overdue()
        now = utc_now()
        due_soon = await self.invoices.count_due_between(
            now, now + timedelta(days=settings.royalty.reminder_window_days)
        )
        logger.info(
            f"Royalty job: generated={generated['success']} failed={generated['failed']} "
            f"overdue={marked} due_soon={due_soon}"
        )
        return {
            "invoices_generated": generated["success"],
            "invoices_failed": generated["failed"],
            "invoices_marked_overdue": marked,
            "due_soon_reminders": due_soon,
            "errors": generated["errors"],
        }
