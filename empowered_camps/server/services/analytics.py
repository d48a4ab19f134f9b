"""
Analytics Service.

HQ dashboard figures across all licensees: revenue, royalties, enrollment and
licensee counts. Amounts are reported in dollars; every query works on a
date range that defaults to the last 90 days.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Literal, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from empowered_camps.core.database.base import as_utc, utc_now
from empowered_camps.core.database.repositories import (
    CampRepository,
    RegistrationRepository,
    RoyaltyInvoiceRepository,
    TenantRepository,
)
from empowered_camps.core.errors import BadRequestError
from empowered_camps.core.logging_config import get_logger
from empowered_camps.core.models.domain.enums import LicenseStatus, RoyaltyInvoiceStatus

logger = get_logger(__name__)

DEFAULT_RANGE_DAYS = 90

Granularity = Literal["day", "week", "month"]


def date_range(start: Optional[datetime] = None, end: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Inclusive reporting window in UTC; query values without an offset are read as UTC."""
    end = as_utc(end) or utc_now()
    start = as_utc(start) or end - timedelta(days=DEFAULT_RANGE_DAYS)
    if start > end:
        raise BadRequestError("'from' must be before 'to'")
    return start, end


def dollars(cents: int) -> float:
    return cents / 100


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0


def _paid_stats(invoices) -> Tuple[int, float]:
    """Paid royalty cents and the compliance rate (percent of invoices paid, 100 when none)."""
    paid = [i for i in invoices if i.status == RoyaltyInvoiceStatus.paid]
    paid_cents = sum(i.paid_amount_cents or 0 for i in paid)
    compliance = len(paid) / len(invoices) * 100 if invoices else 100
    return paid_cents, compliance


def period_start(day: date, granularity: Granularity) -> date:
    """First day of the bucket holding ``day``; weeks start on Sunday."""
    if granularity == "day":
        return day
    if granularity == "week":
        return day - timedelta(days=(day.weekday() + 1) % 7)
    return day.replace(day=1)


def period_label(start: date, granularity: Granularity) -> str:
    if granularity == "day":
        return f"{start.month}/{start.day}"
    if granularity == "week":
        return f"Week of {start.strftime('%b')} {start.day}"
    return start.strftime("%b %Y")


def _next_period(start: date, granularity: Granularity) -> date:
    if granularity == "day":
        return start + timedelta(days=1)
    if granularity == "week":
        return start + timedelta(days=7)
    if start.month == 12:
        return start.replace(year=start.year + 1, month=1)
    return start.replace(month=start.month + 1)


class AnalyticsService:
    """Aggregate reporting across licensees."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.registrations = RegistrationRepository(session)
        self.camps = CampRepository(session)
        self.invoices = RoyaltyInvoiceRepository(session)
        self.tenants = TenantRepository(session)

    async def overview(self, start: Optional[datetime] = None, end: Optional[datetime] = None) -> Dict[str, Any]:
        start, end = date_range(start, end)
        registrations = await self.registrations.confirmed_between(start, end)
        sessions = await self.camps.held_between(start.date(), end.date())
        invoices = await self.invoices.in_period(start, end)

        gross = dollars(sum(r.total_price_cents for r in registrations))
        campers = len(registrations)
        paid_cents, compliance = _paid_stats(invoices)

        return {
            "total_system_gross_revenue": gross,
            "total_royalty_income": dollars(paid_cents),
            "expected_royalty_income": dollars(sum(i.royalty_due_cents for i in invoices)),
            "royalty_compliance_rate": compliance,
            "average_revenue_per_camper": _ratio(gross, campers),
            "sessions_held": len(sessions),
            "total_campers": campers,
            "average_enrollment_per_session": _ratio(campers, len(sessions)),
            "active_licensees": await self.tenants.count({"license_status": LicenseStatus.active}),
            "new_licenses_signed": await self.tenants.count_created_between(start, end),
        }

    async def licensee_breakdown(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> List[Dict[str, Any]]:
        """Per active licensee figures, highest revenue first."""
        start, end = date_range(start, end)
        tenants = await self.tenants.search(status=LicenseStatus.active)

        registrations = defaultdict(list)
        for registration in await self.registrations.confirmed_between(start, end):
            registrations[registration.tenant_id].append(registration)
        sessions = defaultdict(int)
        for camp in await self.camps.held_between(start.date(), end.date()):
            sessions[camp.tenant_id] += 1
        invoices = defaultdict(list)
        for invoice in await self.invoices.in_period(start, end):
            invoices[invoice.tenant_id].append(invoice)

        items = []
        for tenant in tenants:
            tenant_registrations = registrations.get(tenant.id, [])
            tenant_invoices = invoices.get(tenant.id, [])
            revenue = dollars(sum(r.total_price_cents for r in tenant_registrations))
            campers = len(tenant_registrations)
            held = sessions.get(tenant.id, 0)
            paid_cents, compliance = _paid_stats(tenant_invoices)
            items.append(
                {
                    "licensee_id": tenant.id,
                    "licensee_name": tenant.name,
                    "territory_name": tenant.territory_name,
                    "revenue": revenue,
                    "sessions_held": held,
                    "total_campers": campers,
                    "average_enrollment_per_session": _ratio(campers, held),
                    "royalty_due": dollars(sum(i.royalty_due_cents for i in tenant_invoices)),
                    "royalty_paid": dollars(paid_cents),
                    "royalty_compliance_rate": compliance,
                    "average_revenue_per_camper": _ratio(revenue, campers),
                }
            )
        items.sort(key=lambda item: item["revenue"], reverse=True)
        return items

    async def revenue_trends(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        granularity: Granularity = "month",
    ) -> List[Dict[str, Any]]:
        """Gross revenue, campers and royalty income bucketed by day, week or month."""
        if granularity not in ("day", "week", "month"):
            raise BadRequestError("granularity must be one of day, week, month")
        start, end = date_range(start, end)

        buckets: Dict[date, Dict[str, Any]] = {}
        cursor = period_start(start.date(), granularity)
        while cursor <= end.date():
            buckets[cursor] = {
                "period_start": cursor.isoformat(),
                "period_label": period_label(cursor, granularity),
                "revenue_cents": 0,
                "royalty_income_cents": 0,
                "campers": 0,
            }
            cursor = _next_period(cursor, granularity)

        for registration in await self.registrations.confirmed_between(start, end):
            bucket = buckets.get(period_start(registration.created_at.date(), granularity))
            if bucket is not None:
                bucket["revenue_cents"] += registration.total_price_cents
                bucket["campers"] += 1
        for invoice in await self.invoices.paid_between(start, end):
            bucket = buckets.get(period_start(invoice.paid_at.date(), granularity))
            if bucket is not None:
                bucket["royalty_income_cents"] += invoice.paid_amount_cents or 0

        points = []
        for key in sorted(buckets):
            bucket = buckets[key]
            revenue = dollars(bucket.pop("revenue_cents"))
            bucket["revenue"] = revenue
            bucket["royalty_income"] = dollars(bucket.pop("royalty_income_cents"))
            bucket["average_revenue_per_camper"] = _ratio(revenue, bucket["campers"])
            points.append(bucket)
        logger.debug(f"Revenue trends: {len(points)} {granularity} buckets from {start:%Y-%m-%d} to {end:%Y-%m-%d}")
        return points
