"""
Royalty invoice repository.

Listing supports the admin report filters: status, tenant, due-date window
and a free-text search over invoice number, tenant name and camp name.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional, Sequence, Tuple

from sqlalchemy import delete, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from empowered_camps.core.models.domain.enums import RoyaltyInvoiceStatus

from ..entities.camps import Camp
from ..entities.royalties import RoyaltyInvoice, RoyaltyLineItem
from ..entities.tenants import Tenant
from .base import QueryBuilder, SQLModelRepository

SORT_COLUMNS = {
    "due_date": RoyaltyInvoice.due_date,
    "generated_at": RoyaltyInvoice.generated_at,
    "gross_revenue": RoyaltyInvoice.gross_revenue_cents,
    "royalty_amount": RoyaltyInvoice.royalty_due_cents,
    "status": RoyaltyInvoice.status,
}


class RoyaltyInvoiceRepository(SQLModelRepository[RoyaltyInvoice]):
    """Repository for royalty invoices and their line items."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, RoyaltyInvoice)

    async def get_by_camp(self, camp_id: str) -> Optional[RoyaltyInvoice]:
        stmt = select(RoyaltyInvoice).where(RoyaltyInvoice.camp_id == camp_id)
        result = await self.session.execute(stmt.order_by(col(RoyaltyInvoice.generated_at).desc()))
        return result.scalars().first()

    async def delete_with_items(self, invoice: RoyaltyInvoice) -> None:
        """Remove an invoice and its line items without committing."""
        await self.session.execute(delete(RoyaltyLineItem).where(col(RoyaltyLineItem.invoice_id) == invoice.id))
        await self.session.delete(invoice)
        await self.session.flush()

    async def add_line_items(self, items: Sequence[RoyaltyLineItem]) -> None:
        self.session.add_all(list(items))
        await self.session.flush()

    async def line_items(self, invoice_id: str) -> List[RoyaltyLineItem]:
        stmt = select(RoyaltyLineItem).where(RoyaltyLineItem.invoice_id == invoice_id)
        result = await self.session.execute(stmt.order_by(RoyaltyLineItem.created_at))
        return list(result.scalars().all())

    def _filtered(
        self,
        status: Optional[RoyaltyInvoiceStatus] = None,
        tenant_id: Optional[str] = None,
        due_from: Optional[datetime] = None,
        due_to: Optional[datetime] = None,
        search: Optional[str] = None,
    ):
        stmt = (
            select(RoyaltyInvoice, Tenant.name, Camp.name)
            .join(Tenant, col(Tenant.id) == col(RoyaltyInvoice.tenant_id))
            .outerjoin(Camp, col(Camp.id) == col(RoyaltyInvoice.camp_id))
        )
        stmt = QueryBuilder.apply_filters(stmt, RoyaltyInvoice, {"status": status, "tenant_id": tenant_id})
        if due_from is not None:
            stmt = stmt.where(RoyaltyInvoice.due_date >= due_from)
        if due_to is not None:
            stmt = stmt.where(RoyaltyInvoice.due_date <= due_to)
        if search:
            pattern = f"%{search.strip().lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(RoyaltyInvoice.invoice_number).like(pattern),
                    func.lower(Tenant.name).like(pattern),
                    func.lower(Camp.name).like(pattern),
                )
            )
        return stmt

    async def search(
        self,
        status: Optional[RoyaltyInvoiceStatus] = None,
        tenant_id: Optional[str] = None,
        due_from: Optional[datetime] = None,
        due_to: Optional[datetime] = None,
        search: Optional[str] = None,
        sort_by: str = "due_date",
        sort_order: str = "desc",
        limit: Optional[int] = 50,
        offset: Optional[int] = 0,
    ) -> Tuple[List[Tuple[RoyaltyInvoice, str, Optional[str]]], int]:
        """Return ``(invoice, tenant_name, camp_name)`` rows for one page plus the total match count."""
        stmt = self._filtered(status, tenant_id, due_from, due_to, search)
        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = int((await self.session.execute(count_stmt)).scalar_one())

        sort_column: Any = SORT_COLUMNS.get(sort_by, RoyaltyInvoice.due_date)
        stmt = stmt.order_by(sort_column.asc() if sort_order == "asc" else sort_column.desc())
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return [(row[0], row[1], row[2]) for row in result.all()], total

    async def all_for(self, tenant_id: Optional[str] = None) -> List[RoyaltyInvoice]:
        stmt = select(RoyaltyInvoice)
        stmt = QueryBuilder.apply_filters(stmt, RoyaltyInvoice, {"tenant_id": tenant_id})
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def in_period(self, start: datetime, end: datetime) -> List[RoyaltyInvoice]:
        """Invoices whose period lies within ``[start, end]``."""
        stmt = select(RoyaltyInvoice).where(
            RoyaltyInvoice.period_start >= start.date(),
            RoyaltyInvoice.period_end <= end.date(),
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def paid_between(self, start: datetime, end: datetime) -> List[RoyaltyInvoice]:
        stmt = select(RoyaltyInvoice).where(
            RoyaltyInvoice.status == RoyaltyInvoiceStatus.paid,
            RoyaltyInvoice.paid_at >= start,
            RoyaltyInvoice.paid_at <= end,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def due_before(self, status: RoyaltyInvoiceStatus, moment: datetime) -> List[RoyaltyInvoice]:
        stmt = select(RoyaltyInvoice).where(RoyaltyInvoice.status == status, RoyaltyInvoice.due_date < moment)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_due_between(self, start: datetime, end: datetime) -> int:
        stmt = (
            select(func.count())
            .select_from(RoyaltyInvoice)
            .where(
                RoyaltyInvoice.status == RoyaltyInvoiceStatus.invoiced,
                RoyaltyInvoice.due_date >= start,
                RoyaltyInvoice.due_date <= end,
            )
        )
        return int((await self.session.execute(stmt)).scalar_one())
