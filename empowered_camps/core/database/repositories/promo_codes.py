"""
Promo code repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from ..entities.promo_codes import PromoCode
from .base import QueryBuilder, SQLModelRepository


class PromoCodeRepository(SQLModelRepository[PromoCode]):
    """Repository for tenant promo codes."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PromoCode)

    async def get_by_code(self, tenant_id: str, code: str, active_only: bool = False) -> Optional[PromoCode]:
        """Look up a code within a tenant; codes are matched uppercased."""
        stmt = select(PromoCode).where(PromoCode.tenant_id == tenant_id, PromoCode.code == code.strip().upper())
        if active_only:
            stmt = stmt.where(PromoCode.is_active == True)  # noqa: E712
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def search(self, tenant_id: Optional[str] = None, active_only: bool = False) -> List[PromoCode]:
        """Codes newest first."""
        stmt = select(PromoCode)
        stmt = QueryBuilder.apply_filters(stmt, PromoCode, {"tenant_id": tenant_id})
        if active_only:
            stmt = stmt.where(PromoCode.is_active == True)  # noqa: E712
        result = await self.session.execute(stmt.order_by(col(PromoCode.created_at).desc()))
        return list(result.scalars().all())
