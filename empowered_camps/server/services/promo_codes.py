"""
Promo Code Service.

Tenant-scoped discount codes. Codes are stored uppercased; a code that has
been used by a registration is deactivated instead of deleted.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from empowered_camps.core.database.base import apply_changes
from empowered_camps.core.database.entities.promo_codes import PromoCode
from empowered_camps.core.database.repositories import PromoCodeRepository, RegistrationRepository
from empowered_camps.core.errors import BadRequestError, NotFoundError
from empowered_camps.core.logging_config import get_logger
from empowered_camps.core.models.domain.enums import DiscountType
from empowered_camps.core.models.io.promo_codes import (
    PromoCodeCreate,
    PromoCodeDeleteResult,
    PromoCodeRead,
    PromoCodeUpdate,
)

logger = get_logger(__name__)

MAX_PERCENTAGE = 100


def _check_discount(discount_type: DiscountType, discount_value: int) -> None:
    if discount_type == DiscountType.percentage and discount_value > MAX_PERCENTAGE:
        raise BadRequestError("Percentage discounts cannot exceed 100")


class PromoCodeService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.promo_codes = PromoCodeRepository(session)
        self.registrations = RegistrationRepository(session)

    async def _read(self, promo: PromoCode, usage_count: Optional[int] = None) -> PromoCodeRead:
        if usage_count is None:
            usage_count = (await self.registrations.usage_counts([promo.id])).get(promo.id, 0)
        return PromoCodeRead.model_validate(promo).model_copy(update={"usage_count": usage_count})

    async def list(self, tenant_id: Optional[str] = None, active_only: bool = False) -> List[PromoCodeRead]:
        codes = await self.promo_codes.search(tenant_id, active_only)
        usage = await self.registrations.usage_counts([promo.id for promo in codes])
        return [await self._read(promo, usage.get(promo.id, 0)) for promo in codes]

    async def create(self, payload: PromoCodeCreate) -> PromoCodeRead:
        if not payload.tenant_id or not payload.code or payload.discount_type is None or payload.discount_value is None:
            raise BadRequestError("tenant_id, code, discount_type, and discount_value are required")
        _check_discount(payload.discount_type, payload.discount_value)
        code = payload.code.strip().upper()
        if await self.promo_codes.get_by_code(payload.tenant_id, code) is not None:
            raise BadRequestError("A promo code with this code already exists")
        promo = await self.promo_codes.create(PromoCode(**payload.model_dump(exclude={"code"}), code=code))
        logger.info(f"Created promo code {promo.code} for tenant {promo.tenant_id}")
        return await self._read(promo, 0)

    async def _get(self, promo_code_id: str, tenant_id: Optional[str]) -> PromoCode:
        promo = await self.promo_codes.get_by_id(promo_code_id)
        if promo is None or (tenant_id is not None and promo.tenant_id != tenant_id):
            raise NotFoundError("Promo code not found")
        return promo

    async def update(self, payload: PromoCodeUpdate, tenant_id: Optional[str] = None) -> PromoCodeRead:
        promo = await self._get(payload.promo_code_id, tenant_id)
        changes = payload.model_dump(exclude_unset=True, exclude={"promo_code_id"})
        discount_value = changes.get("discount_value")
        _check_discount(
            changes.get("discount_type") or promo.discount_type,
            promo.discount_value if discount_value is None else discount_value,
        )
        apply_changes(promo, changes)
        return await self._read(await self.promo_codes.update(promo))

    async def delete(self, promo_code_id: str, tenant_id: Optional[str] = None) -> PromoCodeDeleteResult:
        promo = await self._get(promo_code_id, tenant_id)
        usage = (await self.registrations.usage_counts([promo.id])).get(promo.id, 0)
        if usage > 0:
            promo.is_active = False
            await self.promo_codes.update(promo)
            return PromoCodeDeleteResult(message="Promo code deactivated (has been used)")
        await self.promo_codes.delete(promo.id)
        return PromoCodeDeleteResult(message="Promo code deleted")
