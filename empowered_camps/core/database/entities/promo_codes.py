"""
Promo code entity.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from empowered_camps.core.models.domain.enums import DiscountType, PromoAppliesTo
from empowered_camps.core.money import percent_of

from ..base import Base, UTCDateTime, new_id, utc_now


class PromoCode(Base, table=True):
    """Tenant-scoped discount code. Codes are stored uppercased and unique per tenant.

    Table: promo_codes
    """

    __tablename__ = "promo_codes"
    __table_args__ = (UniqueConstraint("tenant_id", "code", name="uq_promo_codes_tenant_code"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    tenant_id: str = Field(foreign_key="tenants.id", index=True)
    code: str = Field(index=True)
    description: Optional[str] = Field(default=None)
    discount_type: DiscountType
    discount_value: int = Field(ge=0, description="Percent for percentage codes, cents for fixed codes")
    applies_to: PromoAppliesTo = Field(default=PromoAppliesTo.both)
    max_uses: Optional[int] = Field(default=None)
    valid_from: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    valid_until: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=UTCDateTime)

    def discount_for(self, base_cents: int) -> int:
        """Discount this code grants on ``base_cents``."""
        if self.discount_type == DiscountType.percentage:
            return percent_of(base_cents, self.discount_value)
        return min(self.discount_value, base_cents)
