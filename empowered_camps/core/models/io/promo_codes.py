"""
Promo code I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from empowered_camps.core.models.domain.enums import DiscountType, PromoAppliesTo


class PromoCodeRead(BaseModel):
    """Promo code as returned by the API, with its usage count."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    code: str
    description: Optional[str] = None
    discount_type: DiscountType
    discount_value: int
    applies_to: PromoAppliesTo
    max_uses: Optional[int] = None
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    is_active: bool
    usage_count: int = 0
    created_at: datetime
    updated_at: datetime


class PromoCodeCreate(BaseModel):
    """Required fields are checked by the service, which names all of them in one 400 error."""

    tenant_id: Optional[str] = None
    code: Optional[str] = None
    description: Optional[str] = None
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[int] = Field(default=None, ge=0)
    applies_to: PromoAppliesTo = PromoAppliesTo.both
    max_uses: Optional[int] = Field(default=None, ge=1)
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    is_active: bool = True


class PromoCodeUpdate(BaseModel):
    promo_code_id: str
    description: Optional[str] = None
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[int] = Field(default=None, ge=0)
    applies_to: Optional[PromoAppliesTo] = None
    max_uses: Optional[int] = Field(default=None, ge=1)
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    is_active: Optional[bool] = None


class PromoCodeList(BaseModel):
    promo_codes: List[PromoCodeRead]


class PromoCodeDeleteResult(BaseModel):
    success: bool = True
    message: str
