"""
Registration entities.

A registration is one athlete enrolled in one camp. All money columns are
integer cents and ``total_price_cents`` always equals
``base - discount - promo_discount + addons_total + tax``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from empowered_camps.core.models.domain.enums import PaymentStatus, RegistrationStatus

from ..base import Base, UTCDateTime, new_id, utc_now


class Registration(Base, table=True):
    """Camp enrollment of a single athlete.

    Table: registrations
    """

    __tablename__ = "registrations"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    tenant_id: str = Field(foreign_key="tenants.id", index=True)
    camp_id: str = Field(foreign_key="camps.id", index=True)
    athlete_id: str = Field(foreign_key="athletes.id", index=True)
    parent_id: str = Field(foreign_key="profiles.id", index=True)

    status: RegistrationStatus = Field(default=RegistrationStatus.pending)
    payment_status: PaymentStatus = Field(default=PaymentStatus.pending)

    base_price_cents: int = Field(default=0)
    discount_cents: int = Field(default=0)
    promo_discount_cents: int = Field(default=0)
    addons_total_cents: int = Field(default=0)
    tax_cents: int = Field(default=0)
    total_price_cents: int = Field(default=0)
    promo_code_id: Optional[str] = Field(default=None, foreign_key="promo_codes.id", index=True)

    payment_method: Optional[str] = Field(default=None)
    stripe_payment_intent_id: Optional[str] = Field(default=None, index=True)
    stripe_checkout_session_id: Optional[str] = Field(default=None, index=True)
    paid_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    refund_amount_cents: int = Field(default=0)
    refunded_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    cancellation_reason: Optional[str] = Field(default=None)

    shirt_size: Optional[str] = Field(default=None)
    special_considerations: Optional[str] = Field(default=None)

    waitlist_position: Optional[int] = Field(default=None, description="1-based place in line while waitlisted")
    waitlist_joined_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    waitlist_offer_token: Optional[str] = Field(default=None, index=True)
    waitlist_offer_sent_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    waitlist_offer_expires_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=UTCDateTime)

    def computed_total(self, addons_total_cents: Optional[int] = None) -> int:
        addons = self.addons_total_cents if addons_total_cents is None else addons_total_cents
        return self.base_price_cents - self.discount_cents - self.promo_discount_cents + addons + self.tax_cents

    def __repr__(self) -> str:
        return f"Registration(id={self.id}, status={self.status}, total={self.total_price_cents})"


class RegistrationAddon(Base, table=True):
    """Add-on purchased with a registration; ``price_cents`` is the line total.

    Table: registration_addons
    """

    __tablename__ = "registration_addons"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    registration_id: str = Field(foreign_key="registrations.id", index=True)
    addon_id: str = Field(foreign_key="addons.id")
    variant_id: Optional[str] = Field(default=None, foreign_key="addon_variants.id")
    quantity: int = Field(default=1, ge=1)
    price_cents: int = Field(default=0)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
