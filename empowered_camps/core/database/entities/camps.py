"""
Camp session and add-on catalogue entities.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlmodel import Field

from empowered_camps.core.models.domain.enums import CampStatus

from ..base import Base, UTCDateTime, new_id, utc_now


class CampBase(Base):
    """Base fields for a camp session."""

    tenant_id: Optional[str] = Field(default=None, foreign_key="tenants.id", index=True)
    name: str
    description: Optional[str] = Field(default=None)
    program_type: str = Field(default="sports_camp")
    start_date: date
    end_date: date
    daily_start_time: Optional[str] = Field(default=None, description="HH:MM")
    daily_end_time: Optional[str] = Field(default=None, description="HH:MM")
    location_name: Optional[str] = Field(default=None)
    capacity: Optional[int] = Field(default=None, ge=0)
    price_cents: int = Field(default=0, ge=0)
    early_bird_price_cents: Optional[int] = Field(default=None, ge=0)
    early_bird_deadline: Optional[date] = Field(default=None)
    min_age: Optional[int] = Field(default=None)
    max_age: Optional[int] = Field(default=None)
    status: CampStatus = Field(default=CampStatus.draft)


class Camp(CampBase, table=True):
    """A scheduled camp session.

    Table: camps
    """

    __tablename__ = "camps"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=UTCDateTime)

    def price_on(self, day: date) -> int:
        """Early-bird price applies strictly before its deadline."""
        early_bird = self.early_bird_price_cents is not None and self.early_bird_deadline is not None
        if early_bird and day < self.early_bird_deadline:
            return self.early_bird_price_cents
        return self.price_cents

    def __repr__(self) -> str:
        return f"Camp(name={self.name}, start={self.start_date}, status={self.status})"


class Addon(Base, table=True):
    """Purchasable extra offered during registration (t-shirt, lunch, ...).

    Table: addons
    """

    __tablename__ = "addons"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    tenant_id: Optional[str] = Field(default=None, foreign_key="tenants.id", index=True)
    name: str
    description: Optional[str] = Field(default=None)
    price_cents: int = Field(default=0, ge=0)
    is_taxable: bool = Field(default=False)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)


class AddonVariant(Base, table=True):
    """Size or flavour of an add-on.

    Table: addon_variants
    """

    __tablename__ = "addon_variants"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    addon_id: str = Field(foreign_key="addons.id", index=True)
    name: str
    price_override_cents: Optional[int] = Field(default=None)
