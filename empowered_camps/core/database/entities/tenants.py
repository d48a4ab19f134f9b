"""
Tenant (licensee) entity.

A tenant is a franchise territory account. Every camp, registration, promo
code and royalty invoice belongs to exactly one tenant.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from empowered_camps.core.models.domain.enums import LicenseStatus

from ..base import Base, UTCDateTime, new_id, utc_now


class TenantBase(Base):
    """Base fields for a licensee territory."""

    name: str = Field(description="Display name of the licensee")
    slug: str = Field(index=True, unique=True, description="URL-safe unique identifier")
    contact_email: Optional[str] = Field(default=None)
    contact_phone: Optional[str] = Field(default=None)
    city: Optional[str] = Field(default=None)
    state: Optional[str] = Field(default=None)
    territory_name: Optional[str] = Field(default=None)
    license_status: LicenseStatus = Field(default=LicenseStatus.active)
    royalty_rate: Optional[float] = Field(
        default=None, ge=0.0, le=1.0, description="Royalty as a fraction of net revenue (0.10 = 10%)"
    )
    tax_rate_percent: Optional[float] = Field(
        default=None, ge=0.0, le=100.0, description="Sales tax applied to taxable add-ons"
    )
    stripe_account_id: Optional[str] = Field(default=None)


class Tenant(TenantBase, table=True):
    """Licensee account.

    Table: tenants
    """

    __tablename__ = "tenants"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=UTCDateTime)

    def __repr__(self) -> str:
        return f"Tenant(slug={self.slug}, status={self.license_status})"
