"""
Licensee and camp I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from empowered_camps.core.models.domain.enums import CampStatus, LicenseStatus


class LicenseeRead(BaseModel):
    """Schema for reading a licensee (tenant) from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    territory_name: Optional[str] = None
    license_status: LicenseStatus
    royalty_rate: Optional[float] = Field(default=None, description="Fraction of net revenue (0.10 = 10%)")
    tax_rate_percent: Optional[float] = None
    stripe_account_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class LicenseeCreate(BaseModel):
    """Schema for creating a licensee."""

    name: str = Field(min_length=1, max_length=200)
    slug: str = Field(min_length=1, max_length=100, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    territory_name: Optional[str] = None
    royalty_rate: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    tax_rate_percent: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    stripe_account_id: Optional[str] = None


class LicenseeUpdate(BaseModel):
    """Schema for updating a licensee; only provided fields change."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    territory_name: Optional[str] = None
    license_status: Optional[LicenseStatus] = None
    royalty_rate: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    tax_rate_percent: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    stripe_account_id: Optional[str] = None


class CampRead(BaseModel):
    """Schema for reading a camp session."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    program_type: str
    start_date: date
    end_date: date
    daily_start_time: Optional[str] = None
    daily_end_time: Optional[str] = None
    location_name: Optional[str] = None
    capacity: Optional[int] = None
    price_cents: int
    early_bird_price_cents: Optional[int] = None
    early_bird_deadline: Optional[date] = None
    min_age: Optional[int] = None
    max_age: Optional[int] = None
    status: CampStatus
    created_at: datetime
    updated_at: datetime


class CampCreate(BaseModel):
    """Schema for creating a camp session. ``tenant_id`` is forced to the caller's tenant for non-HQ users."""

    tenant_id: Optional[str] = None
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    program_type: str = "sports_camp"
    start_date: date
    end_date: date
    daily_start_time: Optional[str] = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    daily_end_time: Optional[str] = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    location_name: Optional[str] = None
    capacity: Optional[int] = Field(default=None, ge=0)
    price_cents: int = Field(default=0, ge=0)
    early_bird_price_cents: Optional[int] = Field(default=None, ge=0)
    early_bird_deadline: Optional[date] = None
    min_age: Optional[int] = Field(default=None, ge=0)
    max_age: Optional[int] = Field(default=None, ge=0)
    status: CampStatus = CampStatus.draft


class CampUpdate(BaseModel):
    """Schema for updating a camp session."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    program_type: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    daily_start_time: Optional[str] = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    daily_end_time: Optional[str] = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    location_name: Optional[str] = None
    capacity: Optional[int] = Field(default=None, ge=0)
    price_cents: Optional[int] = Field(default=None, ge=0)
    early_bird_price_cents: Optional[int] = Field(default=None, ge=0)
    early_bird_deadline: Optional[date] = None
    min_age: Optional[int] = Field(default=None, ge=0)
    max_age: Optional[int] = Field(default=None, ge=0)
    status: Optional[CampStatus] = None
