"""
User profile and athlete entities.

Profiles are keyed by the Cognito ``sub`` of the user. Athletes are the
children a parent profile registers for camps.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlmodel import Field

from empowered_camps.core.models.domain.enums import UserRole

from ..base import Base, UTCDateTime, new_id, utc_now


class Profile(Base, table=True):
    """Platform user (parent, staff, licensee or HQ).

    Table: profiles
    """

    __tablename__ = "profiles"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    email: str = Field(index=True)
    first_name: Optional[str] = Field(default=None)
    last_name: Optional[str] = Field(default=None)
    phone: Optional[str] = Field(default=None)
    address_line1: Optional[str] = Field(default=None)
    address_line2: Optional[str] = Field(default=None)
    city: Optional[str] = Field(default=None)
    state: Optional[str] = Field(default=None)
    zip_code: Optional[str] = Field(default=None)
    emergency_contact_name: Optional[str] = Field(default=None)
    emergency_contact_phone: Optional[str] = Field(default=None)
    emergency_contact_relationship: Optional[str] = Field(default=None)
    role: UserRole = Field(default=UserRole.parent)
    tenant_id: Optional[str] = Field(default=None, foreign_key="tenants.id", index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=UTCDateTime)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class Athlete(Base, table=True):
    """Camper belonging to a parent profile.

    Table: athletes
    """

    __tablename__ = "athletes"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    parent_id: str = Field(foreign_key="profiles.id", index=True)
    first_name: str
    last_name: str
    date_of_birth: date
    grade: Optional[str] = Field(default=None)
    t_shirt_size: Optional[str] = Field(default=None)
    medical_notes: Optional[str] = Field(default=None)
    allergies: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
