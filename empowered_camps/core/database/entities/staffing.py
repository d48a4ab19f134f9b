"""
Staff and volunteer onboarding entities.

- CIT (coach-in-training) applications with their progress timeline
- Volunteer certification documents awaiting review
- Job postings for the careers board
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from empowered_camps.core.models.domain.enums import (
    CertificationStatus,
    CitApplicationStatus,
    CitProgressEventType,
    EmploymentType,
    JobStatus,
)

from ..base import Base, UTCDateTime, new_id, utc_now


class CitApplication(Base, table=True):
    """Coach-in-training application.

    Table: cit_applications
    """

    __tablename__ = "cit_applications"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: Optional[str] = Field(default=None, index=True)
    first_name: str
    last_name: str
    email: str = Field(index=True)
    phone: Optional[str] = Field(default=None)
    city: Optional[str] = Field(default=None)
    state: Optional[str] = Field(default=None)
    school_name: Optional[str] = Field(default=None)
    grade_level: Optional[str] = Field(default=None)
    graduation_year: Optional[str] = Field(default=None)
    sports_played: Optional[str] = Field(default=None)
    experience_summary: Optional[str] = Field(default=None)
    why_cit: Optional[str] = Field(default=None)
    leadership_experience: Optional[str] = Field(default=None)
    availability_notes: Optional[str] = Field(default=None)
    parent_name: Optional[str] = Field(default=None)
    parent_email: Optional[str] = Field(default=None)
    parent_phone: Optional[str] = Field(default=None)
    how_heard: Optional[str] = Field(default=None)
    status: CitApplicationStatus = Field(default=CitApplicationStatus.applied, index=True)
    assigned_licensee_id: Optional[str] = Field(default=None, foreign_key="tenants.id")
    assigned_director_id: Optional[str] = Field(default=None)
    notes_internal: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=UTCDateTime)


class CitProgressEvent(Base, table=True):
    """Timeline entry of a CIT application.

    Table: cit_progress_events
    """

    __tablename__ = "cit_progress_events"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    cit_application_id: str = Field(foreign_key="cit_applications.id", index=True)
    type: CitProgressEventType
    from_status: Optional[CitApplicationStatus] = Field(default=None)
    to_status: Optional[CitApplicationStatus] = Field(default=None)
    details: Optional[str] = Field(default=None)
    changed_by_user_id: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)


class VolunteerCertification(Base, table=True):
    """Uploaded certification document (background check, CPR, ...).

    Table: volunteer_certifications
    """

    __tablename__ = "volunteer_certifications"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    profile_id: str = Field(foreign_key="profiles.id", index=True)
    tenant_id: Optional[str] = Field(default=None, foreign_key="tenants.id", index=True)
    document_url: str
    document_type: str
    document_name: Optional[str] = Field(default=None)
    status: CertificationStatus = Field(default=CertificationStatus.pending_review, index=True)
    submitted_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    expires_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    reviewed_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    reviewed_by_profile_id: Optional[str] = Field(default=None)
    notes: Optional[str] = Field(default=None)
    reviewer_notes: Optional[str] = Field(default=None)


class JobPosting(Base, table=True):
    """Careers board posting.

    Table: job_postings
    """

    __tablename__ = "job_postings"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    title: str
    slug: str = Field(unique=True, index=True)
    short_description: str
    full_description: str
    location_label: str
    employment_type: EmploymentType
    is_remote_friendly: bool = Field(default=False)
    min_comp_cents: Optional[int] = Field(default=None)
    max_comp_cents: Optional[int] = Field(default=None)
    comp_frequency: Optional[str] = Field(default=None)
    application_instructions: Optional[str] = Field(default=None)
    application_email: Optional[str] = Field(default=None)
    application_url: Optional[str] = Field(default=None)
    status: JobStatus = Field(default=JobStatus.draft, index=True)
    priority: int = Field(default=0)
    tenant_id: Optional[str] = Field(default=None, foreign_key="tenants.id", index=True)
    created_by_user_id: str
    published_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=UTCDateTime)
