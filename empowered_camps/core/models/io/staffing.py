"""
CIT application, volunteer certification and job posting I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from empowered_camps.core.models.domain.enums import (
    CertificationStatus,
    CitApplicationStatus,
    CitProgressEventType,
    EmploymentType,
    JobStatus,
)


class CitApplicationCreate(BaseModel):
    """Public CIT application form."""

    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=254)
    phone: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    school_name: Optional[str] = None
    grade_level: Optional[str] = None
    graduation_year: Optional[str] = None
    sports_played: Optional[str] = None
    experience_summary: Optional[str] = None
    why_cit: Optional[str] = None
    leadership_experience: Optional[str] = None
    availability_notes: Optional[str] = None
    parent_name: Optional[str] = None
    parent_email: Optional[str] = None
    parent_phone: Optional[str] = None
    how_heard: Optional[str] = None


class CitProgressEventRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    type: CitProgressEventType
    from_status: Optional[CitApplicationStatus] = None
    to_status: Optional[CitApplicationStatus] = None
    details: Optional[str] = None
    changed_by_user_id: Optional[str] = None
    created_at: datetime


class CitApplicationRead(CitApplicationCreate):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: Optional[str] = None
    status: CitApplicationStatus
    assigned_licensee_id: Optional[str] = None
    assigned_director_id: Optional[str] = None
    notes_internal: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    progress_events: List[CitProgressEventRead] = Field(default_factory=list)


class CitApplicationPage(BaseModel):
    applications: List[CitApplicationRead]
    total: int
    page: int
    page_size: int
    total_pages: int


class CitStatusUpdate(BaseModel):
    status: CitApplicationStatus
    details: Optional[str] = None
    assigned_licensee_id: Optional[str] = None
    assigned_director_id: Optional[str] = None


class CitNoteCreate(BaseModel):
    note: str = Field(min_length=1, max_length=5000)


class CertificationCreate(BaseModel):
    document_url: str = Field(min_length=1)
    document_type: str = Field(min_length=1, max_length=100)
    document_name: Optional[str] = None
    expires_at: Optional[datetime] = None
    notes: Optional[str] = None


class CertificationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    profile_id: str
    tenant_id: Optional[str] = None
    document_url: str
    document_type: str
    document_name: Optional[str] = None
    status: CertificationStatus
    submitted_at: datetime
    expires_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by_profile_id: Optional[str] = None
    notes: Optional[str] = None
    reviewer_notes: Optional[str] = None


class CertificationReview(BaseModel):
    status: CertificationStatus
    reviewer_notes: Optional[str] = None
    expires_at: Optional[datetime] = None


class JobPostingCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    short_description: str = Field(min_length=1, max_length=500)
    full_description: str = Field(min_length=1)
    location_label: str = Field(min_length=1, max_length=200)
    employment_type: EmploymentType
    is_remote_friendly: bool = False
    min_comp_cents: Optional[int] = Field(default=None, ge=0)
    max_comp_cents: Optional[int] = Field(default=None, ge=0)
    comp_frequency: Optional[str] = None
    application_instructions: Optional[str] = None
    application_email: Optional[str] = None
    application_url: Optional[str] = None
    status: JobStatus = JobStatus.draft
    priority: int = 0
    tenant_id: Optional[str] = None


class JobPostingUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    short_description: Optional[str] = Field(default=None, min_length=1, max_length=500)
    full_description: Optional[str] = None
    location_label: Optional[str] = None
    employment_type: Optional[EmploymentType] = None
    is_remote_friendly: Optional[bool] = None
    min_comp_cents: Optional[int] = Field(default=None, ge=0)
    max_comp_cents: Optional[int] = Field(default=None, ge=0)
    comp_frequency: Optional[str] = None
    application_instructions: Optional[str] = None
    application_email: Optional[str] = None
    application_url: Optional[str] = None
    status: Optional[JobStatus] = None
    priority: Optional[int] = None


class JobPostingRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    slug: str
    short_description: str
    full_description: str
    location_label: str
    employment_type: EmploymentType
    is_remote_friendly: bool
    min_comp_cents: Optional[int] = None
    max_comp_cents: Optional[int] = None
    comp_frequency: Optional[str] = None
    application_instructions: Optional[str] = None
    application_email: Optional[str] = None
    application_url: Optional[str] = None
    status: JobStatus
    priority: int
    tenant_id: Optional[str] = None
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
