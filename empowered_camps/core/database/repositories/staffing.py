"""
Staffing repositories: CIT applications, volunteer certifications and job postings.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from empowered_camps.core.models.domain.enums import CertificationStatus, CitApplicationStatus, JobStatus

from ..entities.staffing import CitApplication, CitProgressEvent, JobPosting, VolunteerCertification
from .base import QueryBuilder, SQLModelRepository


class CitApplicationRepository(SQLModelRepository[CitApplication]):
    """Repository for CIT applications and their progress timeline."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CitApplication)

    async def search(
        self,
        status: Optional[CitApplicationStatus] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Tuple[List[CitApplication], int]:
        """One page of applications (newest first) and the total match count."""
        stmt = select(CitApplication)
        stmt = QueryBuilder.apply_filters(stmt, CitApplication, {"status": status})
        stmt = QueryBuilder.apply_search(
            stmt,
            [CitApplication.first_name, CitApplication.last_name, CitApplication.email, CitApplication.school_name],
            search,
        )
        total = int((await self.session.execute(select(func.count()).select_from(stmt.subquery()))).scalar_one())
        stmt = QueryBuilder.apply_pagination(stmt.order_by(col(CitApplication.created_at).desc()), limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def add_event(self, event: CitProgressEvent) -> CitProgressEvent:
        self.session.add(event)
        await self.session.flush()
        return event

    async def events_for(self, application_id: str) -> List[CitProgressEvent]:
        stmt = (
            select(CitProgressEvent)
            .where(CitProgressEvent.cit_application_id == application_id)
            .order_by(col(CitProgressEvent.created_at).desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class CertificationRepository(SQLModelRepository[VolunteerCertification]):
    """Repository for volunteer certification documents."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, VolunteerCertification)

    async def search(
        self,
        profile_id: Optional[str] = None,
        tenant_id: Optional[str] = None,
        status: Optional[CertificationStatus] = None,
    ) -> List[VolunteerCertification]:
        stmt = select(VolunteerCertification)
        stmt = QueryBuilder.apply_filters(
            stmt, VolunteerCertification, {"profile_id": profile_id, "tenant_id": tenant_id, "status": status}
        )
        result = await self.session.execute(stmt.order_by(col(VolunteerCertification.submitted_at).desc()))
        return list(result.scalars().all())


class JobPostingRepository(SQLModelRepository[JobPosting]):
    """Repository for careers board postings."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, JobPosting)

    async def get_by_slug(self, slug: str, status: Optional[JobStatus] = None) -> Optional[JobPosting]:
        stmt = select(JobPosting).where(JobPosting.slug == slug)
        stmt = QueryBuilder.apply_filters(stmt, JobPosting, {"status": status})
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def slugs_like(self, base_slug: str) -> List[str]:
        stmt = select(JobPosting.slug).where(col(JobPosting.slug).like(f"{base_slug}%"))
        result = await self.session.execute(stmt)
        return [row[0] for row in result.all()]

    async def search(
        self, status: Optional[JobStatus] = None, tenant_id: Optional[str] = None, search: Optional[str] = None
    ) -> List[JobPosting]:
        """Postings by priority (highest first), then newest."""
        stmt = select(JobPosting)
        stmt = QueryBuilder.apply_filters(stmt, JobPosting, {"status": status, "tenant_id": tenant_id})
        stmt = QueryBuilder.apply_search(stmt, [JobPosting.title, JobPosting.location_label], search)
        stmt = stmt.order_by(col(JobPosting.priority).desc(), col(JobPosting.created_at).desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
