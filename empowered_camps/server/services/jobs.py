"""
Job Posting Service.

Careers board: open postings are public, everything else is managed by
admins. Slugs are derived from the title and kept unique with a numeric
suffix.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from empowered_camps.core.database.base import apply_changes, utc_now
from empowered_camps.core.database.entities.staffing import JobPosting
from empowered_camps.core.database.repositories import JobPostingRepository
from empowered_camps.core.errors import BadRequestError, NotFoundError
from empowered_camps.core.logging_config import get_logger
from empowered_camps.core.models.domain.enums import JobStatus
from empowered_camps.core.models.io.staffing import JobPostingCreate, JobPostingRead, JobPostingUpdate

logger = get_logger(__name__)


def slugify(title: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")
    return slug or "job"


def unique_slug(base: str, taken: List[str]) -> str:
    """``base`` if free, otherwise the first of ``base-2``, ``base-3``... not in ``taken``."""
    taken_set = set(taken)
    if base not in taken_set:
        return base
    suffix = 2
    while f"{base}-{suffix}" in taken_set:
        suffix += 1
    return f"{base}-{suffix}"


def _check_compensation(min_cents: Optional[int], max_cents: Optional[int]) -> None:
    if min_cents is not None and max_cents is not None and min_cents > max_cents:
        raise BadRequestError("min_comp_cents cannot exceed max_comp_cents")


class JobPostingService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.jobs = JobPostingRepository(session)

    async def list_public(self) -> List[JobPostingRead]:
        return [JobPostingRead.model_validate(job) for job in await self.jobs.search(status=JobStatus.open)]

    async def get_public(self, slug: str) -> JobPostingRead:
        job = await self.jobs.get_by_slug(slug, status=JobStatus.open)
        if job is None:
            raise NotFoundError("Job posting not found")
        return JobPostingRead.model_validate(job)

    async def list_all(
        self, status: Optional[JobStatus] = None, tenant_id: Optional[str] = None, search: Optional[str] = None
    ) -> List[JobPostingRead]:
        return [JobPostingRead.model_validate(job) for job in await self.jobs.search(status, tenant_id, search)]

    async def _get(self, job_id: str) -> JobPosting:
        job = await self.jobs.get_by_id(job_id)
        if job is None:
            raise NotFoundError("Job posting not found")
        return job

    async def get(self, job_id: str) -> JobPostingRead:
        return JobPostingRead.model_validate(await self._get(job_id))

    async def create(self, payload: JobPostingCreate, user_id: Optional[str] = None) -> JobPostingRead:
        _check_compensation(payload.min_comp_cents, payload.max_comp_cents)
        base = slugify(payload.title)
        job = JobPosting(
            **payload.model_dump(),
            slug=unique_slug(base, await self.jobs.slugs_like(base)),
            created_by_user_id=user_id,
            published_at=utc_now() if payload.status == JobStatus.open else None,
        )
        job = await self.jobs.create(job)
        logger.info(f"Created job posting {job.slug} ({job.status.value})")
        return JobPostingRead.model_validate(job)

    async def update(self, job_id: str, payload: JobPostingUpdate) -> JobPostingRead:
        job = await self._get(job_id)
        changes = payload.model_dump(exclude_unset=True)
        if changes.get("title") is not None and changes["title"] != job.title:
            base = slugify(changes["title"])
            job.slug = unique_slug(base, [slug for slug in await self.jobs.slugs_like(base) if slug != job.slug])
        apply_changes(job, changes)
        _check_compensation(job.min_comp_cents, job.max_comp_cents)
        if job.status == JobStatus.open and job.published_at is None:
            job.published_at = utc_now()
        return JobPostingRead.model_validate(await self.jobs.update(job))

    async def archive(self, job_id: str) -> JobPostingRead:
        """Postings are archived, never removed."""
        job = await self._get(job_id)
        job.status = JobStatus.archived
        return JobPostingRead.model_validate(await self.jobs.update(job))

    async def status_counts(self) -> Dict[str, int]:
        counts = {status.value: 0 for status in JobStatus}
        for status, total in (await self.jobs.count_by("status")).items():
            counts[JobStatus(status).value] = total
        counts["total"] = sum(counts.values())
        return counts
