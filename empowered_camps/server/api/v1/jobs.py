"""
Job Posting Endpoints.

The careers page reads open postings without authentication; HQ admins
manage postings under ``/admin/jobs``.
"""

from typing import Dict, List, Optional

from fastapi import APIRouter

from empowered_camps.core.models.domain.enums import JobStatus
from empowered_camps.core.models.io.staffing import JobPostingCreate, JobPostingRead, JobPostingUpdate
from empowered_camps.server.auth import HQAdminUser
from empowered_camps.server.services.deps import JobDep

router = APIRouter()
admin_router = APIRouter()


@router.get(
    "",
    response_model=List[JobPostingRead],
    summary="List Open Jobs",
    description="Open postings, highest priority first and newest first within a priority.",
)
async def list_open_jobs(service: JobDep) -> List[JobPostingRead]:
    return await service.list_public()


@router.get(
    "/{slug}",
    response_model=JobPostingRead,
    summary="Get Open Job",
    responses={404: {"description": "Job posting not found"}},
)
async def get_open_job(slug: str, service: JobDep) -> JobPostingRead:
    return await service.get_public(slug)


@admin_router.get("", response_model=List[JobPostingRead], summary="List Job Postings")
async def list_jobs(
    user: HQAdminUser,
    service: JobDep,
    status: Optional[JobStatus] = None,
    tenant_id: Optional[str] = None,
    search: Optional[str] = None,
) -> List[JobPostingRead]:
    return await service.list_all(status, tenant_id, search)


@admin_router.post(
    "",
    response_model=JobPostingRead,
    status_code=201,
    summary="Create Job Posting",
    description="The slug is derived from the title and made unique with a numeric suffix.",
    responses={400: {"description": "Minimum compensation above maximum"}},
)
async def create_job(payload: JobPostingCreate, user: HQAdminUser, service: JobDep) -> JobPostingRead:
    return await service.create(payload, user.id)


@admin_router.get("/counts", summary="Job Status Counts")
async def job_counts(user: HQAdminUser, service: JobDep) -> Dict[str, int]:
    return await service.status_counts()


@admin_router.get(
    "/{job_id}",
    response_model=JobPostingRead,
    summary="Get Job Posting",
    responses={404: {"description": "Job posting not found"}},
)
async def get_job(job_id: str, user: HQAdminUser, service: JobDep) -> JobPostingRead:
    return await service.get(job_id)


@admin_router.patch(
    "/{job_id}",
    response_model=JobPostingRead,
    summary="Update Job Posting",
    responses={404: {"description": "Job posting not found"}},
)
async def update_job(job_id: str, payload: JobPostingUpdate, user: HQAdminUser, service: JobDep) -> JobPostingRead:
    return await service.update(job_id, payload)


@admin_router.delete(
    "/{job_id}",
    response_model=JobPostingRead,
    summary="Archive Job Posting",
    description="Postings are never removed; deleting one archives it.",
    responses={404: {"description": "Job posting not found"}},
)
async def archive_job(job_id: str, user: HQAdminUser, service: JobDep) -> JobPostingRead:
    return await service.archive(job_id)
