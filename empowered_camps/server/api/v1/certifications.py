"""
Volunteer Certification Endpoints.

Volunteers upload background checks and similar documents; licensee staff
and HQ review them.
"""

from typing import List, Optional

from fastapi import APIRouter

from empowered_camps.core.models.domain.enums import CertificationStatus
from empowered_camps.core.models.io.staffing import CertificationCreate, CertificationRead, CertificationReview
from empowered_camps.server.auth import AdminUser, CurrentUser, scoped_tenant_id
from empowered_camps.server.services.deps import CertificationDep

router = APIRouter()


@router.post(
    "",
    response_model=CertificationRead,
    status_code=201,
    summary="Submit Certification",
    description="Submit a document for review; it starts as pending review.",
)
async def submit_certification(
    payload: CertificationCreate, user: CurrentUser, service: CertificationDep
) -> CertificationRead:
    return await service.submit(user, payload)


@router.get("", response_model=List[CertificationRead], summary="List Own Certifications")
async def list_own_certifications(user: CurrentUser, service: CertificationDep) -> List[CertificationRead]:
    return await service.list_own(user)


@router.delete(
    "/{certification_id}",
    status_code=204,
    summary="Delete Own Certification",
    responses={400: {"description": "Certification already reviewed"}, 404: {"description": "Not found"}},
)
async def delete_own_certification(certification_id: str, user: CurrentUser, service: CertificationDep) -> None:
    await service.delete_own(user, certification_id)


@router.get(
    "/review",
    response_model=List[CertificationRead],
    summary="List Certifications For Review",
    description="All certifications of the caller's tenant (any tenant for HQ), optionally by status.",
)
async def list_certifications(
    user: AdminUser,
    service: CertificationDep,
    tenant_id: Optional[str] = None,
    status: Optional[CertificationStatus] = None,
) -> List[CertificationRead]:
    return await service.list_all(scoped_tenant_id(user, tenant_id), status)


@router.post(
    "/{certification_id}/review",
    response_model=CertificationRead,
    summary="Review Certification",
    description="Approve or reject a certification, with optional reviewer notes and expiry.",
    responses={400: {"description": "Status is not approved or rejected"}, 404: {"description": "Not found"}},
)
async def review_certification(
    certification_id: str, payload: CertificationReview, user: AdminUser, service: CertificationDep
) -> CertificationRead:
    return await service.review(user, certification_id, payload, scoped_tenant_id(user, None))
