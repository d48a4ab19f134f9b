"""
Licensee Management Endpoints.

HQ administration of franchise territories (tenants).
"""

from typing import List, Optional

from fastapi import APIRouter

from empowered_camps.core.models.domain.enums import LicenseStatus
from empowered_camps.core.models.io.licensees import LicenseeCreate, LicenseeRead, LicenseeUpdate
from empowered_camps.server.auth import HQAdminUser
from empowered_camps.server.services.deps import LicenseeDep

router = APIRouter()


@router.get(
    "",
    response_model=List[LicenseeRead],
    summary="List Licensees",
    description="List licensees, optionally filtered by license status or a name/slug/territory search.",
    response_description="Licensees ordered by name.",
)
async def list_licensees(
    user: HQAdminUser,
    service: LicenseeDep,
    status: Optional[LicenseStatus] = None,
    search: Optional[str] = None,
) -> List[LicenseeRead]:
    return [LicenseeRead.model_validate(tenant) for tenant in await service.list(status, search)]


@router.post(
    "",
    response_model=LicenseeRead,
    status_code=201,
    summary="Create Licensee",
    description="Create a licensee. The slug must be unique.",
    response_description="The created licensee.",
    responses={400: {"description": "Slug already taken"}},
)
async def create_licensee(payload: LicenseeCreate, user: HQAdminUser, service: LicenseeDep) -> LicenseeRead:
    return LicenseeRead.model_validate(await service.create(payload))


@router.get(
    "/{licensee_id}",
    response_model=LicenseeRead,
    summary="Get Licensee",
    responses={404: {"description": "Licensee not found"}},
)
async def get_licensee(licensee_id: str, user: HQAdminUser, service: LicenseeDep) -> LicenseeRead:
    return LicenseeRead.model_validate(await service.get(licensee_id))


@router.patch(
    "/{licensee_id}",
    response_model=LicenseeRead,
    summary="Update Licensee",
    description="Partially update a licensee; omitted fields keep their value.",
    responses={404: {"description": "Licensee not found"}},
)
async def update_licensee(
    licensee_id: str, payload: LicenseeUpdate, user: HQAdminUser, service: LicenseeDep
) -> LicenseeRead:
    return LicenseeRead.model_validate(await service.update(licensee_id, payload))


@router.post(
    "/{licensee_id}/deactivate",
    response_model=LicenseeRead,
    summary="Deactivate Licensee",
    description="Suspend a licensee's license.",
    responses={404: {"description": "Licensee not found"}},
)
async def deactivate_licensee(licensee_id: str, user: HQAdminUser, service: LicenseeDep) -> LicenseeRead:
    return LicenseeRead.model_validate(await service.deactivate(licensee_id))


@router.post(
    "/{licensee_id}/activate",
    response_model=LicenseeRead,
    summary="Activate Licensee",
    description="Restore a suspended licensee to active.",
    responses={404: {"description": "Licensee not found"}},
)
async def activate_licensee(licensee_id: str, user: HQAdminUser, service: LicenseeDep) -> LicenseeRead:
    return LicenseeRead.model_validate(await service.activate(licensee_id))
