"""
Camp Session Endpoints.

Directors and licensee owners manage the camps of their own tenant; HQ
admins may work across tenants. The public listing backs the registration
pages.
"""

from typing import List, Optional

from fastapi import APIRouter

from empowered_camps.core.models.domain.enums import CampStatus
from empowered_camps.core.models.io.licensees import CampCreate, CampRead, CampUpdate
from empowered_camps.server.auth import AdminUser, scoped_tenant_id
from empowered_camps.server.services.deps import CampDep

router = APIRouter()


@router.get(
    "/public",
    response_model=List[CampRead],
    summary="List Public Camps",
    description="Camps open for registration that have not ended yet. No authentication required.",
    response_description="Camps ordered by start date.",
)
async def list_public_camps(service: CampDep, tenant_id: Optional[str] = None) -> List[CampRead]:
    return [CampRead.model_validate(camp) for camp in await service.list_public(tenant_id)]


@router.get(
    "",
    response_model=List[CampRead],
    summary="List Camps",
    description="List camps. Callers below HQ only see camps of their own tenant.",
)
async def list_camps(
    user: AdminUser,
    service: CampDep,
    tenant_id: Optional[str] = None,
    status: Optional[CampStatus] = None,
    search: Optional[str] = None,
) -> List[CampRead]:
    camps = await service.list(scoped_tenant_id(user, tenant_id), status, search)
    return [CampRead.model_validate(camp) for camp in camps]


@router.post(
    "",
    response_model=CampRead,
    status_code=201,
    summary="Create Camp",
    description="Create a camp session. Non-HQ callers always create camps in their own tenant.",
    responses={400: {"description": "Invalid dates or ages"}, 404: {"description": "Licensee not found"}},
)
async def create_camp(payload: CampCreate, user: AdminUser, service: CampDep) -> CampRead:
    payload.tenant_id = scoped_tenant_id(user, payload.tenant_id)
    return CampRead.model_validate(await service.create(payload))


@router.get(
    "/{camp_id}",
    response_model=CampRead,
    summary="Get Camp",
    responses={404: {"description": "Camp not found"}},
)
async def get_camp(camp_id: str, user: AdminUser, service: CampDep) -> CampRead:
    return CampRead.model_validate(await service.get(camp_id, scoped_tenant_id(user, None)))


@router.patch(
    "/{camp_id}",
    response_model=CampRead,
    summary="Update Camp",
    description="Partially update a camp session.",
    responses={400: {"description": "Invalid dates or ages"}, 404: {"description": "Camp not found"}},
)
async def update_camp(camp_id: str, payload: CampUpdate, user: AdminUser, service: CampDep) -> CampRead:
    return CampRead.model_validate(await service.update(camp_id, payload, scoped_tenant_id(user, None)))
