"""
CIT (Counselor in Training) Application Endpoints.

Teens apply publicly; HQ admins move applications through review, interview
and training. Every status change and note is kept as a progress event.
"""

from typing import Dict, Optional

from fastapi import APIRouter, Query

from empowered_camps.core.models.domain.enums import CitApplicationStatus
from empowered_camps.core.models.io.staffing import (
    CitApplicationCreate,
    CitApplicationPage,
    CitApplicationRead,
    CitNoteCreate,
    CitProgressEventRead,
    CitStatusUpdate,
)
from empowered_camps.server.auth import HQAdminUser, OptionalUser
from empowered_camps.server.services.deps import CitDep

router = APIRouter()


@router.post(
    "",
    response_model=CitApplicationRead,
    status_code=201,
    summary="Submit CIT Application",
    description="Public application form. Signed-in applicants are linked to their account.",
)
async def submit_application(
    payload: CitApplicationCreate, user: OptionalUser, service: CitDep
) -> CitApplicationRead:
    return await service.submit(payload, user.id if user else None)


@router.get(
    "",
    response_model=CitApplicationPage,
    summary="List CIT Applications",
    description="Applications newest first, filtered by status and a name/email/school search.",
)
async def list_applications(
    user: HQAdminUser,
    service: CitDep,
    status: Optional[CitApplicationStatus] = None,
    search: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
) -> CitApplicationPage:
    return await service.list(status, search, page, page_size)


@router.get("/counts", summary="CIT Status Counts", response_description="Applications per status plus total.")
async def status_counts(user: HQAdminUser, service: CitDep) -> Dict[str, int]:
    return await service.status_counts()


@router.get(
    "/{application_id}",
    response_model=CitApplicationRead,
    summary="Get CIT Application",
    description="An application with its progress events.",
    responses={404: {"description": "Application not found"}},
)
async def get_application(application_id: str, user: HQAdminUser, service: CitDep) -> CitApplicationRead:
    return await service.get(application_id)


@router.post(
    "/{application_id}/status",
    response_model=CitApplicationRead,
    summary="Update CIT Application Status",
    responses={404: {"description": "Application not found"}},
)
async def update_status(
    application_id: str, payload: CitStatusUpdate, user: HQAdminUser, service: CitDep
) -> CitApplicationRead:
    return await service.update_status(application_id, payload, user.id)


@router.post(
    "/{application_id}/notes",
    response_model=CitProgressEventRead,
    status_code=201,
    summary="Add CIT Application Note",
    responses={404: {"description": "Application not found"}},
)
async def add_note(
    application_id: str, payload: CitNoteCreate, user: HQAdminUser, service: CitDep
) -> CitProgressEventRead:
    return await service.add_note(application_id, payload.note, user.id)
