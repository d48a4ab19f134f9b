"""
Curriculum Endpoints.

Templates are multi-day plans built from reusable blocks and assigned to
camp sessions. Licensee staff see global records plus their own; only HQ
admins change global ones.
"""

from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter

from empowered_camps.core.models.domain.enums import BlockCategory, DifficultyLevel, SportType
from empowered_camps.core.models.io.curriculum import (
    AssignmentCreate,
    AssignmentRead,
    CurriculumBlockCreate,
    CurriculumBlockRead,
    CurriculumBlockUpdate,
    CurriculumTemplateCreate,
    CurriculumTemplateRead,
    CurriculumTemplateUpdate,
    DayBlockCreate,
    DayBlockRead,
    DayBlockReorder,
    TemplateDayCreate,
    TemplateDayRead,
    TemplateDayUpdate,
)
from empowered_camps.server.auth import AdminUser
from empowered_camps.server.services.deps import CurriculumDep

router = APIRouter()

Scope = Literal["global", "licensee"]


# Templates


@router.get(
    "/templates",
    response_model=List[CurriculumTemplateRead],
    summary="List Curriculum Templates",
    description="Visible templates filtered by sport, scope, difficulty, name search and age range.",
)
async def list_templates(
    user: AdminUser,
    service: CurriculumDep,
    sport: Optional[SportType] = None,
    scope: Optional[Scope] = None,
    difficulty: Optional[DifficultyLevel] = None,
    search: Optional[str] = None,
    age_min: Optional[int] = None,
    age_max: Optional[int] = None,
) -> List[CurriculumTemplateRead]:
    return await service.list_templates(user, sport, scope, difficulty, search, age_min, age_max)


@router.post(
    "/templates",
    response_model=CurriculumTemplateRead,
    status_code=201,
    summary="Create Curriculum Template",
    responses={403: {"description": "Only HQ admins can create global curriculum"}},
)
async def create_template(
    payload: CurriculumTemplateCreate, user: AdminUser, service: CurriculumDep
) -> CurriculumTemplateRead:
    return await service.create_template(user, payload)


@router.get(
    "/templates/{template_id}",
    response_model=CurriculumTemplateRead,
    summary="Get Curriculum Template",
    description="A template with its days and the blocks placed on each day.",
    responses={404: {"description": "Template not found"}},
)
async def get_template(template_id: str, user: AdminUser, service: CurriculumDep) -> CurriculumTemplateRead:
    return await service.get_template(user, template_id)


@router.patch(
    "/templates/{template_id}",
    response_model=CurriculumTemplateRead,
    summary="Update Curriculum Template",
    responses={403: {"description": "Template not editable"}, 404: {"description": "Template not found"}},
)
async def update_template(
    template_id: str, payload: CurriculumTemplateUpdate, user: AdminUser, service: CurriculumDep
) -> CurriculumTemplateRead:
    return await service.update_template(user, template_id, payload)


@router.delete(
    "/templates/{template_id}",
    status_code=204,
    summary="Delete Curriculum Template",
    responses={403: {"description": "Template not editable"}, 404: {"description": "Template not found"}},
)
async def delete_template(template_id: str, user: AdminUser, service: CurriculumDep) -> None:
    await service.delete_template(user, template_id)


@router.post(
    "/templates/{template_id}/duplicate",
    response_model=CurriculumTemplateRead,
    status_code=201,
    summary="Duplicate Curriculum Template",
    description="Copy a template with its days and block placements into the caller's own scope.",
    responses={404: {"description": "Template not found"}},
)
async def duplicate_template(template_id: str, user: AdminUser, service: CurriculumDep) -> CurriculumTemplateRead:
    return await service.duplicate_template(user, template_id)


# Days


@router.post(
    "/templates/{template_id}/days",
    response_model=TemplateDayRead,
    status_code=201,
    summary="Add Template Day",
)
async def add_day(
    template_id: str, payload: TemplateDayCreate, user: AdminUser, service: CurriculumDep
) -> TemplateDayRead:
    return await service.add_day(user, template_id, payload)


@router.patch("/days/{day_id}", response_model=TemplateDayRead, summary="Update Template Day")
async def update_day(
    day_id: str, payload: TemplateDayUpdate, user: AdminUser, service: CurriculumDep
) -> TemplateDayRead:
    return await service.update_day(user, day_id, payload)


@router.delete("/days/{day_id}", status_code=204, summary="Delete Template Day")
async def delete_day(day_id: str, user: AdminUser, service: CurriculumDep) -> None:
    await service.delete_day(user, day_id)


@router.post(
    "/days/{day_id}/blocks",
    response_model=DayBlockRead,
    status_code=201,
    summary="Place Block On Day",
    description="Place a block on a day; without ``order_index`` it goes last.",
)
async def add_day_block(day_id: str, payload: DayBlockCreate, user: AdminUser, service: CurriculumDep) -> DayBlockRead:
    return await service.add_day_block(user, day_id, payload)


@router.put(
    "/days/{day_id}/blocks/order",
    status_code=204,
    summary="Reorder Day Blocks",
    description="Assign ``order_index`` to every listed placement by its position in the list.",
    responses={400: {"description": "Day block does not belong to this day"}},
)
async def reorder_day_blocks(day_id: str, payload: DayBlockReorder, user: AdminUser, service: CurriculumDep) -> None:
    await service.reorder_day_blocks(user, day_id, payload.day_block_ids)


@router.delete("/day-blocks/{day_block_id}", status_code=204, summary="Remove Block From Day")
async def remove_day_block(day_block_id: str, user: AdminUser, service: CurriculumDep) -> None:
    await service.remove_day_block(user, day_block_id)


# Blocks


@router.get("/blocks", response_model=List[CurriculumBlockRead], summary="List Curriculum Blocks")
async def list_blocks(
    user: AdminUser,
    service: CurriculumDep,
    sport: Optional[SportType] = None,
    category: Optional[BlockCategory] = None,
    scope: Optional[Scope] = None,
    search: Optional[str] = None,
) -> List[CurriculumBlockRead]:
    return await service.list_blocks(user, sport, category, scope, search)


@router.post("/blocks", response_model=CurriculumBlockRead, status_code=201, summary="Create Curriculum Block")
async def create_block(payload: CurriculumBlockCreate, user: AdminUser, service: CurriculumDep) -> CurriculumBlockRead:
    return await service.create_block(user, payload)


@router.get(
    "/blocks/{block_id}",
    response_model=CurriculumBlockRead,
    summary="Get Curriculum Block",
    responses={404: {"description": "Block not found"}},
)
async def get_block(block_id: str, user: AdminUser, service: CurriculumDep) -> CurriculumBlockRead:
    return await service.get_block(user, block_id)


@router.patch("/blocks/{block_id}", response_model=CurriculumBlockRead, summary="Update Curriculum Block")
async def update_block(
    block_id: str, payload: CurriculumBlockUpdate, user: AdminUser, service: CurriculumDep
) -> CurriculumBlockRead:
    return await service.update_block(user, block_id, payload)


@router.delete(
    "/blocks/{block_id}",
    summary="Delete Curriculum Block",
    description="Delete a block; a block placed on any day is deactivated instead.",
    response_description="Whether the block was deleted rather than deactivated.",
)
async def delete_block(block_id: str, user: AdminUser, service: CurriculumDep) -> Dict[str, bool]:
    return {"deleted": await service.delete_block(user, block_id)}


# Assignments


@router.get("/assignments", response_model=List[AssignmentRead], summary="List Curriculum Assignments")
async def list_assignments(user: AdminUser, service: CurriculumDep) -> List[AssignmentRead]:
    return await service.list_assignments(user)


@router.post(
    "/assignments",
    response_model=AssignmentRead,
    summary="Assign Curriculum",
    description="Assign a template to a camp, replacing any previous assignment of that camp.",
    responses={404: {"description": "Camp or template not found"}},
)
async def assign(payload: AssignmentCreate, user: AdminUser, service: CurriculumDep) -> AssignmentRead:
    return await service.assign(user, payload)


@router.delete("/assignments/{camp_id}", summary="Unassign Curriculum")
async def unassign(camp_id: str, user: AdminUser, service: CurriculumDep) -> Dict[str, bool]:
    return {"removed": await service.unassign(user, camp_id)}


@router.get("/camps", summary="Assignable Camps", description="Camps not yet ended with their current template.")
async def assignable_camps(user: AdminUser, service: CurriculumDep) -> Dict[str, List[Dict[str, Any]]]:
    return {"camps": await service.assignable_camps(user)}


@router.get(
    "/camps/{camp_id}",
    summary="Camp Curriculum",
    description="The assignment of a camp and its template with days and blocks.",
    responses={404: {"description": "Camp not found"}},
)
async def camp_curriculum(camp_id: str, user: AdminUser, service: CurriculumDep) -> Dict[str, Any]:
    return await service.camp_curriculum(user, camp_id)
