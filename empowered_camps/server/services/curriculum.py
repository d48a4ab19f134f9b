"""
Curriculum Service.

Templates are day-by-day camp plans built from reusable blocks. Global
templates and blocks belong to HQ and are visible to every licensee; the
rest belong to one licensee. Only HQ admins may change global records.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from sqlalchemy.ext.asyncio import AsyncSession

from empowered_camps.core.database.base import apply_changes, utc_now
from empowered_camps.core.database.entities.curriculum import (
    CampSessionCurriculum,
    CurriculumBlock,
    CurriculumDayBlock,
    CurriculumTemplate,
    CurriculumTemplateDay,
)
from empowered_camps.core.database.repositories import (
    CampCurriculumRepository,
    CampRepository,
    CurriculumBlockRepository,
    CurriculumTemplateRepository,
)
from empowered_camps.core.errors import BadRequestError, ForbiddenError, NotFoundError
from empowered_camps.core.logging_config import get_logger
from empowered_camps.core.models.domain.enums import DifficultyLevel, SportType
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
    TemplateDayCreate,
    TemplateDayRead,
    TemplateDayUpdate,
)
from empowered_camps.server.auth.models import AuthUser

logger = get_logger(__name__)

Owned = Union[CurriculumTemplate, CurriculumBlock]


def _owns(user: AuthUser, record: Owned) -> bool:
    return record.licensee_id is not None and record.licensee_id == user.tenant_id


def _can_view(user: AuthUser, record: Owned) -> bool:
    return user.is_hq_admin or record.is_global or _owns(user, record)


def _can_edit(user: AuthUser, record: Owned) -> bool:
    if record.is_global:
        return user.is_hq_admin
    return user.is_hq_admin or _owns(user, record)


def _visibility(user: AuthUser, scope: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """Listing filter: HQ sees everything, licensee users see global records plus their own."""
    if user.is_hq_admin:
        return (user.tenant_id, scope) if scope == "licensee" else (None, scope)
    if not user.tenant_id:
        return None, "global"
    return user.tenant_id, scope


def _owner_for(user: AuthUser, is_global: bool) -> Optional[str]:
    if is_global:
        if not user.is_hq_admin:
            raise ForbiddenError("Only HQ admins can create global curriculum")
        return None
    if not user.is_hq_admin and not user.tenant_id:
        raise ForbiddenError("No tenant assigned to this account")
    return user.tenant_id


class CurriculumService:
    """Templates, blocks, template days and camp assignments."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.templates = CurriculumTemplateRepository(session)
        self.blocks = CurriculumBlockRepository(session)
        self.assignments = CampCurriculumRepository(session)
        self.camps = CampRepository(session)

    # Templates

    async def list_templates(
        self,
        user: AuthUser,
        sport: Optional[SportType] = None,
        scope: Optional[str] = None,
        difficulty: Optional[DifficultyLevel] = None,
        search: Optional[str] = None,
        age_min: Optional[int] = None,
        age_max: Optional[int] = None,
    ) -> List[CurriculumTemplateRead]:
        licensee_id, scope = _visibility(user, scope)
        templates = await self.templates.search(licensee_id, sport, scope, difficulty, search, age_min, age_max)
        return [CurriculumTemplateRead.model_validate(template) for template in templates]

    async def _template(self, user: AuthUser, template_id: str, edit: bool = False) -> CurriculumTemplate:
        template = await self.templates.get_by_id(template_id)
        if template is None or not _can_view(user, template):
            raise NotFoundError("Template not found")
        if edit and not _can_edit(user, template):
            raise ForbiddenError("Only HQ admins can modify global templates")
        return template

    async def get_template(self, user: AuthUser, template_id: str) -> CurriculumTemplateRead:
        template = await self._template(user, template_id)
        return await self._with_days(template)

    async def _with_days(self, template: CurriculumTemplate) -> CurriculumTemplateRead:
        days = await self.templates.days_for(template.id)
        placements = await self.templates.day_blocks_for([day.id for day in days])
        block_ids = {row.block_id for rows in placements.values() for row in rows}
        blocks = {block.id: block for block in await self.blocks.get_many(list(block_ids))}

        day_reads = []
        for day in days:
            rows = placements.get(day.id, [])
            block_reads = [
                DayBlockRead(
                    id=row.id,
                    block_id=row.block_id,
                    order_index=row.order_index,
                    custom_title=row.custom_title,
                    custom_duration_minutes=row.custom_duration_minutes,
                    notes=row.notes,
                    block=CurriculumBlockRead.model_validate(blocks[row.block_id]) if row.block_id in blocks else None,
                )
                for row in rows
            ]
            total = sum(
                row.custom_duration_minutes or (blocks[row.block_id].duration_minutes if row.block_id in blocks else 0)
                for row in rows
            )
            day_reads.append(
                TemplateDayRead(
                    id=day.id,
                    day_number=day.day_number,
                    title=day.title,
                    theme=day.theme,
                    notes=day.notes,
                    total_minutes=total,
                    blocks=block_reads,
                )
            )
        return CurriculumTemplateRead.model_validate(template).model_copy(update={"days": day_reads})

    async def create_template(self, user: AuthUser, payload: CurriculumTemplateCreate) -> CurriculumTemplateRead:
        if payload.age_min is not None and payload.age_max is not None and payload.age_min > payload.age_max:
            raise BadRequestError("age_min cannot be greater than age_max")
        template = CurriculumTemplate(
            **payload.model_dump(),
            licensee_id=_owner_for(user, payload.is_global),
            created_by=user.id,
        )
        template = await self.templates.create(template)
        logger.info(f"Created curriculum template {template.id} ({template.name})")
        return CurriculumTemplateRead.model_validate(template)

    async def update_template(
        self, user: AuthUser, template_id: str, payload: CurriculumTemplateUpdate
    ) -> CurriculumTemplateRead:
        template = await self._template(user, template_id, edit=True)
        apply_changes(template, payload.model_dump(exclude_unset=True))
        if template.age_min is not None and template.age_max is not None and template.age_min > template.age_max:
            raise BadRequestError("age_min cannot be greater than age_max")
        template = await self.templates.update(template)
        return await self._with_days(template)

    async def delete_template(self, user: AuthUser, template_id: str) -> None:
        template = await self._template(user, template_id, edit=True)
        await self.templates.delete_template(template)
        await self.session.commit()

    async def duplicate_template(self, user: AuthUser, template_id: str) -> CurriculumTemplateRead:
        """Copy a visible template, with its days and block placements, into the caller's own scope."""
        source = await self._template(user, template_id)
        copy = CurriculumTemplate(
            licensee_id=user.tenant_id,
            sport=source.sport,
            name=f"{source.name} (Copy)",
            description=source.description,
            age_min=source.age_min,
            age_max=source.age_max,
            difficulty=source.difficulty,
            is_global=False,
            total_days=source.total_days,
            is_published=False,
            created_by=user.id,
        )
        copy = await self.templates.create(copy, commit=False)

        days = await self.templates.days_for(source.id)
        placements = await self.templates.day_blocks_for([day.id for day in days])
        for day in days:
            new_day = CurriculumTemplateDay(
                template_id=copy.id, day_number=day.day_number, title=day.title, theme=day.theme, notes=day.notes
            )
            self.session.add(new_day)
            await self.session.flush()
            for row in placements.get(day.id, []):
                self.session.add(
                    CurriculumDayBlock(
                        day_id=new_day.id,
                        block_id=row.block_id,
                        order_index=row.order_index,
                        custom_title=row.custom_title,
                        custom_duration_minutes=row.custom_duration_minutes,
                        notes=row.notes,
                    )
                )
        await self.session.commit()
        await self.session.refresh(copy)
        return await self._with_days(copy)

    # Blocks

    async def list_blocks(
        self,
        user: AuthUser,
        sport: Optional[SportType] = None,
        category: Optional[str] = None,
        scope: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[CurriculumBlockRead]:
        licensee_id, scope = _visibility(user, scope)
        blocks = await self.blocks.search(licensee_id, sport, category, scope, search)
        return [CurriculumBlockRead.model_validate(block) for block in blocks]

    async def _block(self, user: AuthUser, block_id: str, edit: bool = False) -> CurriculumBlock:
        block = await self.blocks.get_by_id(block_id)
        if block is None or not _can_view(user, block):
            raise NotFoundError("Block not found")
        if edit and not _can_edit(user, block):
            raise ForbiddenError("Only HQ admins can modify global blocks")
        return block

    async def get_block(self, user: AuthUser, block_id: str) -> CurriculumBlockRead:
        return CurriculumBlockRead.model_validate(await self._block(user, block_id))

    async def create_block(self, user: AuthUser, payload: CurriculumBlockCreate) -> CurriculumBlockRead:
        owner = _owner_for(user, payload.is_global)
        block = CurriculumBlock(**payload.model_dump(), licensee_id=owner, created_by=user.id)
        return CurriculumBlockRead.model_validate(await self.blocks.create(block))

    async def update_block(self, user: AuthUser, block_id: str, payload: CurriculumBlockUpdate) -> CurriculumBlockRead:
        block = await self._block(user, block_id, edit=True)
        apply_changes(block, payload.model_dump(exclude_unset=True))
        return CurriculumBlockRead.model_validate(await self.blocks.update(block))

    async def delete_block(self, user: AuthUser, block_id: str) -> bool:
        """
        Delete a block. Blocks placed in a template day are deactivated instead.

        Returns:
            True when the row was deleted, False when it was only deactivated.
        """
        block = await self._block(user, block_id, edit=True)
        if await self.blocks.is_placed(block.id):
            block.is_active = False
            await self.blocks.update(block)
            return False
        return await self.blocks.delete(block.id)

    # Template days

    async def _day(self, user: AuthUser, day_id: str) -> CurriculumTemplateDay:
        day = await self.templates.get_day(day_id)
        if day is None:
            raise NotFoundError("Day not found")
        await self._template(user, day.template_id, edit=True)
        return day

    async def add_day(self, user: AuthUser, template_id: str, payload: TemplateDayCreate) -> TemplateDayRead:
        template = await self._template(user, template_id, edit=True)
        day = CurriculumTemplateDay(template_id=template.id, **payload.model_dump())
        self.session.add(day)
        if payload.day_number > template.total_days:
            template.total_days = payload.day_number
            self.session.add(template)
        await self.session.commit()
        await self.session.refresh(day)
        return TemplateDayRead(id=day.id, day_number=day.day_number, title=day.title, theme=day.theme, notes=day.notes)

    async def update_day(self, user: AuthUser, day_id: str, payload: TemplateDayUpdate) -> TemplateDayRead:
        day = await self._day(user, day_id)
        apply_changes(day, payload.model_dump(exclude_unset=True))
        self.session.add(day)
        await self.session.commit()
        await self.session.refresh(day)
        return TemplateDayRead(id=day.id, day_number=day.day_number, title=day.title, theme=day.theme, notes=day.notes)

    async def delete_day(self, user: AuthUser, day_id: str) -> None:
        day = await self._day(user, day_id)
        await self.templates.delete_day(day)
        await self.session.commit()

    # Day blocks

    async def add_day_block(self, user: AuthUser, day_id: str, payload: DayBlockCreate) -> DayBlockRead:
        day = await self._day(user, day_id)
        block = await self._block(user, payload.block_id)
        order_index = payload.order_index
        if order_index is None:
            existing = (await self.templates.day_blocks_for([day.id])).get(day.id, [])
            order_index = max((row.order_index for row in existing), default=-1) + 1
        row = CurriculumDayBlock(
            day_id=day.id,
            block_id=block.id,
            order_index=order_index,
            custom_title=payload.custom_title,
            custom_duration_minutes=payload.custom_duration_minutes,
            notes=payload.notes,
        )
        self.session.add(row)
        await self.session.commit()
        await self.session.refresh(row)
        return DayBlockRead(**row.model_dump(exclude={"day_id"}), block=CurriculumBlockRead.model_validate(block))

    async def remove_day_block(self, user: AuthUser, day_block_id: str) -> None:
        row = await self.templates.get_day_block(day_block_id)
        if row is None:
            raise NotFoundError("Day block not found")
        await self._day(user, row.day_id)
        await self.session.delete(row)
        await self.session.commit()

    async def reorder_day_blocks(self, user: AuthUser, day_id: str, day_block_ids: Sequence[str]) -> None:
        """Set ``order_index`` of each placement to its position in ``day_block_ids``."""
        day = await self._day(user, day_id)
        rows = {row.id: row for row in (await self.templates.day_blocks_for([day.id])).get(day.id, [])}
        unknown = [block_id for block_id in day_block_ids if block_id not in rows]
        if unknown:
            raise BadRequestError("Day block does not belong to this day")
        for index, day_block_id in enumerate(day_block_ids):
            rows[day_block_id].order_index = index
            self.session.add(rows[day_block_id])
        await self.session.commit()

    # Assignments

    async def _camp(self, user: AuthUser, camp_id: str):
        camp = await self.camps.get_by_id(camp_id)
        if camp is None or (not user.is_hq_admin and camp.tenant_id != user.tenant_id):
            raise NotFoundError("Camp not found")
        return camp

    async def list_assignments(self, user: AuthUser) -> List[AssignmentRead]:
        tenant_id = None if user.is_hq_admin else user.tenant_id
        camps = await self.camps.search(tenant_id=tenant_id)
        assignments = await self.assignments.for_camps([camp.id for camp in camps])
        names = {camp.id: camp.name for camp in camps}
        templates = {
            t.id: t.name for t in await self.templates.get_many([a.template_id for a in assignments.values()])
        }
        return [
            AssignmentRead.model_validate(assignment).model_copy(
                update={"camp_name": names.get(camp_id), "template_name": templates.get(assignment.template_id)}
            )
            for camp_id, assignment in assignments.items()
        ]

    async def assign(self, user: AuthUser, payload: AssignmentCreate) -> AssignmentRead:
        """Assign a template to a camp, replacing any previous assignment."""
        camp = await self._camp(user, payload.camp_id)
        template = await self._template(user, payload.template_id)
        assignment = await self.assignments.get_for_camp(camp.id)
        if assignment is None:
            assignment = CampSessionCurriculum(camp_id=camp.id, template_id=template.id)
        assignment.template_id = template.id
        assignment.assigned_by = user.id
        assignment.assigned_at = utc_now()
        assignment.notes = payload.notes
        assignment = await self.assignments.update(assignment)
        logger.info(f"Assigned curriculum template {template.id} to camp {camp.id}")
        return AssignmentRead.model_validate(assignment).model_copy(
            update={"camp_name": camp.name, "template_name": template.name}
        )

    async def unassign(self, user: AuthUser, camp_id: str) -> bool:
        camp = await self._camp(user, camp_id)
        assignment = await self.assignments.get_for_camp(camp.id)
        if assignment is None:
            return False
        return await self.assignments.delete(assignment.id)

    async def camp_curriculum(self, user: AuthUser, camp_id: str) -> Dict[str, Any]:
        camp = await self._camp(user, camp_id)
        assignment = await self.assignments.get_for_camp(camp.id)
        if assignment is None:
            return {"camp_id": camp.id, "assignment": None, "template": None}
        template = await self.templates.get_by_id(assignment.template_id)
        return {
            "camp_id": camp.id,
            "assignment": AssignmentRead.model_validate(assignment).model_dump(mode="json"),
            "template": (await self._with_days(template)).model_dump(mode="json") if template else None,
        }

    async def assignable_camps(self, user: AuthUser) -> List[Dict[str, Any]]:
        """Camps that have not ended yet, each with its current template assignment."""
        tenant_id = None if user.is_hq_admin else user.tenant_id
        camps = await self.camps.not_ended(date.today(), tenant_id)
        assignments = await self.assignments.for_camps([camp.id for camp in camps])
        template_names = {
            t.id: t.name for t in await self.templates.get_many([a.template_id for a in assignments.values()])
        }
        result = []
        for camp in camps:
            assignment = assignments.get(camp.id)
            result.append(
                {
                    "id": camp.id,
                    "name": camp.name,
                    "start_date": camp.start_date.isoformat(),
                    "end_date": camp.end_date.isoformat(),
                    "status": camp.status.value,
                    "template_id": assignment.template_id if assignment else None,
                    "template_name": template_names.get(assignment.template_id) if assignment else None,
                }
            )
        return result
