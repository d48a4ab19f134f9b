"""
Curriculum repositories.

Templates, reusable blocks, template days with their ordered block
placements, and camp assignments.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from sqlalchemy import delete, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from empowered_camps.core.models.domain.enums import DifficultyLevel, SportType

from ..entities.curriculum import (
    CampSessionCurriculum,
    CurriculumBlock,
    CurriculumDayBlock,
    CurriculumTemplate,
    CurriculumTemplateDay,
)
from .base import QueryBuilder, SQLModelRepository


def _visible_to(model, licensee_id: Optional[str], scope: Optional[str]):
    """Visibility clause: global rows plus the licensee's own."""
    if scope == "global":
        return model.is_global == True  # noqa: E712
    if scope == "licensee":
        return model.licensee_id == licensee_id
    if licensee_id:
        return or_(model.is_global == True, model.licensee_id == licensee_id)  # noqa: E712
    return None


class CurriculumTemplateRepository(SQLModelRepository[CurriculumTemplate]):
    """Repository for curriculum templates and their days."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CurriculumTemplate)

    async def search(
        self,
        licensee_id: Optional[str] = None,
        sport: Optional[SportType] = None,
        scope: Optional[str] = None,
        difficulty: Optional[DifficultyLevel] = None,
        search: Optional[str] = None,
        age_min: Optional[int] = None,
        age_max: Optional[int] = None,
    ) -> List[CurriculumTemplate]:
        stmt = select(CurriculumTemplate).where(CurriculumTemplate.is_active == True)  # noqa: E712
        visibility = _visible_to(CurriculumTemplate, licensee_id, scope)
        if visibility is not None:
            stmt = stmt.where(visibility)
        stmt = QueryBuilder.apply_filters(stmt, CurriculumTemplate, {"sport": sport, "difficulty": difficulty})
        stmt = QueryBuilder.apply_search(stmt, [CurriculumTemplate.name, CurriculumTemplate.description], search)
        # Age filters keep templates whose range overlaps the requested one.
        if age_min is not None:
            stmt = stmt.where(or_(col(CurriculumTemplate.age_max).is_(None), CurriculumTemplate.age_max >= age_min))
        if age_max is not None:
            stmt = stmt.where(or_(col(CurriculumTemplate.age_min).is_(None), CurriculumTemplate.age_min <= age_max))
        result = await self.session.execute(stmt.order_by(CurriculumTemplate.name))
        return list(result.scalars().all())

    async def days_for(self, template_id: str) -> List[CurriculumTemplateDay]:
        stmt = (
            select(CurriculumTemplateDay)
            .where(CurriculumTemplateDay.template_id == template_id)
            .order_by(CurriculumTemplateDay.day_number)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_day(self, day_id: str) -> Optional[CurriculumTemplateDay]:
        return await self.session.get(CurriculumTemplateDay, day_id)

    async def day_blocks_for(self, day_ids: Sequence[str]) -> Dict[str, List[CurriculumDayBlock]]:
        grouped: Dict[str, List[CurriculumDayBlock]] = {day_id: [] for day_id in day_ids}
        if not day_ids:
            return grouped
        stmt = (
            select(CurriculumDayBlock)
            .where(col(CurriculumDayBlock.day_id).in_(list(day_ids)))
            .order_by(CurriculumDayBlock.order_index)
        )
        result = await self.session.execute(stmt)
        for row in result.scalars().all():
            grouped.setdefault(row.day_id, []).append(row)
        return grouped

    async def get_day_block(self, day_block_id: str) -> Optional[CurriculumDayBlock]:
        return await self.session.get(CurriculumDayBlock, day_block_id)

    async def delete_day(self, day: CurriculumTemplateDay) -> None:
        await self.session.execute(delete(CurriculumDayBlock).where(col(CurriculumDayBlock.day_id) == day.id))
        await self.session.delete(day)
        await self.session.flush()

    async def delete_template(self, template: CurriculumTemplate) -> None:
        """Remove a template with its days, placements and camp assignments."""
        for day in await self.days_for(template.id):
            await self.delete_day(day)
        await self.session.execute(
            delete(CampSessionCurriculum).where(col(CampSessionCurriculum.template_id) == template.id)
        )
        await self.session.delete(template)
        await self.session.flush()


class CurriculumBlockRepository(SQLModelRepository[CurriculumBlock]):
    """Repository for reusable curriculum blocks."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CurriculumBlock)

    async def search(
        self,
        licensee_id: Optional[str] = None,
        sport: Optional[SportType] = None,
        category: Optional[str] = None,
        scope: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[CurriculumBlock]:
        stmt = select(CurriculumBlock).where(CurriculumBlock.is_active == True)  # noqa: E712
        visibility = _visible_to(CurriculumBlock, licensee_id, scope)
        if visibility is not None:
            stmt = stmt.where(visibility)
        stmt = QueryBuilder.apply_filters(stmt, CurriculumBlock, {"sport": sport, "category": category})
        stmt = QueryBuilder.apply_search(stmt, [CurriculumBlock.title, CurriculumBlock.description], search)
        result = await self.session.execute(stmt.order_by(CurriculumBlock.title))
        return list(result.scalars().all())

    async def is_placed(self, block_id: str) -> bool:
        stmt = select(CurriculumDayBlock.id).where(CurriculumDayBlock.block_id == block_id).limit(1)
        result = await self.session.execute(stmt)
        return result.first() is not None


class CampCurriculumRepository(SQLModelRepository[CampSessionCurriculum]):
    """Repository for template assignments to camp sessions."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CampSessionCurriculum)

    async def get_for_camp(self, camp_id: str) -> Optional[CampSessionCurriculum]:
        stmt = select(CampSessionCurriculum).where(CampSessionCurriculum.camp_id == camp_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def for_camps(self, camp_ids: Sequence[str]) -> Dict[str, CampSessionCurriculum]:
        if not camp_ids:
            return {}
        stmt = select(CampSessionCurriculum).where(col(CampSessionCurriculum.camp_id).in_(list(camp_ids)))
        result = await self.session.execute(stmt)
        return {row.camp_id: row for row in result.scalars().all()}
