"""
Curriculum entities.

A template is a multi-day plan; each day holds an ordered list of reusable
blocks. A camp session is assigned at most one template.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from empowered_camps.core.models.domain.enums import BlockCategory, DifficultyLevel, IntensityLevel, SportType

from ..base import Base, UTCDateTime, new_id, utc_now


class CurriculumTemplate(Base, table=True):
    """Multi-day camp curriculum.

    Table: curriculum_templates
    """

    __tablename__ = "curriculum_templates"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    licensee_id: Optional[str] = Field(default=None, foreign_key="tenants.id", index=True)
    sport: SportType = Field(default=SportType.multi_sport)
    name: str
    description: Optional[str] = Field(default=None)
    age_min: Optional[int] = Field(default=None)
    age_max: Optional[int] = Field(default=None)
    difficulty: DifficultyLevel = Field(default=DifficultyLevel.intro)
    is_global: bool = Field(default=False)
    total_days: int = Field(default=1)
    is_active: bool = Field(default=True)
    is_published: bool = Field(default=False)
    created_by: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=UTCDateTime)


class CurriculumBlock(Base, table=True):
    """Reusable activity block (drill, warmup, mindset talk, ...).

    Table: curriculum_blocks
    """

    __tablename__ = "curriculum_blocks"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    licensee_id: Optional[str] = Field(default=None, foreign_key="tenants.id", index=True)
    sport: SportType = Field(default=SportType.multi_sport)
    title: str
    description: Optional[str] = Field(default=None)
    duration_minutes: int = Field(default=15, ge=1)
    category: BlockCategory = Field(default=BlockCategory.drill)
    intensity: IntensityLevel = Field(default=IntensityLevel.moderate)
    equipment_needed: Optional[str] = Field(default=None)
    is_global: bool = Field(default=False)
    is_active: bool = Field(default=True)
    created_by: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=UTCDateTime)


class CurriculumTemplateDay(Base, table=True):
    """One day of a template.

    Table: curriculum_template_days
    """

    __tablename__ = "curriculum_template_days"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    template_id: str = Field(foreign_key="curriculum_templates.id", index=True)
    day_number: int = Field(ge=1)
    title: str
    theme: Optional[str] = Field(default=None)
    notes: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)


class CurriculumDayBlock(Base, table=True):
    """Placement of a block within a template day.

    Table: curriculum_day_blocks
    """

    __tablename__ = "curriculum_day_blocks"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    day_id: str = Field(foreign_key="curriculum_template_days.id", index=True)
    block_id: str = Field(foreign_key="curriculum_blocks.id", index=True)
    order_index: int = Field(default=0)
    custom_title: Optional[str] = Field(default=None)
    custom_duration_minutes: Optional[int] = Field(default=None)
    notes: Optional[str] = Field(default=None)


class CampSessionCurriculum(Base, table=True):
    """Template assigned to a camp session.

    Table: camp_session_curriculum
    """

    __tablename__ = "camp_session_curriculum"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    camp_id: str = Field(foreign_key="camps.id", unique=True, index=True)
    template_id: str = Field(foreign_key="curriculum_templates.id", index=True)
    assigned_by: Optional[str] = Field(default=None)
    assigned_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    notes: Optional[str] = Field(default=None)
