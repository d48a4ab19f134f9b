"""
Curriculum I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from empowered_camps.core.models.domain.enums import BlockCategory, DifficultyLevel, IntensityLevel, SportType


class CurriculumBlockRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    licensee_id: Optional[str] = None
    sport: SportType
    title: str
    description: Optional[str] = None
    duration_minutes: int
    category: BlockCategory
    intensity: IntensityLevel
    equipment_needed: Optional[str] = None
    is_global: bool
    is_active: bool
    created_at: datetime


class CurriculumBlockCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    sport: SportType = SportType.multi_sport
    description: Optional[str] = None
    duration_minutes: int = Field(default=15, ge=1, le=480)
    category: BlockCategory = BlockCategory.drill
    intensity: IntensityLevel = IntensityLevel.moderate
    equipment_needed: Optional[str] = None
    is_global: bool = False


class CurriculumBlockUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    sport: Optional[SportType] = None
    description: Optional[str] = None
    duration_minutes: Optional[int] = Field(default=None, ge=1, le=480)
    category: Optional[BlockCategory] = None
    intensity: Optional[IntensityLevel] = None
    equipment_needed: Optional[str] = None
    is_active: Optional[bool] = None


class DayBlockRead(BaseModel):
    id: str
    block_id: str
    order_index: int
    custom_title: Optional[str] = None
    custom_duration_minutes: Optional[int] = None
    notes: Optional[str] = None
    block: Optional[CurriculumBlockRead] = None


class TemplateDayRead(BaseModel):
    id: str
    day_number: int
    title: str
    theme: Optional[str] = None
    notes: Optional[str] = None
    total_minutes: int = 0
    blocks: List[DayBlockRead] = Field(default_factory=list)


class CurriculumTemplateRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    licensee_id: Optional[str] = None
    sport: SportType
    name: str
    description: Optional[str] = None
    age_min: Optional[int] = None
    age_max: Optional[int] = None
    difficulty: DifficultyLevel
    is_global: bool
    total_days: int
    is_active: bool
    is_published: bool
    created_at: datetime
    updated_at: datetime
    days: List[TemplateDayRead] = Field(default_factory=list)


class CurriculumTemplateCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    sport: SportType = SportType.multi_sport
    description: Optional[str] = None
    age_min: Optional[int] = Field(default=None, ge=0)
    age_max: Optional[int] = Field(default=None, ge=0)
    difficulty: DifficultyLevel = DifficultyLevel.intro
    is_global: bool = False
    total_days: int = Field(default=1, ge=1, le=30)
    is_published: bool = False


class CurriculumTemplateUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    sport: Optional[SportType] = None
    description: Optional[str] = None
    age_min: Optional[int] = Field(default=None, ge=0)
    age_max: Optional[int] = Field(default=None, ge=0)
    difficulty: Optional[DifficultyLevel] = None
    total_days: Optional[int] = Field(default=None, ge=1, le=30)
    is_published: Optional[bool] = None
    is_active: Optional[bool] = None


class TemplateDayCreate(BaseModel):
    day_number: int = Field(ge=1)
    title: str = Field(min_length=1, max_length=200)
    theme: Optional[str] = None
    notes: Optional[str] = None


class TemplateDayUpdate(BaseModel):
    day_number: Optional[int] = Field(default=None, ge=1)
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    theme: Optional[str] = None
    notes: Optional[str] = None


class DayBlockCreate(BaseModel):
    block_id: str
    order_index: Optional[int] = None
    custom_title: Optional[str] = None
    custom_duration_minutes: Optional[int] = Field(default=None, ge=1)
    notes: Optional[str] = None


class DayBlockReorder(BaseModel):
    """Day block ids in their new order."""

    day_block_ids: List[str]


class AssignmentCreate(BaseModel):
    camp_id: str
    template_id: str
    notes: Optional[str] = None


class AssignmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    camp_id: str
    template_id: str
    assigned_by: Optional[str] = None
    assigned_at: datetime
    notes: Optional[str] = None
    camp_name: Optional[str] = None
    template_name: Optional[str] = None
