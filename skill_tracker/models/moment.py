"""Memorable moment models"""
from enum import Enum
from typing import Any, Optional
from datetime import date
from pydantic import BaseModel, Field, field_validator
from uuid import UUID, uuid4

from skill_tracker.utils.datetime_helpers import coerce_calendar_day


class MomentCategory(str, Enum):
    """Kind of moment being remembered"""
    ACHIEVEMENT = "achievement"
    MILESTONE = "milestone"
    BREAKTHROUGH = "breakthrough"
    PERSONAL = "personal"


class MemorableMoment(BaseModel):
    """A special achievement, optionally tied to a skill"""
    id: UUID = Field(default_factory=uuid4)
    skill_id: Optional[UUID] = None
    date: date
    title: str = Field(min_length=1)
    description: str = ""
    category: MomentCategory = MomentCategory.PERSONAL

    @field_validator('date', mode='before')
    @classmethod
    def normalize_date(cls, v: Any) -> Any:
        return coerce_calendar_day(v)
