"""Completion tracking models"""
from enum import Enum
from typing import Any
from datetime import date
from pydantic import BaseModel, Field, field_validator, model_validator
from uuid import UUID, uuid4

from skill_tracker.utils.datetime_helpers import coerce_calendar_day


class CompletionLevel(str, Enum):
    """Graded completion, ordered NONE < PARTIAL < FULL"""
    NONE = "none"
    PARTIAL = "partial"
    FULL = "full"

    @property
    def rank(self) -> int:
        return _LEVEL_RANK[self]

    def next_in_cycle(self) -> "CompletionLevel":
        """NONE -> PARTIAL -> FULL -> NONE"""
        return _CYCLE[self]

    def toggled(self) -> "CompletionLevel":
        """FULL -> NONE, anything else -> FULL"""
        return CompletionLevel.NONE if self is CompletionLevel.FULL else CompletionLevel.FULL


_LEVEL_RANK = {
    CompletionLevel.NONE: 0,
    CompletionLevel.PARTIAL: 1,
    CompletionLevel.FULL: 2,
}

_CYCLE = {
    CompletionLevel.NONE: CompletionLevel.PARTIAL,
    CompletionLevel.PARTIAL: CompletionLevel.FULL,
    CompletionLevel.FULL: CompletionLevel.NONE,
}


class DailyCompletion(BaseModel):
    """One skill's completion on one calendar day"""
    id: UUID = Field(default_factory=uuid4)
    skill_id: UUID
    date: date
    is_completed: bool = False  # mirrors completion_level == FULL
    completion_level: CompletionLevel = CompletionLevel.NONE

    @field_validator('date', mode='before')
    @classmethod
    def normalize_date(cls, v: Any) -> Any:
        """Accept stored datetimes and reduce them to their calendar day"""
        return coerce_calendar_day(v)

    @model_validator(mode='after')
    def sync_completed_flag(self) -> "DailyCompletion":
        # Older records only carried is_completed
        if self.is_completed and self.completion_level is CompletionLevel.NONE:
            self.completion_level = CompletionLevel.FULL
        self.is_completed = self.completion_level is CompletionLevel.FULL
        return self

    def set_level(self, level: CompletionLevel) -> None:
        self.completion_level = level
        self.is_completed = level is CompletionLevel.FULL


class SkillProgress(BaseModel):
    """Derived progress for one skill (never persisted)"""
    skill_id: UUID
    skill_name: str
    completions: list[DailyCompletion] = Field(default_factory=list)
    current_streak: int = 0
    longest_streak: int = 0
    completion_percentage: float = 0.0
