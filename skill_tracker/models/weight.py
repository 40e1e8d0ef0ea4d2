"""Weight log models"""
from typing import Any, Literal
from datetime import date
from pydantic import BaseModel, Field, field_validator
from uuid import UUID, uuid4

from skill_tracker.utils.datetime_helpers import coerce_calendar_day


class WeightEntry(BaseModel):
    """Body weight on one calendar day"""
    id: UUID = Field(default_factory=uuid4)
    date: date
    weight: float  # kg

    @field_validator('date', mode='before')
    @classmethod
    def normalize_date(cls, v: Any) -> Any:
        return coerce_calendar_day(v)


class WeightTrend(BaseModel):
    """Change across the most recent entries"""
    difference_kg: float
    direction: Literal["up", "down", "stable"]
    first_date: date
    last_date: date
    sample_size: int
