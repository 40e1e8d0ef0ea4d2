"""Morning routine models"""
from typing import Any, NamedTuple
from datetime import date
from pydantic import BaseModel, Field, field_validator
from uuid import UUID, uuid4

from skill_tracker.models.completion import CompletionLevel
from skill_tracker.utils.datetime_helpers import coerce_calendar_day

TRACK_WEIGHT_HABIT_NAME = "Track weight"


class MorningHabit(BaseModel):
    """One habit in the ordered morning routine"""
    id: UUID = Field(default_factory=uuid4)
    name: str = Field(min_length=1)
    icon: str = "sunrise.fill"
    color: str = "orange"
    goal: str = ""
    order: int = Field(default=0, ge=0)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        trimmed = v.strip()
        if not trimmed:
            raise ValueError("Habit name cannot be empty or only whitespace")
        return trimmed

    @property
    def is_track_weight(self) -> bool:
        """Completed only by recording a weight entry"""
        return self.name.casefold() == TRACK_WEIGHT_HABIT_NAME.casefold()


class RoutineKey(NamedTuple):
    """Composite key of a routine completion"""
    habit_id: UUID
    day: date


class RoutineCompletionRecord(BaseModel):
    """Persisted form of one routine completion"""
    habit_id: UUID
    date: date
    level: CompletionLevel

    @field_validator('date', mode='before')
    @classmethod
    def normalize_date(cls, v: Any) -> Any:
        return coerce_calendar_day(v)

    @property
    def key(self) -> RoutineKey:
        return RoutineKey(self.habit_id, self.date)


def default_morning_habits() -> list[MorningHabit]:
    """Starter routine used when nothing has been saved yet"""
    return [
        MorningHabit(name="Read 10 pages", icon="book.fill", color="purple", goal="10 pages", order=0),
        MorningHabit(name="Stretch", icon="figure.flexibility", color="blue", goal="5 minutes", order=1),
        MorningHabit(name=TRACK_WEIGHT_HABIT_NAME, icon="scalemass", color="indigo", order=2),
        MorningHabit(name="Drink 500ml water", icon="drop.fill", color="cyan", goal="500ml", order=3),
    ]
