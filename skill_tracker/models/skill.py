"""Skill and category models"""
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union
from datetime import date
from pydantic import BaseModel, Field, field_validator
from uuid import UUID, uuid4

from skill_tracker.utils.datetime_helpers import coerce_calendar_day


class SkillFrequency(str, Enum):
    """How often a skill is meant to be practiced"""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    OPEN_ENDED = "open_ended"

    @property
    def display_name(self) -> str:
        return "Open-ended" if self is SkillFrequency.OPEN_ENDED else self.value.capitalize()


class SkillCategory(BaseModel):
    """Skill category, predefined or user-created"""
    id: str
    name: str
    icon: str
    color_name: str
    is_custom: bool = False

    @classmethod
    def custom(cls, name: str, icon: str = "tag.fill", color_name: str = "gray") -> "SkillCategory":
        """Create a user-defined category"""
        return cls(id=str(uuid4()), name=name, icon=icon, color_name=color_name, is_custom=True)

    @classmethod
    def predefined(cls) -> list["SkillCategory"]:
        """Built-in categories, in display order"""
        return list(PREDEFINED_CATEGORIES)

    @classmethod
    def by_id(cls, category_id: str) -> Optional["SkillCategory"]:
        return next((c for c in PREDEFINED_CATEGORIES if c.id == category_id), None)


PREDEFINED_CATEGORIES: tuple[SkillCategory, ...] = (
    SkillCategory(id="personalDevelopment", name="Personal Development", icon="person.fill", color_name="blue"),
    SkillCategory(id="fitness", name="Fitness", icon="figure.run", color_name="red"),
    SkillCategory(id="learning", name="Learning", icon="book.fill", color_name="purple"),
    SkillCategory(id="professionalGrowth", name="Professional Growth", icon="briefcase.fill", color_name="orange"),
    SkillCategory(id="health", name="Health", icon="heart.fill", color_name="pink"),
    SkillCategory(id="creativeSkills", name="Creative Skills", icon="paintbrush.fill", color_name="green"),
    SkillCategory(id="mindfulness", name="Mindfulness", icon="leaf.fill", color_name="mint"),
    SkillCategory(id="nutrition", name="Nutrition", icon="fork.knife", color_name="red"),
    SkillCategory(id="hydration", name="Hydration", icon="drop.fill", color_name="cyan"),
)


class FixedTimeFrame(BaseModel):
    """Active only between two days (inclusive)"""
    type: Literal["fixed"] = "fixed"
    start_date: date
    end_date: date

    @field_validator('start_date', 'end_date', mode='before')
    @classmethod
    def normalize_dates(cls, v: Any) -> Any:
        return coerce_calendar_day(v)


class RecurringTimeFrame(BaseModel):
    """Active from the skill's start date, repeating at a frequency"""
    type: Literal["recurring"] = "recurring"
    frequency: SkillFrequency


class OpenEndedTimeFrame(BaseModel):
    """Active until the skill's end date, if any"""
    type: Literal["open_ended"] = "open_ended"


TimeFrame = Annotated[
    Union[FixedTimeFrame, RecurringTimeFrame, OpenEndedTimeFrame],
    Field(discriminator="type"),
]


class TrackingMetrics(BaseModel):
    """Free-text goals shown alongside a skill"""
    daily_goal: str = ""
    weekly_goal: str = ""


class Skill(BaseModel):
    """A trackable habit"""
    id: UUID = Field(default_factory=uuid4)
    name: str = Field(min_length=1)
    category: SkillCategory
    frequency: SkillFrequency = SkillFrequency.DAILY
    task_description: str = ""
    time_frame: TimeFrame = Field(default_factory=OpenEndedTimeFrame)
    tracking_metrics: TrackingMetrics = Field(default_factory=TrackingMetrics)
    start_date: date = Field(default_factory=date.today)
    end_date: Optional[date] = None
    allows_rollover: bool = False

    @field_validator('start_date', 'end_date', mode='before')
    @classmethod
    def normalize_dates(cls, v: Any) -> Any:
        return coerce_calendar_day(v)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        trimmed = v.strip()
        if not trimmed:
            raise ValueError("Skill name cannot be empty or only whitespace")
        return trimmed

    def is_active(self, day: date) -> bool:
        """Whether the skill's own time frame schedules it on `day`"""
        frame = self.time_frame
        if isinstance(frame, FixedTimeFrame):
            return frame.start_date <= day <= frame.end_date
        if isinstance(frame, RecurringTimeFrame):
            if day < self.start_date:
                return False
            return self.end_date is None or day <= self.end_date
        return self.end_date is None or day <= self.end_date

    def is_archived(self, today: date) -> bool:
        return not self.is_active(today)


def default_skills(today: date) -> list[Skill]:
    """Starter skills used when nothing has been saved yet"""
    by_id = {c.id: c for c in PREDEFINED_CATEGORIES}
    starters = [
        ("Coding", "learning", "Practice coding for 30 minutes"),
        ("Reading", "personalDevelopment", "Read a chapter of a book"),
        ("Workout", "fitness", "Do a 20-minute workout"),
        ("Guitar Practice", "creativeSkills", "Practice guitar chords"),
        ("Language Learning", "learning", "Learn 10 new words"),
    ]
    return [
        Skill(name=name, category=by_id[category_id], task_description=description, start_date=today)
        for name, category_id, description in starters
    ]
