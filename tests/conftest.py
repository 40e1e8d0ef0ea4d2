"""Global test fixtures and utilities for skill-tracker tests"""
import pytest
from datetime import datetime, timedelta

from skill_tracker.models.skill import (
    FixedTimeFrame,
    OpenEndedTimeFrame,
    RecurringTimeFrame,
    Skill,
    SkillCategory,
    SkillFrequency,
)
from skill_tracker.services.completion_store import CompletionStore
from skill_tracker.services.engine import TrackerEngine
from skill_tracker.storage.kv_store import InMemoryKeyValueStore
from skill_tracker.utils.datetime_helpers import Clock


# ============================================================================
# Clock Fixtures
# ============================================================================

class MutableNow:
    """Settable "now" so tests can move across midnight"""

    def __init__(self, current: datetime):
        self.current = current

    def __call__(self) -> datetime:
        return self.current

    def advance(self, days: int = 0, hours: int = 0) -> None:
        self.current = self.current + timedelta(days=days, hours=hours)


@pytest.fixture
def fixed_now():
    """Wednesday 2026-03-11, 09:30 local time"""
    return MutableNow(datetime(2026, 3, 11, 9, 30))


@pytest.fixture
def today(fixed_now):
    return fixed_now.current.date()


@pytest.fixture
def clock(fixed_now):
    """Clock pinned to fixed_now (naive, so no timezone conversion)"""
    return Clock(timezone="", now_fn=fixed_now)


# ============================================================================
# Model Fixtures
# ============================================================================

@pytest.fixture
def learning_category():
    return SkillCategory.by_id("learning")


@pytest.fixture
def skill_factory(learning_category, today):
    """Build skills with sensible defaults"""
    def _create(name="Coding", time_frame=None, start_date=None, end_date=None, **kwargs):
        return Skill(
            name=name,
            category=kwargs.pop("category", learning_category),
            task_description=kwargs.pop("task_description", f"Practice {name.lower()}"),
            time_frame=time_frame or OpenEndedTimeFrame(),
            start_date=start_date or today,
            end_date=end_date,
            **kwargs
        )
    return _create


@pytest.fixture
def coding_skill(skill_factory):
    return skill_factory("Coding")


@pytest.fixture
def expired_skill(skill_factory, today):
    """Fixed time frame that ended last week"""
    return skill_factory(
        "Old Course",
        time_frame=FixedTimeFrame(start_date=today - timedelta(days=30), end_date=today - timedelta(days=7)),
        start_date=today - timedelta(days=30),
    )


@pytest.fixture
def recurring_skill(skill_factory, today):
    return skill_factory(
        "Workout",
        time_frame=RecurringTimeFrame(frequency=SkillFrequency.DAILY),
        start_date=today - timedelta(days=10),
    )


# ============================================================================
# Store & Engine Fixtures
# ============================================================================

@pytest.fixture
def persisted():
    """Records every slice name passed to an autosave hook"""
    calls = []

    def _hook(slice_name: str) -> bool:
        calls.append(slice_name)
        return True

    _hook.calls = calls
    return _hook


@pytest.fixture
def completion_store(clock, coding_skill, persisted):
    return CompletionStore(clock, persist=persisted, skills=[coding_skill])


@pytest.fixture
def kv_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def engine(kv_store, clock):
    """Loaded engine over an empty in-memory store, without seed data"""
    engine = TrackerEngine(store=kv_store, clock=clock, seed_defaults=False)
    engine.load()
    return engine

