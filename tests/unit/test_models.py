"""Unit tests for Pydantic models"""
import pytest
from datetime import date, datetime, timedelta
from uuid import uuid4
from pydantic import ValidationError

from skill_tracker.models.completion import CompletionLevel, DailyCompletion
from skill_tracker.models.moment import MemorableMoment
from skill_tracker.models.routine import MorningHabit, RoutineCompletionRecord, default_morning_habits
from skill_tracker.models.skill import (
    FixedTimeFrame,
    OpenEndedTimeFrame,
    RecurringTimeFrame,
    Skill,
    SkillCategory,
    SkillFrequency,
    default_skills,
)


# ============================================================================
# Completion Level Tests
# ============================================================================

def test_completion_level_ordering():
    assert CompletionLevel.NONE.rank < CompletionLevel.PARTIAL.rank < CompletionLevel.FULL.rank


def test_completion_level_cycle():
    assert CompletionLevel.NONE.next_in_cycle() is CompletionLevel.PARTIAL
    assert CompletionLevel.PARTIAL.next_in_cycle() is CompletionLevel.FULL
    assert CompletionLevel.FULL.next_in_cycle() is CompletionLevel.NONE


def test_completion_level_toggle():
    assert CompletionLevel.NONE.toggled() is CompletionLevel.FULL
    assert CompletionLevel.PARTIAL.toggled() is CompletionLevel.FULL
    assert CompletionLevel.FULL.toggled() is CompletionLevel.NONE


# ============================================================================
# DailyCompletion Tests
# ============================================================================

def test_daily_completion_flag_mirrors_level():
    record = DailyCompletion(skill_id=uuid4(), date=date(2026, 3, 11), completion_level="partial")

    assert record.is_completed is False
    record.set_level(CompletionLevel.FULL)
    assert record.is_completed is True


def test_daily_completion_legacy_flag_only():
    """Test records that only carry is_completed=True load as FULL"""
    record = DailyCompletion.model_validate({
        "skill_id": str(uuid4()),
        "date": "2026-03-11",
        "is_completed": True,
    })

    assert record.completion_level is CompletionLevel.FULL


def test_daily_completion_level_wins_over_flag():
    record = DailyCompletion(skill_id=uuid4(), date=date(2026, 3, 11), is_completed=True, completion_level="partial")

    assert record.completion_level is CompletionLevel.PARTIAL
    assert record.is_completed is False


def test_daily_completion_datetime_reduced_to_day():
    record = DailyCompletion(skill_id=uuid4(), date=datetime(2026, 3, 11, 21, 15))

    assert record.date == date(2026, 3, 11)


def test_daily_completion_rejects_unknown_level():
    with pytest.raises(ValidationError):
        DailyCompletion(skill_id=uuid4(), date=date(2026, 3, 11), completion_level="half")


# ============================================================================
# Skill Tests
# ============================================================================

def test_skill_name_trimmed(learning_category):
    skill = Skill(name="  Coding  ", category=learning_category)

    assert skill.name == "Coding"
    assert isinstance(skill.time_frame, OpenEndedTimeFrame)


def test_skill_blank_name_rejected(learning_category):
    with pytest.raises(ValidationError):
        Skill(name="   ", category=learning_category)


def test_skill_time_frame_discriminator(learning_category):
    skill = Skill.model_validate({
        "name": "Workout",
        "category": learning_category.model_dump(),
        "time_frame": {"type": "recurring", "frequency": "weekly"},
        "start_date": "2026-03-01",
    })

    assert isinstance(skill.time_frame, RecurringTimeFrame)
    assert skill.time_frame.frequency is SkillFrequency.WEEKLY


def test_fixed_time_frame_activity(skill_factory, today):
    skill = skill_factory(
        "Course",
        time_frame=FixedTimeFrame(start_date=today - timedelta(days=2), end_date=today + timedelta(days=2)),
    )

    assert skill.is_active(today)
    assert skill.is_active(today + timedelta(days=2))
    assert not skill.is_active(today + timedelta(days=3))
    assert skill.is_archived(today + timedelta(days=3))


def test_open_ended_respects_end_date(skill_factory, today):
    skill = skill_factory("Reading", end_date=today)

    assert skill.is_active(today)
    assert not skill.is_active(today + timedelta(days=1))


def test_frequency_display_name():
    assert SkillFrequency.OPEN_ENDED.display_name == "Open-ended"
    assert SkillFrequency.WEEKLY.display_name == "Weekly"


def test_categories():
    predefined = SkillCategory.predefined()

    assert len(predefined) == 9
    assert all(not c.is_custom for c in predefined)
    assert SkillCategory.by_id("fitness").name == "Fitness"
    assert SkillCategory.by_id("missing") is None
    assert SkillCategory.custom("Chess").is_custom is True


def test_default_skills(today):
    skills = default_skills(today)

    assert [s.name for s in skills] == ["Coding", "Reading", "Workout", "Guitar Practice", "Language Learning"]
    assert all(s.start_date == today for s in skills)


# ============================================================================
# Routine & Moment Tests
# ============================================================================

def test_default_morning_habits_include_track_weight():
    habits = default_morning_habits()

    assert [h.order for h in habits] == list(range(len(habits)))
    assert sum(1 for h in habits if h.is_track_weight) == 1


def test_morning_habit_negative_order_rejected():
    with pytest.raises(ValidationError):
        MorningHabit(name="Stretch", order=-1)


def test_routine_record_key():
    habit_id = uuid4()
    record = RoutineCompletionRecord(habit_id=habit_id, date="2026-03-11T06:45:00", level="full")

    assert record.key == (habit_id, date(2026, 3, 11))


def test_moment_requires_title():
    with pytest.raises(ValidationError):
        MemorableMoment(title="", date=date(2026, 3, 11))
