"""Unit tests for MomentJournal (skill_tracker/services/moment_journal.py)"""
import pytest
from datetime import timedelta
from uuid import uuid4

from skill_tracker.exceptions import ValidationError
from skill_tracker.models.moment import MomentCategory
from skill_tracker.services.moment_journal import MomentJournal
from skill_tracker.storage import slices


@pytest.fixture
def journal(clock, persisted):
    return MomentJournal(clock, persist=persisted)


def test_add_moment_defaults_to_today(journal, today, persisted):
    moment = journal.add_moment("First 5k")

    assert moment.date == today
    assert moment.category is MomentCategory.PERSONAL
    assert journal.moments == [moment]
    assert persisted.calls == [slices.MEMORABLE_MOMENTS]


def test_add_moment_empty_title_rejected(journal):
    with pytest.raises(ValidationError):
        journal.add_moment("")

    assert journal.moments == []


def test_moments_for_skill_sorted_by_date(journal, coding_skill, today):
    later = journal.add_moment("Shipped a feature", skill_id=coding_skill.id, category=MomentCategory.MILESTONE)
    earlier = journal.add_moment("First commit", skill_id=coding_skill.id, day=today - timedelta(days=30))
    journal.add_moment("Unrelated")

    assert journal.moments_for_skill(coding_skill.id) == [earlier, later]


def test_remove_moment(journal, persisted):
    moment = journal.add_moment("Breakthrough", category=MomentCategory.BREAKTHROUGH)

    assert journal.remove_moment(moment.id) is True
    assert journal.remove_moment(uuid4()) is False
    assert journal.moments == []
    assert persisted.calls == [slices.MEMORABLE_MOMENTS, slices.MEMORABLE_MOMENTS]
