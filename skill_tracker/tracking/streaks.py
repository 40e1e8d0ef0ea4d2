"""
Streak Calculation

Derives streaks and completion percentage from a skill's completion history.
Nothing here is stored; every query recomputes from the records passed in.

Rules:
- Only FULL days count towards a streak
- A day without a record breaks a streak exactly like a NONE/PARTIAL record
- Completion percentage counts FULL records over all records for the skill
"""

from typing import Dict, Iterable, List, Optional
from datetime import date, timedelta
import logging

from skill_tracker.models.completion import CompletionLevel, DailyCompletion, SkillProgress
from skill_tracker.models.skill import Skill

logger = logging.getLogger(__name__)


def calculate_current_streak(completions: Iterable[DailyCompletion], today: date) -> int:
    """
    Count consecutive FULL days ending today

    Walks the history newest-first with an expected-day pointer that starts
    at today. Records dated after today are skipped.

    Args:
        completions: One skill's completion records
        today: Current calendar day

    Returns:
        Number of consecutive FULL days, 0 if today is not FULL
    """
    ordered = sorted(completions, key=lambda c: c.date, reverse=True)
    streak = 0
    expected = today

    for completion in ordered:
        if completion.date == expected:
            if completion.completion_level is not CompletionLevel.FULL:
                break
            streak += 1
            expected = expected - timedelta(days=1)
        elif completion.date < expected:
            # expected day has no record
            break

    return streak


def calculate_longest_streak(completions: Iterable[DailyCompletion]) -> int:
    """
    Longest run of consecutive FULL days anywhere in the history

    Args:
        completions: One skill's completion records

    Returns:
        Length of the longest run
    """
    ordered = sorted(completions, key=lambda c: c.date)

    if not ordered:
        return 0
    if len(ordered) == 1:
        return 1 if ordered[0].completion_level is CompletionLevel.FULL else 0

    longest = 0
    running = 0
    previous_day: Optional[date] = None

    for completion in ordered:
        if previous_day is not None and (completion.date - previous_day).days > 1:
            running = 0

        if completion.completion_level is CompletionLevel.FULL:
            running += 1
            longest = max(longest, running)
        else:
            running = 0

        previous_day = completion.date

    return longest


def calculate_completion_percentage(completions: Iterable[DailyCompletion]) -> float:
    """
    Share of records that are FULL, as a percentage (0-100)

    PARTIAL records count in the denominator only.
    """
    records = list(completions)
    if not records:
        return 0.0

    full_days = sum(1 for c in records if c.completion_level is CompletionLevel.FULL)
    return full_days / len(records) * 100


def compute_streaks(completions: List[DailyCompletion], today: date) -> Dict[str, float]:
    """
    Compute all derived progress values for one skill

    Returns:
        {
            'current_streak': int,
            'longest_streak': int,
            'completion_percentage': float
        }
    """
    return {
        "current_streak": calculate_current_streak(completions, today),
        "longest_streak": calculate_longest_streak(completions),
        "completion_percentage": calculate_completion_percentage(completions),
    }


def build_skill_progress(skill: Skill, completions: List[DailyCompletion], today: date) -> SkillProgress:
    """Filter the full history to one skill and compute its progress"""
    own = [c for c in completions if c.skill_id == skill.id]
    stats = compute_streaks(own, today)

    logger.debug(
        f"Progress for skill {skill.id} ({skill.name}): "
        f"current={stats['current_streak']} longest={stats['longest_streak']} "
        f"pct={stats['completion_percentage']:.1f}"
    )

    return SkillProgress(
        skill_id=skill.id,
        skill_name=skill.name,
        completions=own,
        current_streak=stats["current_streak"],
        longest_streak=stats["longest_streak"],
        completion_percentage=stats["completion_percentage"],
    )
