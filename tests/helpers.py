"""Shared helpers for skill-tracker tests"""
from datetime import timedelta

from skill_tracker.models.completion import CompletionLevel, DailyCompletion

FULL = CompletionLevel.FULL
PARTIAL = CompletionLevel.PARTIAL
NONE = CompletionLevel.NONE


def mark_days(store, skill_id, levels_by_offset, today):
    """Upsert levels keyed by day offset from today (0 = today, -1 = yesterday)"""
    for offset, level in levels_by_offset.items():
        store.upsert_completion(skill_id, today + timedelta(days=offset), level)


def history(skill_id, today, levels_by_offset):
    """Build DailyCompletion records without a store"""
    return [
        DailyCompletion(skill_id=skill_id, date=today + timedelta(days=offset), completion_level=level)
        for offset, level in levels_by_offset.items()
    ]
