"""
Calendar heat-map data

Produces the date windows shown by the progress views and the completion
level for each cell. Rendering (colors, grid layout) happens elsewhere; this
module only answers "which days" and "how complete".
"""

from typing import Dict, Iterable, List
from datetime import date
import logging

from pydantic import BaseModel

from skill_tracker.models.completion import CompletionLevel, DailyCompletion
from skill_tracker.utils.datetime_helpers import (
    add_days,
    days_in_month,
    start_of_month,
    start_of_week,
)

logger = logging.getLogger(__name__)

MONTH_GRID_DAYS = 42  # six Monday-start weeks

INTENSITY = {
    CompletionLevel.NONE: 0.0,
    CompletionLevel.PARTIAL: 0.5,
    CompletionLevel.FULL: 1.0,
}


class HeatmapCell(BaseModel):
    """One day in a heat-map"""
    day: date
    level: CompletionLevel
    intensity: float
    is_today: bool
    is_future: bool


def trailing_days(today: date, count: int) -> List[date]:
    """The last `count` days, oldest first, ending today"""
    return [add_days(today, offset) for offset in range(-(count - 1), 1)]


def week_dates(today: date) -> List[date]:
    """Monday..Sunday of the current week"""
    monday = start_of_week(today)
    return [add_days(monday, offset) for offset in range(7)]


def month_grid_dates(today: date) -> List[date]:
    """Six full weeks starting on the Monday on/before the 1st of the month"""
    grid_start = start_of_week(start_of_month(today))
    return [add_days(grid_start, offset) for offset in range(MONTH_GRID_DAYS)]


def year_months(today: date) -> List[date]:
    """First day of every month of the current year"""
    return [date(today.year, month, 1) for month in range(1, 13)]


def levels_by_day(completions: Iterable[DailyCompletion]) -> Dict[date, CompletionLevel]:
    return {c.date: c.completion_level for c in completions}


def heatmap_cells(
    completions: Iterable[DailyCompletion],
    dates: Iterable[date],
    today: date
) -> List[HeatmapCell]:
    """
    Completion level for each requested day

    Future days are always NONE with zero intensity.

    Args:
        completions: One skill's completion records
        dates: Days to report, in display order
        today: Current calendar day

    Returns:
        One HeatmapCell per requested day
    """
    levels = levels_by_day(completions)
    cells = []

    for day in dates:
        is_future = day > today
        level = CompletionLevel.NONE if is_future else levels.get(day, CompletionLevel.NONE)
        cells.append(HeatmapCell(
            day=day,
            level=level,
            intensity=INTENSITY[level],
            is_today=day == today,
            is_future=is_future,
        ))

    return cells


def month_completion_percentage(completions: Iterable[DailyCompletion], month_start: date) -> float:
    """
    Weighted completion for one month (FULL = 2 points, PARTIAL = 1)

    Divides by two points for every day of the month, so a month of all
    PARTIAL days scores 50%.
    """
    month_start = start_of_month(month_start)
    total_days = days_in_month(month_start)
    points = 0

    for completion in completions:
        if completion.date.year != month_start.year or completion.date.month != month_start.month:
            continue
        if completion.completion_level is CompletionLevel.FULL:
            points += 2
        elif completion.completion_level is CompletionLevel.PARTIAL:
            points += 1

    return points / (total_days * 2) * 100
