"""
Progress Tracking

Pure computations over completion history:
- streaks and completion percentage
- calendar heat-map windows and cells
"""

from skill_tracker.tracking.streaks import (
    calculate_current_streak,
    calculate_longest_streak,
    calculate_completion_percentage,
    compute_streaks,
    build_skill_progress,
)

__all__ = [
    "calculate_current_streak",
    "calculate_longest_streak",
    "calculate_completion_percentage",
    "compute_streaks",
    "build_skill_progress",
]
