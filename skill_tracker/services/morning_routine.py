"""
MorningRoutineTracker - Ordered Daily Habits

A small user-managed list of morning habits with its own completion map,
keyed by (habit_id, calendar day). Uses the same CompletionLevel vocabulary
as skills.

Two completion contracts are offered side by side:
- cycle_completion(): NONE -> PARTIAL -> FULL -> NONE
- toggle_completion(): NONE <-> FULL

The "Track weight" habit is completed only by recording a weight entry.
"""

import logging
from datetime import date
from typing import Any, Callable, Dict, List, Optional
from uuid import UUID

from skill_tracker.exceptions import ValidationError
from skill_tracker.models.completion import CompletionLevel
from skill_tracker.models.routine import MorningHabit, RoutineCompletionRecord, RoutineKey
from skill_tracker.storage import slices
from skill_tracker.utils.datetime_helpers import Clock, DayLike

logger = logging.getLogger(__name__)


class MorningRoutineTracker:
    """
    Habit list plus per-day completion levels.

    Invariant: habits are sorted by `order`, and orders are exactly 0..n-1.
    """

    def __init__(
        self,
        clock: Clock,
        persist: Optional[Callable[[str], bool]] = None,
        habits: Optional[List[MorningHabit]] = None,
        completions: Optional[Dict[RoutineKey, CompletionLevel]] = None
    ):
        self.clock = clock
        self._persist_hook = persist
        self.habits: List[MorningHabit] = []
        self.completions: Dict[RoutineKey, CompletionLevel] = {}
        self.replace_state(habits or [], completions or {})

    def _persist(self, slice_name: str) -> bool:
        if self._persist_hook is None:
            return True
        return self._persist_hook(slice_name)

    def replace_state(
        self,
        habits: List[MorningHabit],
        completions: Dict[RoutineKey, CompletionLevel]
    ) -> None:
        self.habits = sorted(habits, key=lambda h: h.order)
        self._renumber()
        self.completions = dict(completions)

    def _renumber(self) -> None:
        for index, habit in enumerate(self.habits):
            habit.order = index

    # ------------------------------------------------------------------
    # Habit list
    # ------------------------------------------------------------------

    def get_habit(self, habit_id: UUID) -> Optional[MorningHabit]:
        return next((h for h in self.habits if h.id == habit_id), None)

    def _require_habit(self, habit_id: UUID, operation: str) -> MorningHabit:
        habit = self.get_habit(habit_id)
        if habit is None:
            raise ValidationError(
                message=f"Unknown habit {habit_id}",
                field="habit_id",
                value=str(habit_id),
                operation=operation,
            )
        return habit

    def add_habit(self, name: str, icon: str = "sunrise.fill", color: str = "orange", goal: str = "") -> MorningHabit:
        """Append a habit at the end of the routine"""
        try:
            habit = MorningHabit(name=name, icon=icon, color=color, goal=goal, order=len(self.habits))
        except ValueError as e:
            raise ValidationError(
                message="Habit name cannot be empty",
                field="name",
                value=name,
                operation="add_habit",
                cause=e,
            )
        self.habits.append(habit)
        logger.info(f"Added morning habit {habit.id} ({habit.name})")
        self._persist(slices.MORNING_HABITS)
        return habit

    def update_habit(self, habit_id: UUID, **changes: Any) -> MorningHabit:
        """Edit name/icon/color/goal. Use move_habit() to change order."""
        habit = self._require_habit(habit_id, "update_habit")
        changes.pop("id", None)
        changes.pop("order", None)

        try:
            updated = MorningHabit.model_validate({**dict(habit), **changes})
        except ValueError as e:
            raise ValidationError(
                message=f"Invalid habit update: {e}",
                field="habit",
                value=str(habit_id),
                operation="update_habit",
                cause=e,
            )

        self.habits[self.habits.index(habit)] = updated
        self._persist(slices.MORNING_HABITS)
        return updated

    def delete_habit(self, habit_id: UUID) -> bool:
        """Remove a habit and close the gap in the ordering"""
        habit = self.get_habit(habit_id)
        if habit is None:
            return False
        self.habits.remove(habit)
        self._renumber()
        logger.info(f"Deleted morning habit {habit_id} ({habit.name})")
        self._persist(slices.MORNING_HABITS)
        return True

    def move_habit(self, habit_id: UUID, new_index: int) -> List[MorningHabit]:
        """Move a habit to a new position (0-based)"""
        habit = self._require_habit(habit_id, "move_habit")
        if not 0 <= new_index < len(self.habits):
            raise ValidationError(
                message=f"Index {new_index} out of range 0..{len(self.habits) - 1}",
                field="new_index",
                value=new_index,
                operation="move_habit",
            )
        self.habits.remove(habit)
        self.habits.insert(new_index, habit)
        self._renumber()
        self._persist(slices.MORNING_HABITS)
        return list(self.habits)

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def _key(self, habit_id: UUID, day: Optional[DayLike]) -> RoutineKey:
        calendar_day = self.clock.to_calendar_day(day) if day is not None else self.clock.today()
        return RoutineKey(habit_id, calendar_day)

    def level(self, habit_id: UUID, day: Optional[DayLike] = None) -> CompletionLevel:
        return self.completions.get(self._key(habit_id, day), CompletionLevel.NONE)

    def _set_level(self, key: RoutineKey, level: CompletionLevel) -> None:
        if level is CompletionLevel.NONE:
            self.completions.pop(key, None)
        else:
            self.completions[key] = level
        self._persist(slices.MORNING_ROUTINE_COMPLETIONS)

    def _step(self, habit_id: UUID, day: Optional[DayLike], operation: str, advance) -> CompletionLevel:
        habit = self._require_habit(habit_id, operation)
        key = self._key(habit_id, day)
        current = self.completions.get(key, CompletionLevel.NONE)

        if habit.is_track_weight:
            logger.info(f"'{habit.name}' is completed by recording a weight; ignoring {operation}")
            return current

        new_level = advance(current)
        self._set_level(key, new_level)
        return new_level

    def cycle_completion(self, habit_id: UUID, day: Optional[DayLike] = None) -> CompletionLevel:
        """Three-way cycle NONE -> PARTIAL -> FULL -> NONE"""
        return self._step(habit_id, day, "cycle_completion", CompletionLevel.next_in_cycle)

    def toggle_completion(self, habit_id: UUID, day: Optional[DayLike] = None) -> CompletionLevel:
        """Two-way toggle NONE <-> FULL (PARTIAL becomes FULL)"""
        return self._step(habit_id, day, "toggle_completion", CompletionLevel.toggled)

    def mark_weight_tracked(self, day: DayLike) -> Optional[MorningHabit]:
        """
        Mark the "Track weight" habit FULL for a day.

        Called when a weight entry is recorded. No-op when the routine has
        no such habit.
        """
        habit = next((h for h in self.habits if h.is_track_weight), None)
        if habit is None:
            return None
        self._set_level(self._key(habit.id, day), CompletionLevel.FULL)
        return habit

    def completed_count(self, day: Optional[DayLike] = None) -> int:
        """Number of habits FULL on a day"""
        return sum(1 for h in self.habits if self.level(h.id, day) is CompletionLevel.FULL)

    def day_progress(self, day: Optional[DayLike] = None) -> float:
        """Fraction (0-1) of habits FULL on a day"""
        if not self.habits:
            return 0.0
        return self.completed_count(day) / len(self.habits)

    # ------------------------------------------------------------------
    # Persistence form
    # ------------------------------------------------------------------

    def completion_records(self) -> List[RoutineCompletionRecord]:
        return [
            RoutineCompletionRecord(habit_id=key.habit_id, date=key.day, level=level)
            for key, level in sorted(self.completions.items(), key=lambda item: (item[0].day, str(item[0].habit_id)))
        ]

    @staticmethod
    def completions_from_records(records: List[RoutineCompletionRecord]) -> Dict[RoutineKey, CompletionLevel]:
        return {
            record.key: record.level
            for record in records
            if record.level is not CompletionLevel.NONE
        }
