"""
WeightLog - Daily Weight Time Series

Sparse, one-entry-per-day series kept sorted by date. Recording is an upsert
on the calendar day. Invalid or stale entries are removed only by an explicit
cleanup() pass.
"""

import logging
import math
from datetime import date
from typing import Callable, List, Optional

from skill_tracker.config import WEIGHT_MAX_KG, WEIGHT_MIN_KG, WEIGHT_RETENTION_YEARS
from skill_tracker.exceptions import ValidationError
from skill_tracker.models.weight import WeightEntry, WeightTrend
from skill_tracker.storage import slices
from skill_tracker.utils.datetime_helpers import Clock, DayLike, subtract_years

logger = logging.getLogger(__name__)

STABLE_THRESHOLD_KG = 0.1


class WeightLog:
    """Date-keyed weight entries with upsert-by-day semantics"""

    def __init__(
        self,
        clock: Clock,
        persist: Optional[Callable[[str], bool]] = None,
        entries: Optional[List[WeightEntry]] = None,
        on_recorded: Optional[Callable[[date], object]] = None
    ):
        """
        Args:
            clock: Shared clock
            persist: Autosave hook
            entries: Initial entries
            on_recorded: Called with the calendar day after each record_weight()
        """
        self.clock = clock
        self._persist_hook = persist
        self.on_recorded = on_recorded
        self.entries: List[WeightEntry] = []
        self.replace_state(entries or [])

    def _persist(self) -> bool:
        if self._persist_hook is None:
            return True
        return self._persist_hook(slices.WEIGHT_ENTRIES)

    def replace_state(self, entries: List[WeightEntry]) -> None:
        by_day = {}
        for entry in entries:
            by_day[entry.date] = entry  # later entry for a day wins
        self.entries = sorted(by_day.values(), key=lambda e: e.date)

    def record_weight(self, weight: float, day: Optional[DayLike] = None) -> WeightEntry:
        """
        Record the weight for a day, replacing any entry already on that day.

        Out-of-range weights are accepted here and removed by cleanup().

        Raises:
            ValidationError: weight is not a positive finite number
        """
        is_number = isinstance(weight, (int, float)) and not isinstance(weight, bool)
        if not is_number or not math.isfinite(weight) or weight <= 0:
            raise ValidationError(
                message="Weight must be a positive number of kilograms",
                field="weight",
                value=weight,
                operation="record_weight",
            )

        calendar_day = self.clock.to_calendar_day(day) if day is not None else self.clock.today()
        entry = WeightEntry(date=calendar_day, weight=float(weight))

        self.entries = [e for e in self.entries if e.date != calendar_day]
        self.entries.append(entry)
        self.entries.sort(key=lambda e: e.date)

        logger.info(f"Recorded weight {entry.weight:.1f} kg for {calendar_day.isoformat()}")
        self._persist()

        if self.on_recorded is not None:
            self.on_recorded(calendar_day)

        return entry

    def weight_on(self, day: DayLike) -> Optional[float]:
        calendar_day = self.clock.to_calendar_day(day)
        entry = next((e for e in self.entries if e.date == calendar_day), None)
        return entry.weight if entry else None

    def latest_entry(self) -> Optional[WeightEntry]:
        return self.entries[-1] if self.entries else None

    def entries_between(self, start: DayLike, end: DayLike) -> List[WeightEntry]:
        """Entries with start <= date <= end, oldest first"""
        first = self.clock.to_calendar_day(start)
        last = self.clock.to_calendar_day(end)
        return [e for e in self.entries if first <= e.date <= last]

    def trend(self, window: int = 7) -> Optional[WeightTrend]:
        """
        Change between the first and last of the most recent `window` entries.

        Returns:
            WeightTrend, or None with fewer than two entries
        """
        recent = self.entries[-window:] if window > 0 else []
        if len(recent) < 2:
            return None

        difference = recent[-1].weight - recent[0].weight
        if abs(difference) < STABLE_THRESHOLD_KG:
            direction = "stable"
        elif difference > 0:
            direction = "up"
        else:
            direction = "down"

        return WeightTrend(
            difference_kg=round(difference, 2),
            direction=direction,
            first_date=recent[0].date,
            last_date=recent[-1].date,
            sample_size=len(recent),
        )

    def cleanup(self, now: Optional[DayLike] = None) -> int:
        """
        Remove entries older than the retention window or outside the valid
        weight range, then re-sort.

        Args:
            now: Reference time (defaults to the clock's today)

        Returns:
            Number of entries removed
        """
        today = self.clock.to_calendar_day(now) if now is not None else self.clock.today()
        cutoff = subtract_years(today, WEIGHT_RETENTION_YEARS)

        kept = [
            e for e in self.entries
            if e.date >= cutoff and WEIGHT_MIN_KG <= e.weight <= WEIGHT_MAX_KG
        ]
        removed = len(self.entries) - len(kept)
        self.entries = sorted(kept, key=lambda e: e.date)

        if removed:
            logger.info(f"Weight cleanup removed {removed} entr{'y' if removed == 1 else 'ies'} (cutoff {cutoff.isoformat()})")
            self._persist()

        return removed
