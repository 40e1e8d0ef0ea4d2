"""
RolloverEngine - Cross-Midnight Task Deferral

A rolled-over skill is force-visible on the day it was deferred to, whatever
its own time frame says. Rollover never touches completion records.

Lifecycle of an entry:
- rollover_task(): entry = today
- next process start: yesterday's entries are carried to today
- any entry older than yesterday is purged
"""

import logging
from datetime import date
from typing import Callable, Dict, List, Optional
from uuid import UUID

from skill_tracker.models.completion import CompletionLevel
from skill_tracker.models.skill import Skill
from skill_tracker.services.completion_store import CompletionStore
from skill_tracker.storage import slices
from skill_tracker.utils.datetime_helpers import Clock, DayLike

logger = logging.getLogger(__name__)


class RolloverEngine:
    """Tracks skills explicitly deferred to a day"""

    def __init__(
        self,
        clock: Clock,
        completion_store: CompletionStore,
        persist: Optional[Callable[[str], bool]] = None,
        rollovers: Optional[Dict[UUID, date]] = None
    ):
        self.clock = clock
        self.completion_store = completion_store
        self._persist_hook = persist
        self.rollovers: Dict[UUID, date] = dict(rollovers or {})

    def _persist(self) -> bool:
        if self._persist_hook is None:
            return True
        return self._persist_hook(slices.ROLLOVERS)

    def replace_state(self, rollovers: Dict[UUID, date]) -> None:
        self.rollovers = dict(rollovers)

    def rollover_task(self, skill_id: UUID) -> date:
        """Defer a skill to today. Returns the day it is now pinned to."""
        today = self.clock.today()
        self.rollovers[skill_id] = today
        logger.info(f"Rolled over skill {skill_id} to {today.isoformat()}")
        self._persist()
        return today

    def cancel_rollover(self, skill_id: UUID) -> bool:
        if self.rollovers.pop(skill_id, None) is None:
            return False
        self._persist()
        return True

    def rollover_incomplete_tasks(self) -> List[UUID]:
        """
        Roll over every rollover-eligible skill not FULL today

        Returns:
            Ids of the skills that were rolled over
        """
        today = self.clock.today()
        rolled = [
            skill.id for skill in self.completion_store.skills
            if skill.allows_rollover
            and self.completion_store.level_for(skill.id, today) is not CompletionLevel.FULL
        ]
        if not rolled:
            return []

        for skill_id in rolled:
            self.rollovers[skill_id] = today
        logger.info(f"Rolled over {len(rolled)} incomplete task(s) to {today.isoformat()}")
        self._persist()
        return rolled

    def is_rolled_over(self, skill_id: UUID, day: DayLike) -> bool:
        return self.rollovers.get(skill_id) == self.clock.to_calendar_day(day)

    def should_show_task(self, skill_id: UUID, day: DayLike) -> bool:
        """
        Whether a skill belongs on the task list for a day

        True if the skill is rolled over to that day, or its own time frame
        makes it active on that day.
        """
        calendar_day = self.clock.to_calendar_day(day)
        if self.rollovers.get(skill_id) == calendar_day:
            return True

        skill = self.completion_store.get_skill(skill_id)
        return skill is not None and skill.is_active(calendar_day)

    def visible_skills(self, day: Optional[DayLike] = None) -> List[Skill]:
        """Skills on the task list for a day, in skill-list order"""
        on = self.clock.to_calendar_day(day) if day is not None else self.clock.today()
        return [s for s in self.completion_store.skills if self.should_show_task(s.id, on)]

    def process_rollover_on_load(self) -> Dict[str, int]:
        """
        Age the rollover map once per process start.

        Entries dated yesterday move to today; entries older than yesterday
        are dropped. Entries for today or later are kept.

        Returns:
            {'carried_forward': int, 'purged': int}
        """
        today = self.clock.today()
        yesterday = self.clock.yesterday()

        carried = 0
        purged = 0
        aged: Dict[UUID, date] = {}

        for skill_id, day in self.rollovers.items():
            if day == yesterday:
                aged[skill_id] = today
                carried += 1
            elif day < yesterday:
                purged += 1
            else:
                aged[skill_id] = day

        self.rollovers = aged

        if carried or purged:
            logger.info(f"Rollover on load: {carried} carried forward, {purged} purged")
            self._persist()

        return {"carried_forward": carried, "purged": purged}
