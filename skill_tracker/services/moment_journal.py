"""MomentJournal - memorable moments, optionally linked to a skill"""

import logging
from typing import Callable, List, Optional
from uuid import UUID

from skill_tracker.exceptions import ValidationError
from skill_tracker.models.moment import MemorableMoment, MomentCategory
from skill_tracker.storage import slices
from skill_tracker.utils.datetime_helpers import Clock, DayLike

logger = logging.getLogger(__name__)


class MomentJournal:
    """Append-mostly list of memorable moments, newest last"""

    def __init__(
        self,
        clock: Clock,
        persist: Optional[Callable[[str], bool]] = None,
        moments: Optional[List[MemorableMoment]] = None
    ):
        self.clock = clock
        self._persist_hook = persist
        self.moments: List[MemorableMoment] = list(moments or [])

    def _persist(self) -> bool:
        if self._persist_hook is None:
            return True
        return self._persist_hook(slices.MEMORABLE_MOMENTS)

    def replace_state(self, moments: List[MemorableMoment]) -> None:
        self.moments = list(moments)

    def add_moment(
        self,
        title: str,
        description: str = "",
        category: MomentCategory = MomentCategory.PERSONAL,
        skill_id: Optional[UUID] = None,
        day: Optional[DayLike] = None
    ) -> MemorableMoment:
        calendar_day = self.clock.to_calendar_day(day) if day is not None else self.clock.today()
        try:
            moment = MemorableMoment(
                title=title,
                description=description,
                category=category,
                skill_id=skill_id,
                date=calendar_day,
            )
        except ValueError as e:
            raise ValidationError(
                message="Moment title cannot be empty",
                field="title",
                value=title,
                operation="add_moment",
                cause=e,
            )
        self.moments.append(moment)
        self._persist()
        return moment

    def remove_moment(self, moment_id: UUID) -> bool:
        before = len(self.moments)
        self.moments = [m for m in self.moments if m.id != moment_id]
        if len(self.moments) == before:
            return False
        self._persist()
        return True

    def moments_for_skill(self, skill_id: UUID) -> List[MemorableMoment]:
        return sorted((m for m in self.moments if m.skill_id == skill_id), key=lambda m: m.date)
