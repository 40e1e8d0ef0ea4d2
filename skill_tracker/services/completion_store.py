"""
CompletionStore - Skills and Daily Completion Records

Single source of truth for skills and their per-day completion records.
Also maintains the "completed today" id set, which is always derivable from
today's FULL records.
"""

import logging
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple
from uuid import UUID

from skill_tracker.config import MASTERED_THRESHOLD
from skill_tracker.exceptions import ValidationError
from skill_tracker.models.completion import CompletionLevel, DailyCompletion, SkillProgress
from skill_tracker.models.skill import Skill, SkillCategory
from skill_tracker.storage import slices
from skill_tracker.tracking.streaks import build_skill_progress
from skill_tracker.utils.datetime_helpers import Clock, DayLike

logger = logging.getLogger(__name__)

PersistHook = Callable[[str], bool]


class CompletionStore:
    """
    Store for skills, custom categories and completion history.

    Invariants:
    - At most one DailyCompletion per (skill_id, calendar day)
    - completed_task_ids == {skill_id | today's record is FULL}
    """

    def __init__(
        self,
        clock: Clock,
        persist: Optional[PersistHook] = None,
        skills: Optional[List[Skill]] = None,
        completions: Optional[List[DailyCompletion]] = None,
        custom_categories: Optional[List[SkillCategory]] = None
    ):
        """
        Initialize CompletionStore.

        Args:
            clock: Shared clock supplying "today"
            persist: Autosave hook called with the slice name after each mutation
            skills: Initial skills
            completions: Initial completion history
            custom_categories: Initial user-created categories
        """
        self.clock = clock
        self._persist_hook = persist
        self.skills: List[Skill] = []
        self.completions: List[DailyCompletion] = []
        self.custom_categories: List[SkillCategory] = []
        self.completed_task_ids: Set[UUID] = set()
        self._index: Dict[Tuple[UUID, date], DailyCompletion] = {}
        self.replace_state(skills or [], completions or [], custom_categories or [])

    # ------------------------------------------------------------------
    # State management
    # ------------------------------------------------------------------

    def replace_state(
        self,
        skills: List[Skill],
        completions: List[DailyCompletion],
        custom_categories: List[SkillCategory]
    ) -> None:
        """Swap in a whole new state (load/import). Does not persist."""
        self.skills = list(skills)
        self.custom_categories = list(custom_categories)
        self.completions = []
        self._index = {}

        duplicates = 0
        for completion in completions:
            key = (completion.skill_id, completion.date)
            existing = self._index.get(key)
            if existing is not None:
                # Later records win
                existing.set_level(completion.completion_level)
                duplicates += 1
                continue
            self._index[key] = completion
            self.completions.append(completion)

        if duplicates:
            logger.warning(f"Collapsed {duplicates} duplicate completion record(s) while loading")

        self.rebuild_completed_task_ids_from_history(persist=False)

    def _persist(self, slice_name: str) -> bool:
        if self._persist_hook is None:
            return True
        return self._persist_hook(slice_name)

    # ------------------------------------------------------------------
    # Completions
    # ------------------------------------------------------------------

    def upsert_completion(self, skill_id: UUID, day: DayLike, level: CompletionLevel) -> DailyCompletion:
        """
        Record a skill's completion level for one calendar day.

        Replaces the existing record for (skill_id, day) in place, otherwise
        appends a new one. Touching today also updates completed_task_ids.

        Args:
            skill_id: Skill the record belongs to
            day: Any date/datetime; normalized to its calendar day
            level: New completion level

        Returns:
            The (single) record for (skill_id, day)
        """
        calendar_day = self.clock.to_calendar_day(day)
        today = self.clock.today()
        key = (skill_id, calendar_day)

        record = self._index.get(key)
        if record is not None:
            record.set_level(level)
        else:
            record = DailyCompletion(
                skill_id=skill_id,
                date=calendar_day,
                is_completed=level is CompletionLevel.FULL,
                completion_level=level,
            )
            self._index[key] = record
            self.completions.append(record)

        logger.debug(f"Skill {skill_id} on {calendar_day.isoformat()}: {level.value}")

        # In-memory state is complete before any write is attempted
        touches_today = calendar_day == today
        if touches_today:
            if level is CompletionLevel.FULL:
                self.completed_task_ids.add(skill_id)
            else:
                self.completed_task_ids.discard(skill_id)

        self._persist(slices.DAILY_COMPLETIONS)
        if touches_today:
            self._persist(slices.COMPLETED_TASK_IDS)

        return record

    def toggle_today(self, skill_id: UUID) -> CompletionLevel:
        """
        Flip today's completion between FULL and NONE.

        PARTIAL is treated as not done and becomes FULL.

        Returns:
            The new level
        """
        today = self.clock.today()
        new_level = self.level_for(skill_id, today).toggled()
        self.upsert_completion(skill_id, today, new_level)
        return new_level

    def level_for(self, skill_id: UUID, day: DayLike) -> CompletionLevel:
        """Completion level for one day (NONE when there is no record)"""
        record = self._index.get((skill_id, self.clock.to_calendar_day(day)))
        return record.completion_level if record else CompletionLevel.NONE

    def completions_for(self, skill_id: UUID) -> List[DailyCompletion]:
        return [c for c in self.completions if c.skill_id == skill_id]

    def rebuild_completed_task_ids_from_history(self, persist: bool = True) -> Set[UUID]:
        """
        Recompute completed_task_ids from today's FULL records.

        Used after load or import, where a stored id set may be missing,
        stale or inconsistent with the history.
        """
        today = self.clock.today()
        self.completed_task_ids = {
            c.skill_id for c in self.completions
            if c.date == today and c.completion_level is CompletionLevel.FULL
        }
        if persist:
            self._persist(slices.COMPLETED_TASK_IDS)
        return set(self.completed_task_ids)

    def set_completed_task_ids(self, skill_ids: Iterable[UUID]) -> Set[UUID]:
        """
        Directly set which known skills are fully completed today.

        Rewrites today's records so the history stays the source of truth:
        listed skills become FULL, unlisted skills that were FULL become NONE,
        PARTIAL records of unlisted skills are left alone. Unknown ids are
        ignored.
        """
        wanted = set(skill_ids)
        today = self.clock.today()
        known = {skill.id for skill in self.skills}

        ignored = wanted - known
        if ignored:
            logger.warning(f"Ignoring {len(ignored)} unknown skill id(s) in completed set")

        for skill in self.skills:
            current = self.level_for(skill.id, today)
            if skill.id in wanted and current is not CompletionLevel.FULL:
                self.upsert_completion(skill.id, today, CompletionLevel.FULL)
            elif skill.id not in wanted and current is CompletionLevel.FULL:
                self.upsert_completion(skill.id, today, CompletionLevel.NONE)

        return self.rebuild_completed_task_ids_from_history()

    # ------------------------------------------------------------------
    # Progress queries
    # ------------------------------------------------------------------

    def get_skill(self, skill_id: UUID) -> Optional[Skill]:
        return next((s for s in self.skills if s.id == skill_id), None)

    def get_progress(self, skill_id: UUID) -> Optional[SkillProgress]:
        """
        Progress for one skill.

        Returns:
            SkillProgress, or None if the skill is unknown
        """
        skill = self.get_skill(skill_id)
        if skill is None:
            return None
        return build_skill_progress(skill, self.completions, self.clock.today())

    def get_all_progress(self) -> List[SkillProgress]:
        """One SkillProgress per known skill, in skill-list order"""
        today = self.clock.today()
        return [build_skill_progress(skill, self.completions, today) for skill in self.skills]

    def dashboard_summary(self) -> Dict[str, Any]:
        """
        Headline numbers for the task list screen.

        Returns:
            {
                'best_current_streak': int,  # highest current streak of any skill
                'tasks_done_today': int,
                'mastered_skills': int,  # completion percentage >= MASTERED_THRESHOLD
                'today_percentage': float  # done today / all skills
            }
        """
        all_progress = self.get_all_progress()
        known = {skill.id for skill in self.skills}
        tasks_done = len(self.completed_task_ids & known)
        total = len(self.skills)

        return {
            "best_current_streak": max((p.current_streak for p in all_progress), default=0),
            "tasks_done_today": tasks_done,
            "mastered_skills": sum(1 for p in all_progress if p.completion_percentage >= MASTERED_THRESHOLD),
            "today_percentage": tasks_done / total * 100 if total else 0.0,
        }

    # ------------------------------------------------------------------
    # Skills and categories
    # ------------------------------------------------------------------

    def active_skills(self, day: Optional[DayLike] = None) -> List[Skill]:
        on = self.clock.to_calendar_day(day) if day is not None else self.clock.today()
        return [s for s in self.skills if s.is_active(on)]

    def archived_skills(self, day: Optional[DayLike] = None) -> List[Skill]:
        on = self.clock.to_calendar_day(day) if day is not None else self.clock.today()
        return [s for s in self.skills if s.is_archived(on)]

    def add_skill(self, skill: Skill) -> Skill:
        """
        Append a skill to the active set.

        A skill built without an explicit start_date starts on the clock's
        today, not the system date.

        Raises:
            ValidationError: A skill with the same id already exists
        """
        if self.get_skill(skill.id) is not None:
            raise ValidationError(
                message=f"Skill {skill.id} already exists",
                field="id",
                value=str(skill.id),
                operation="add_skill",
            )
        if "start_date" not in skill.model_fields_set:
            skill = skill.model_copy(update={"start_date": self.clock.today()})
        self.skills.append(skill)
        logger.info(f"Added skill {skill.id} ({skill.name})")
        self._persist(slices.SKILLS)
        return skill

    def update_skill(self, skill_id: UUID, **changes: Any) -> Skill:
        """
        Edit a skill's attributes (the id never changes).

        Raises:
            ValidationError: Unknown skill or invalid new values
        """
        for index, skill in enumerate(self.skills):
            if skill.id != skill_id:
                continue
            changes.pop("id", None)
            try:
                updated = Skill.model_validate({**dict(skill), **changes})
            except ValueError as e:
                raise ValidationError(
                    message=f"Invalid skill update: {e}",
                    field="skill",
                    value=str(skill_id),
                    operation="update_skill",
                    cause=e,
                )
            self.skills[index] = updated
            self._persist(slices.SKILLS)
            return updated

        raise ValidationError(
            message=f"Unknown skill {skill_id}",
            field="skill_id",
            value=str(skill_id),
            operation="update_skill",
        )

    def remove_skill(self, skill_id: UUID) -> bool:
        """
        Remove a skill from the active set.

        Its completion history is kept as orphaned records.

        Returns:
            True if a skill was removed
        """
        before = len(self.skills)
        self.skills = [s for s in self.skills if s.id != skill_id]
        if len(self.skills) == before:
            return False

        self._persist(slices.SKILLS)
        if skill_id in self.completed_task_ids:
            self.completed_task_ids.discard(skill_id)
            self._persist(slices.COMPLETED_TASK_IDS)

        logger.info(f"Removed skill {skill_id}; history kept")
        return True

    def add_custom_category(self, category: SkillCategory) -> SkillCategory:
        if not category.is_custom:
            category = category.model_copy(update={"is_custom": True})
        self.custom_categories.append(category)
        self._persist(slices.CUSTOM_CATEGORIES)
        return category

    def all_categories(self) -> List[SkillCategory]:
        """Predefined categories followed by custom ones"""
        return SkillCategory.predefined() + list(self.custom_categories)
