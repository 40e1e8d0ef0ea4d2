"""Persisted state slices: one key and one TypeAdapter per collection"""
from datetime import date
from typing import Dict, List
from uuid import UUID

from pydantic import TypeAdapter

from skill_tracker.models.completion import DailyCompletion
from skill_tracker.models.moment import MemorableMoment
from skill_tracker.models.routine import MorningHabit, RoutineCompletionRecord
from skill_tracker.models.skill import Skill, SkillCategory
from skill_tracker.models.weight import WeightEntry

SKILLS = "skills"
DAILY_COMPLETIONS = "daily_completions"
CUSTOM_CATEGORIES = "custom_categories"
COMPLETED_TASK_IDS = "completed_task_ids"
MORNING_ROUTINE_COMPLETIONS = "morning_routine_completions"
MORNING_HABITS = "morning_habits"
MEMORABLE_MOMENTS = "memorable_moments"
ROLLOVERS = "rollovers"
WEIGHT_ENTRIES = "weight_entries"

SLICE_ADAPTERS: Dict[str, TypeAdapter] = {
    SKILLS: TypeAdapter(List[Skill]),
    DAILY_COMPLETIONS: TypeAdapter(List[DailyCompletion]),
    CUSTOM_CATEGORIES: TypeAdapter(List[SkillCategory]),
    COMPLETED_TASK_IDS: TypeAdapter(List[UUID]),
    MORNING_ROUTINE_COMPLETIONS: TypeAdapter(List[RoutineCompletionRecord]),
    MORNING_HABITS: TypeAdapter(List[MorningHabit]),
    MEMORABLE_MOMENTS: TypeAdapter(List[MemorableMoment]),
    # Stored with string keys so the blob stays plain JSON
    ROLLOVERS: TypeAdapter(Dict[str, date]),
    WEIGHT_ENTRIES: TypeAdapter(List[WeightEntry]),
}

ALL_SLICES = tuple(SLICE_ADAPTERS)
