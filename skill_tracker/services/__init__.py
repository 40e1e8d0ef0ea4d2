"""
Service Layer Package

Stateful components of the tracking engine. Each one updates in-memory state
and then calls its injected autosave hook with the name of the slice it
changed.

Core Services:
- CompletionStore: skills, categories, daily completion records
- RolloverEngine: deferral of tasks to the next day, task visibility
- MorningRoutineTracker: ordered morning habits and their completion
- WeightLog: one weight per calendar day
- MomentJournal: memorable moments

TrackerEngine wires them together around one clock and one store.
"""

from skill_tracker.services.completion_store import CompletionStore
from skill_tracker.services.rollover import RolloverEngine
from skill_tracker.services.morning_routine import MorningRoutineTracker
from skill_tracker.services.weight_log import WeightLog
from skill_tracker.services.moment_journal import MomentJournal
from skill_tracker.services.engine import TrackerEngine, create_engine

__all__ = [
    "CompletionStore",
    "RolloverEngine",
    "MorningRoutineTracker",
    "WeightLog",
    "MomentJournal",
    "TrackerEngine",
    "create_engine",
]
