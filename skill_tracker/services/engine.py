"""
TrackerEngine - Explicit State Object

Constructed once per process. Owns every component, loads their state from a
KeyValueStore and saves each slice through one autosave hook.

Load policy: every slice is decoded independently; a missing or invalid slice
falls back to its default instead of aborting the load.
Save policy: failed writes are logged and otherwise ignored; the in-memory
state stays authoritative and the next successful write reconciles storage.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
import logging

from skill_tracker.models.skill import default_skills
from skill_tracker.models.routine import default_morning_habits
from skill_tracker.services.completion_store import CompletionStore
from skill_tracker.services.moment_journal import MomentJournal
from skill_tracker.services.morning_routine import MorningRoutineTracker
from skill_tracker.services.rollover import RolloverEngine
from skill_tracker.services.weight_log import WeightLog
from skill_tracker.storage import slices
from skill_tracker.storage.kv_store import KeyValueStore
from skill_tracker.storage.repository import StateRepository
from skill_tracker.storage.snapshot import (
    Snapshot,
    decode_snapshot,
    encode_snapshot,
    parse_rollovers,
    stringify_rollovers,
)
from skill_tracker.utils.datetime_helpers import Clock

logger = logging.getLogger(__name__)


@dataclass
class TrackerEngine:
    """
    Wires the completion store, rollover engine, morning routine tracker,
    weight log and moment journal around one clock and one repository.

    With autosave=False, mutators do not write; call persist()/persist_all().
    """

    store: KeyValueStore
    clock: Clock = field(default_factory=Clock)
    autosave: bool = True
    seed_defaults: bool = True

    repository: StateRepository = field(init=False, repr=False)
    completion_store: CompletionStore = field(init=False, repr=False)
    rollover_engine: RolloverEngine = field(init=False, repr=False)
    morning_routine: MorningRoutineTracker = field(init=False, repr=False)
    weight_log: WeightLog = field(init=False, repr=False)
    moment_journal: MomentJournal = field(init=False, repr=False)

    def __post_init__(self):
        self.repository = StateRepository(self.store)
        hook = self._autosave_hook

        self.completion_store = CompletionStore(self.clock, persist=hook)
        self.rollover_engine = RolloverEngine(self.clock, self.completion_store, persist=hook)
        self.morning_routine = MorningRoutineTracker(self.clock, persist=hook)
        self.weight_log = WeightLog(
            self.clock,
            persist=hook,
            on_recorded=self.morning_routine.mark_weight_tracked,
        )
        self.moment_journal = MomentJournal(self.clock, persist=hook)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _autosave_hook(self, slice_name: str) -> bool:
        if not self.autosave:
            return True
        return self.persist(slice_name)

    def _slice_value(self, slice_name: str) -> Any:
        values: Dict[str, Callable[[], Any]] = {
            slices.SKILLS: lambda: self.completion_store.skills,
            slices.DAILY_COMPLETIONS: lambda: self.completion_store.completions,
            slices.CUSTOM_CATEGORIES: lambda: self.completion_store.custom_categories,
            slices.COMPLETED_TASK_IDS: lambda: sorted(self.completion_store.completed_task_ids, key=str),
            slices.MORNING_ROUTINE_COMPLETIONS: self.morning_routine.completion_records,
            slices.MORNING_HABITS: lambda: self.morning_routine.habits,
            slices.MEMORABLE_MOMENTS: lambda: self.moment_journal.moments,
            slices.ROLLOVERS: lambda: stringify_rollovers(self.rollover_engine.rollovers),
            slices.WEIGHT_ENTRIES: lambda: self.weight_log.entries,
        }
        return values[slice_name]()

    def persist(self, slice_name: str) -> bool:
        """
        Write one slice to the store.

        Returns:
            False if the write failed (state in memory is unchanged)
        """
        ok = self.repository.save(slice_name, slices.SLICE_ADAPTERS[slice_name], self._slice_value(slice_name))
        if not ok:
            logger.warning(f"Could not persist '{slice_name}'; keeping in-memory state until the next write")
        return ok

    def persist_all(self) -> bool:
        """Write every slice. Returns True only if all writes succeeded."""
        results = [self.persist(name) for name in slices.ALL_SLICES]
        return all(results)

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------

    def _load(self, slice_name: str) -> Optional[Any]:
        return self.repository.load(slice_name, slices.SLICE_ADAPTERS[slice_name])

    def load(self) -> Dict[str, Any]:
        """
        Load every slice from the store, then reconcile derived state.

        Steps:
        1. Decode each slice; absent/invalid -> default (seed data for skills
           and habits when seed_defaults is set)
        2. Rebuild completed-today ids from the history
        3. Age the rollover map

        Returns:
            {'missing': [slice names that fell back to defaults],
             'rollover': process_rollover_on_load() result}
        """
        missing: List[str] = []

        def load_or_default(slice_name, default):
            value = self._load(slice_name)
            if value is None:
                missing.append(slice_name)
                return default()
            return value

        today = self.clock.today()
        skills = load_or_default(slices.SKILLS, lambda: default_skills(today) if self.seed_defaults else [])
        completions = load_or_default(slices.DAILY_COMPLETIONS, list)
        categories = load_or_default(slices.CUSTOM_CATEGORIES, list)
        habits = load_or_default(
            slices.MORNING_HABITS,
            lambda: default_morning_habits() if self.seed_defaults else [],
        )
        routine_records = load_or_default(slices.MORNING_ROUTINE_COMPLETIONS, list)
        moments = load_or_default(slices.MEMORABLE_MOMENTS, list)
        rollovers = load_or_default(slices.ROLLOVERS, dict)
        weights = load_or_default(slices.WEIGHT_ENTRIES, list)

        # The stored id set is only a cache; the history decides
        if self._load(slices.COMPLETED_TASK_IDS) is None:
            missing.append(slices.COMPLETED_TASK_IDS)

        self.completion_store.replace_state(skills, completions, categories)
        self.morning_routine.replace_state(habits, MorningRoutineTracker.completions_from_records(routine_records))
        self.moment_journal.replace_state(moments)
        self.rollover_engine.replace_state(parse_rollovers(rollovers))
        self.weight_log.replace_state(weights)

        self.completion_store.rebuild_completed_task_ids_from_history()
        rollover_stats = self.rollover_engine.process_rollover_on_load()

        logger.info(
            f"Loaded {len(skills)} skill(s), {len(self.completion_store.completions)} completion(s), "
            f"{len(self.morning_routine.habits)} habit(s), {len(self.weight_log.entries)} weight entr(ies)"
        )
        if missing:
            logger.info(f"Using defaults for: {', '.join(missing)}")

        return {"missing": missing, "rollover": rollover_stats}

    # ------------------------------------------------------------------
    # Export / import
    # ------------------------------------------------------------------

    def snapshot(self) -> Snapshot:
        return Snapshot(
            skills=list(self.completion_store.skills),
            daily_completions=list(self.completion_store.completions),
            custom_categories=list(self.completion_store.custom_categories),
            morning_routine_completions=self.morning_routine.completion_records(),
            morning_habits=list(self.morning_routine.habits),
            memorable_moments=list(self.moment_journal.moments),
            rollovers=stringify_rollovers(self.rollover_engine.rollovers),
            weight_entries=list(self.weight_log.entries),
        )

    def export_snapshot(self) -> bytes:
        """Whole state as a pretty, key-sorted JSON document"""
        return encode_snapshot(self.snapshot())

    def import_snapshot(self, data: bytes) -> Snapshot:
        """
        Replace the whole state with an exported document.

        The document is fully validated before anything changes; on
        FormatError the current state is untouched. Completed-today ids are
        rebuilt from the imported history.

        Raises:
            FormatError: Not UTF-8, not JSON, or schema mismatch
        """
        snapshot = decode_snapshot(data)

        # Validate-then-swap: everything below works on already-valid models
        self.completion_store.replace_state(
            snapshot.skills,
            snapshot.daily_completions,
            snapshot.custom_categories,
        )
        self.morning_routine.replace_state(
            snapshot.morning_habits,
            MorningRoutineTracker.completions_from_records(snapshot.morning_routine_completions),
        )
        self.moment_journal.replace_state(snapshot.memorable_moments)
        self.rollover_engine.replace_state(parse_rollovers(snapshot.rollovers))
        self.weight_log.replace_state(snapshot.weight_entries)
        self.completion_store.rebuild_completed_task_ids_from_history(persist=False)

        logger.info(
            f"Imported snapshot: {len(snapshot.skills)} skill(s), "
            f"{len(snapshot.daily_completions)} completion(s)"
        )

        if self.autosave:
            self.persist_all()

        return snapshot

    # ------------------------------------------------------------------
    # Cross-component operations
    # ------------------------------------------------------------------

    def remove_skill(self, skill_id) -> bool:
        """Remove a skill and any pending rollover for it (history is kept)"""
        removed = self.completion_store.remove_skill(skill_id)
        if removed:
            self.rollover_engine.cancel_rollover(skill_id)
        return removed


def create_engine(store: KeyValueStore, clock: Optional[Clock] = None, **kwargs: Any) -> TrackerEngine:
    """Construct and load an engine"""
    engine = TrackerEngine(store=store, clock=clock or Clock(), **kwargs)
    engine.load()
    return engine

