"""
Snapshot codec

One JSON document holding the whole engine state. The same collections are
persisted key-by-key on device; the document form is used for manual
export/import.

Export is deterministic: pretty-printed, keys sorted, lists in state order.
Import is strict: any UTF-8, JSON or schema problem raises FormatError.
"""

import json
import logging
from datetime import date
from typing import Any, Dict, List
from uuid import UUID

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from skill_tracker.exceptions import FormatError
from skill_tracker.models.completion import DailyCompletion
from skill_tracker.models.moment import MemorableMoment
from skill_tracker.models.routine import MorningHabit, RoutineCompletionRecord
from skill_tracker.models.skill import Skill, SkillCategory
from skill_tracker.models.weight import WeightEntry
from skill_tracker.utils.datetime_helpers import coerce_calendar_day

logger = logging.getLogger(__name__)


class Snapshot(BaseModel):
    """Complete serialized state of the engine"""
    skills: List[Skill]
    daily_completions: List[DailyCompletion]
    custom_categories: List[SkillCategory]
    morning_routine_completions: List[RoutineCompletionRecord] = Field(default_factory=list)
    morning_habits: List[MorningHabit] = Field(default_factory=list)
    memorable_moments: List[MemorableMoment] = Field(default_factory=list)
    rollovers: Dict[str, date] = Field(default_factory=dict)  # stringified skill id -> day
    weight_entries: List[WeightEntry] = Field(default_factory=list)

    @field_validator('rollovers', mode='before')
    @classmethod
    def normalize_rollover_days(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {str(k): coerce_calendar_day(day) for k, day in v.items()}
        return v


def stringify_rollovers(rollovers: Dict[UUID, date]) -> Dict[str, date]:
    return {str(skill_id): day for skill_id, day in rollovers.items()}


def parse_rollovers(raw: Dict[str, date]) -> Dict[UUID, date]:
    """
    Convert string keys back to skill ids

    Keys that are not valid UUIDs are dropped.
    """
    parsed: Dict[UUID, date] = {}
    for key, day in raw.items():
        try:
            parsed[UUID(key)] = day
        except ValueError:
            logger.warning(f"Dropping rollover entry with invalid skill id: {key!r}")
    return parsed


def encode_snapshot(snapshot: Snapshot) -> bytes:
    """Serialize a snapshot to pretty, key-sorted UTF-8 JSON"""
    document = snapshot.model_dump(mode="json")
    return json.dumps(document, indent=2, sort_keys=True, ensure_ascii=False).encode("utf-8")


def decode_snapshot(data: bytes) -> Snapshot:
    """
    Parse and validate a snapshot document

    Args:
        data: Raw bytes of an exported document

    Returns:
        Validated Snapshot

    Raises:
        FormatError: Not UTF-8, not JSON, or not the snapshot schema
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FormatError(
            message="Snapshot is not valid UTF-8",
            stage="utf8",
            operation="import_snapshot",
            cause=e,
        )

    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise FormatError(
            message=f"Snapshot is not valid JSON: {e.msg} (line {e.lineno})",
            stage="json",
            operation="import_snapshot",
            cause=e,
        )

    if not isinstance(document, dict):
        raise FormatError(
            message=f"Snapshot must be a JSON object, got {type(document).__name__}",
            stage="schema",
            operation="import_snapshot",
        )

    try:
        return Snapshot.model_validate(document)
    except PydanticValidationError as e:
        raise FormatError(
            message=f"Snapshot does not match the expected schema: {e.error_count()} error(s)",
            stage="schema",
            operation="import_snapshot",
            cause=e,
        )
