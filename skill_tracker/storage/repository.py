"""
Typed access to persisted state

StateRepository is the boundary where storage and decode failures stop:
- load() returns None when a key is absent or its blob does not validate
- save() returns False when serialization or the store write fails

The engine chooses what to do with those results (use a default, carry on).
"""

import logging
from typing import Any, Dict, Optional, TypeVar

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from skill_tracker.config import STORAGE_KEY_PREFIX
from skill_tracker.exceptions import StorageError
from skill_tracker.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StateRepository:
    """Load/save pydantic-typed values under prefixed keys"""

    def __init__(self, store: KeyValueStore, prefix: str = STORAGE_KEY_PREFIX):
        self.store = store
        self.prefix = prefix
        self._stats = {
            "loads": 0,
            "load_misses": 0,
            "load_errors": 0,
            "saves": 0,
            "save_errors": 0,
        }

    def full_key(self, key: str) -> str:
        return f"{self.prefix}.{key}" if self.prefix else key

    def load(self, key: str, adapter: TypeAdapter[T]) -> Optional[T]:
        """
        Read and validate one slice

        Args:
            key: Slice name (unprefixed)
            adapter: TypeAdapter describing the stored value

        Returns:
            The decoded value, or None if absent or invalid
        """
        full_key = self.full_key(key)
        self._stats["loads"] += 1

        try:
            raw = self.store.get(full_key)
        except StorageError:
            self._stats["load_errors"] += 1
            return None
        except Exception as e:
            self._stats["load_errors"] += 1
            logger.error(f"Store read failed for {full_key}: {e}", exc_info=True)
            return None

        if raw is None:
            self._stats["load_misses"] += 1
            logger.debug(f"No stored value for {full_key}")
            return None

        try:
            return adapter.validate_json(raw)
        except PydanticValidationError as e:
            self._stats["load_errors"] += 1
            logger.warning(f"Discarding undecodable value for {full_key}: {e.error_count()} error(s)")
            return None

    def save(self, key: str, adapter: TypeAdapter[T], value: T) -> bool:
        """
        Serialize and write one slice

        Returns:
            True if the store accepted the write
        """
        full_key = self.full_key(key)

        try:
            payload = adapter.dump_json(value)
        except (PydanticValidationError, ValueError, TypeError) as e:
            self._stats["save_errors"] += 1
            logger.error(f"Failed to serialize {full_key}: {e}", exc_info=True)
            return False

        try:
            self.store.set(full_key, payload)
        except StorageError:
            self._stats["save_errors"] += 1
            return False
        except Exception as e:
            self._stats["save_errors"] += 1
            logger.error(f"Store write failed for {full_key}: {e}", exc_info=True)
            return False

        self._stats["saves"] += 1
        return True

    def get_stats(self) -> Dict[str, Any]:
        return dict(self._stats)
