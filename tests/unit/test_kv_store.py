"""Unit tests for key-value adapters and StateRepository"""
import pytest
from datetime import date
from unittest.mock import Mock
from uuid import uuid4

from skill_tracker.exceptions import StorageError
from skill_tracker.storage import slices
from skill_tracker.storage.kv_store import FileKeyValueStore, InMemoryKeyValueStore
from skill_tracker.storage.repository import StateRepository


# ============================================================================
# Adapter Tests
# ============================================================================

class TestInMemoryKeyValueStore:

    def test_get_missing(self, kv_store):
        assert kv_store.get("nothing") is None

    def test_set_and_get(self, kv_store):
        kv_store.set("a", b"1")
        kv_store.set("a", b"2")

        assert kv_store.get("a") == b"2"
        assert kv_store.keys() == ["a"]


class TestFileKeyValueStore:

    def test_creates_directory_and_file(self, tmp_path):
        store = FileKeyValueStore(tmp_path / "data")

        store.set("skill_tracker.skills", b"[]")

        assert (tmp_path / "data" / "skill_tracker.skills.json").read_bytes() == b"[]"
        assert store.get("skill_tracker.skills") == b"[]"

    def test_get_missing(self, tmp_path):
        assert FileKeyValueStore(tmp_path).get("absent") is None

    def test_overwrite_leaves_no_temp_files(self, tmp_path):
        store = FileKeyValueStore(tmp_path)

        store.set("k", b"first")
        store.set("k", b"second")

        assert store.get("k") == b"second"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["k.json"]

    def test_write_failure_raises_storage_error(self, tmp_path):
        blocker = tmp_path / "blocked"
        blocker.write_text("a file where the directory should be")
        store = FileKeyValueStore(blocker)

        with pytest.raises(StorageError) as exc_info:
            store.set("k", b"x")

        assert exc_info.value.key == "k"


# ============================================================================
# Repository Tests
# ============================================================================

class TestStateRepository:

    def test_keys_are_prefixed(self, kv_store):
        repo = StateRepository(kv_store, prefix="tracker")
        skill_id = uuid4()

        assert repo.save(slices.COMPLETED_TASK_IDS, slices.SLICE_ADAPTERS[slices.COMPLETED_TASK_IDS], [skill_id])

        assert kv_store.keys() == ["tracker.completed_task_ids"]
        assert repo.load(slices.COMPLETED_TASK_IDS, slices.SLICE_ADAPTERS[slices.COMPLETED_TASK_IDS]) == [skill_id]

    def test_load_missing(self, kv_store):
        repo = StateRepository(kv_store)

        assert repo.load(slices.SKILLS, slices.SLICE_ADAPTERS[slices.SKILLS]) is None
        assert repo.get_stats()["load_misses"] == 1

    def test_load_corrupt_blob(self, kv_store):
        kv_store.set("skill_tracker.rollovers", b'{"abc": "not a date"}')
        repo = StateRepository(kv_store)

        assert repo.load(slices.ROLLOVERS, slices.SLICE_ADAPTERS[slices.ROLLOVERS]) is None
        assert repo.get_stats()["load_errors"] == 1

    def test_load_valid_rollovers(self, kv_store):
        kv_store.set("skill_tracker.rollovers", b'{"abc": "2026-03-11"}')
        repo = StateRepository(kv_store)

        assert repo.load(slices.ROLLOVERS, slices.SLICE_ADAPTERS[slices.ROLLOVERS]) == {"abc": date(2026, 3, 11)}

    def test_store_read_failure(self):
        store = Mock()
        store.get.side_effect = StorageError(message="read failed", key="skill_tracker.skills")
        repo = StateRepository(store)

        assert repo.load(slices.SKILLS, slices.SLICE_ADAPTERS[slices.SKILLS]) is None
        assert repo.get_stats()["load_errors"] == 1

    def test_store_write_failure(self):
        store = Mock()
        store.set.side_effect = StorageError(message="disk full", key="skill_tracker.skills")
        repo = StateRepository(store)

        assert repo.save(slices.SKILLS, slices.SLICE_ADAPTERS[slices.SKILLS], []) is False
        assert repo.get_stats()["save_errors"] == 1
        assert repo.get_stats()["saves"] == 0

    def test_unexpected_write_error_is_contained(self):
        """Test a store raising something other than StorageError still yields False"""
        store = Mock()
        store.set.side_effect = OSError("disk full")
        repo = StateRepository(store)

        assert repo.save(slices.SKILLS, slices.SLICE_ADAPTERS[slices.SKILLS], []) is False
        assert repo.get_stats()["save_errors"] == 1

    def test_unexpected_read_error_is_contained(self):
        store = Mock()
        store.get.side_effect = RuntimeError("driver gone")
        repo = StateRepository(store)

        assert repo.load(slices.SKILLS, slices.SLICE_ADAPTERS[slices.SKILLS]) is None
        assert repo.get_stats()["load_errors"] == 1
