"""
Key-value store adapters

The engine persists each slice of its state as one opaque byte blob under a
string key. Adapters raise StorageError on I/O failure; StateRepository
decides what to do about it.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol

from skill_tracker.config import DATA_PATH
from skill_tracker.exceptions import StorageError

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Get/set of opaque byte blobs"""

    def get(self, key: str) -> Optional[bytes]:
        ...

    def set(self, key: str, value: bytes) -> None:
        ...


class InMemoryKeyValueStore:
    """Process-local store, used by tests and throwaway sessions"""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self._data: Dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = value

    def keys(self) -> list[str]:
        return sorted(self._data)


class FileKeyValueStore:
    """One `<key>.json` file per key inside a data directory"""

    def __init__(self, data_path: Path = DATA_PATH):
        self.data_path = Path(data_path)

    def _path_for(self, key: str) -> Path:
        return self.data_path / f"{key}.json"

    def get(self, key: str) -> Optional[bytes]:
        filepath = self._path_for(key)
        if not filepath.exists():
            return None
        try:
            return filepath.read_bytes()
        except OSError as e:
            raise StorageError(
                message=f"Failed to read {filepath}",
                key=key,
                operation="kv_get",
                cause=e,
            )

    def set(self, key: str, value: bytes) -> None:
        filepath = self._path_for(key)
        try:
            self.data_path.mkdir(parents=True, exist_ok=True)
            # Write to a sibling temp file, then swap it in
            fd, tmp_name = tempfile.mkstemp(dir=self.data_path, prefix=f".{key}.", suffix=".tmp")
            with os.fdopen(fd, "wb") as tmp:
                tmp.write(value)
            os.replace(tmp_name, filepath)
        except OSError as e:
            raise StorageError(
                message=f"Failed to write {filepath}",
                key=key,
                operation="kv_set",
                cause=e,
            )
        logger.debug(f"Wrote {len(value)} bytes to {filepath}")
