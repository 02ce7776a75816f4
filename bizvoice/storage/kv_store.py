"""
Key-Value Text Store

Collections are persisted as whole JSON arrays under a single key and
overwritten on every write (snapshot persistence).

- MemoryKeyValueStore: dict-backed, for tests and ephemeral use
- JsonFileKeyValueStore: one file per key under a data directory
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from bizvoice.errors import StorageCorruptionError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class KeyValueStore(Protocol):
    """Minimal text key-value store interface."""

    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...


class MemoryKeyValueStore:
    """In-memory key-value store."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data)


class JsonFileKeyValueStore:
    """
    File-backed key-value store.

    Each key is stored as data_dir/{key}.json. Writes go to a temp file
    in the same directory and are moved into place with os.replace, so a
    reader never sees a half-written value.
    """

    def __init__(self, data_dir: str = "./data/store"):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        fd, tmp_path = tempfile.mkstemp(dir=self.data_dir, prefix=f".{key}_", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_path, self._path(key))
        except Exception:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        logger.debug(f"Wrote key {key} ({len(value)} chars)")

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()


def load_collection(
    store: KeyValueStore,
    key: str,
    model: Type[ModelT],
) -> Optional[List[ModelT]]:
    """
    Load a persisted collection.

    Returns:
        The decoded records, or None if the key is absent.

    Raises:
        StorageCorruptionError: the value is unreadable text or not a JSON
            array of valid records
    """
    try:
        raw = store.get_item(key)
    except UnicodeDecodeError as e:
        raise StorageCorruptionError(key, str(e)) from e
    if raw is None:
        return None

    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, RecursionError) as e:
        raise StorageCorruptionError(key, str(e)) from e

    if not isinstance(data, list):
        raise StorageCorruptionError(key, f"expected a list, got {type(data).__name__}")

    try:
        return [model.model_validate(entry) for entry in data]
    except ValidationError as e:
        raise StorageCorruptionError(key, str(e)) from e


def save_collection(store: KeyValueStore, key: str, items: Sequence[BaseModel]) -> None:
    """Overwrite the whole collection stored under key."""
    payload = [item.model_dump(mode="json") for item in items]
    store.set_item(key, json.dumps(payload))
