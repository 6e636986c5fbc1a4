"""
Key-value persistence for the application shell.

The citation manager keeps two values: the bibliography (a list of record
dictionaries) and the user's preferred style. Storage sits behind the
``KeyValueStore`` interface so the shell can be given an in-memory store
in tests and a JSON file in deployment.

JsonFileStore guarantees:
- Atomic writes (temp file + rename)
- Deterministic JSON output (sorted keys)
"""
import copy
import json
import logging
import os
import shutil
import tempfile
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from .utils.error_handling import log_errors

logger = logging.getLogger(__name__)

_MISSING = object()


class KeyValueStore(ABC):
    """Minimal key-value persistence port."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under key, or default."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store a JSON-serialisable value under key."""
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove key. Returns True if it existed."""
        pass


class MemoryStore(KeyValueStore):
    """Process-local store. Values are copied in and out."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> bool:
        return self._data.pop(key, _MISSING) is not _MISSING

    def __repr__(self) -> str:
        return f"MemoryStore(keys={sorted(self._data)})"


class JsonFileStore(KeyValueStore):
    """
    Store backed by a single JSON object on disk.

    The file is read lazily on first access and rewritten in full on every
    ``set``/``delete``.

    Thread-safety note:
        This class does NOT provide thread-safety guarantees.
        Concurrent writers must synchronize externally.
    """

    def __init__(self, path: str):
        self._path = path
        self._data: Dict[str, Any] = {}
        self._loaded = False

    @property
    def path(self) -> str:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        self._ensure_loaded()
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._ensure_loaded()
        self._data[key] = copy.deepcopy(value)
        self._save()

    def delete(self, key: str) -> bool:
        self._ensure_loaded()
        if key not in self._data:
            return False
        del self._data[key]
        self._save()
        return True

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self._load()

    @log_errors("Storage load")
    def _load(self) -> None:
        """
        Read the store from disk.

        A missing file is an empty store.

        Raises:
            ValueError: If the file does not hold a JSON object
            json.JSONDecodeError: If the file is malformed
        """
        if not os.path.exists(self._path):
            self._data = {}
            self._loaded = True
            return

        with open(self._path, "r", encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Storage file {self._path} does not contain a JSON object")

        self._data = data
        self._loaded = True
        logger.debug(f"Loaded {len(data)} key(s) from {self._path}")

    @log_errors("Storage save")
    def _save(self) -> None:
        """Atomically write the whole store to disk."""
        target_dir = os.path.dirname(os.path.abspath(self._path)) or "."
        os.makedirs(target_dir, exist_ok=True)

        fd, temp_path = tempfile.mkstemp(suffix=".json.tmp", dir=target_dir)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tf:
                json.dump(self._data, tf, indent=2, ensure_ascii=False, sort_keys=True)
                tf.flush()
                os.fsync(tf.fileno())

            shutil.move(temp_path, self._path)

        except Exception:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise

    def __repr__(self) -> str:
        return f"JsonFileStore(path={self._path!r})"
