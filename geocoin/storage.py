# geocoin/storage.py
"""
String-keyed stores behind the save system.

The game only needs four operations: get, set, delete and list_keys. Writes
are visible to the next read immediately (same call stack), which the
visibility window relies on when it evicts and reloads in one pass.

    MemoryStore     plain dict, nothing survives the process
    JsonFileStore   dict mirrored to one JSON file, rewritten on each change
"""

from __future__ import annotations

import logging
import os
from typing import Dict, List, Optional

from .errors import PersistenceError
from .utils import read_json, write_json

logger = logging.getLogger(__name__)


class KeyValueStore:
    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def list_keys(self) -> List[str]:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"store values must be str, got {type(value).__name__}")
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def list_keys(self) -> List[str]:
        return list(self._data.keys())


class JsonFileStore(MemoryStore):
    """
    MemoryStore whose contents are written to ``path`` after every change.

    A missing file starts an empty store. A file that cannot be read or is
    not a JSON object of strings is logged and ignored (the next write
    replaces it).
    """

    def __init__(self, path: str) -> None:
        super().__init__()
        self.path = path
        self._load()

    def _load(self) -> None:
        if not os.path.exists(self.path):
            logger.debug(f"No save file at {self.path}; starting empty.")
            return
        data = read_json(self.path, None)
        if not isinstance(data, dict):
            logger.warning(f"Save file {self.path} is unreadable; starting empty.")
            return
        for key, value in data.items():
            if isinstance(value, str):
                self._data[key] = value
            else:
                logger.warning(f"Ignoring non-string value for '{key}' in {self.path}")
        logger.info(f"Loaded {len(self._data)} saved records from {self.path}")

    def _flush(self, keys: List[str]) -> None:
        try:
            write_json(self.path, self._data)
        except OSError as e:
            raise PersistenceError(f"could not write {self.path}: {e}", keys) from e

    def set(self, key: str, value: str) -> None:
        previous = self._data.get(key)
        super().set(key, value)
        try:
            self._flush([key])
        except PersistenceError:
            # keep memory and disk in agreement
            if previous is None:
                self._data.pop(key, None)
            else:
                self._data[key] = previous
            raise

    def delete(self, key: str) -> None:
        if key not in self._data:
            return
        previous = self._data.pop(key)
        try:
            self._flush([key])
        except PersistenceError:
            self._data[key] = previous
            raise
