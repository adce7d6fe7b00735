"""
Storage backends.

A backend holds named string blobs, like browser localStorage. The session
store keeps its whole collection in one slot of a backend.
"""
from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class StorageBackend(ABC):
    """Get/set a named string blob."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the blob stored under key, or None if the slot is empty."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous blob."""


class InMemoryStorage(StorageBackend):
    """Process-local storage, mostly for tests."""

    def __init__(self, items: Optional[Dict[str, str]] = None):
        self.items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


class FileStorage(StorageBackend):
    """
    Storage in a JSON file mapping slot names to blobs.

    Errors reading or writing the file propagate; the session store decides
    how to degrade.
    """

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Storage file {self.path} does not contain a JSON object")
        return data

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._load()
        items[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(items, f)
        os.replace(tmp_path, self.path)
        logger.debug(f"Wrote slot {key!r} to {self.path}")


def get_storage_backend(storage_type: str, path: Optional[str] = None) -> Optional[StorageBackend]:
    """
    Build the configured backend.

    Returns None for 'none', which makes the session store read nothing and
    write nothing.
    """
    if storage_type == "memory":
        return InMemoryStorage()
    if storage_type == "file":
        if not path:
            logger.warning("File storage selected without a path. Sessions will not be persisted.")
            return None
        return FileStorage(path)
    logger.warning("Storage disabled. Sessions will not be persisted.")
    return None
