"""
Local storage

Key/value string storage standing in for the browser's localStorage.
Values are opaque strings; callers do their own JSON encoding.
"""

import json
import logging
import os
from typing import Optional

from ..exceptions import StorageError

logger = logging.getLogger(__name__)


class LocalStorage:
    """Interface for string key/value storage"""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError


class MemoryStorage(LocalStorage):
    """In-memory storage"""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove_item(self, key: str) -> None:
        self.data.pop(key, None)


class FileStorage(LocalStorage):
    """
    Storage backed by a single JSON object on disk.

    The whole file is rewritten on every change. Two processes sharing
    the same file overwrite each other (last write wins).
    """

    def __init__(self, path: str):
        self.path = path

    def _read_all(self) -> dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Cannot read storage file {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise StorageError(f"Storage file {self.path} does not hold an object")
        return data

    def _write_all(self, data: dict[str, str]) -> None:
        directory = os.path.dirname(self.path)
        tmp_path = f"{self.path}.tmp"
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Cannot write storage file {self.path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)


def create_storage(path: Optional[str]) -> LocalStorage:
    """Create file storage for path, or memory storage when no path is set"""
    if path:
        logger.info(f"Using file storage at {path}")
        return FileStorage(path)
    logger.warning("No storage path configured - cart will not survive restarts")
    return MemoryStorage()
