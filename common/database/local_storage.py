"""
Durable local key/value storage.

A small file-backed counterpart of the browser's localStorage: string
values stored under string keys, one JSON-friendly file per key inside a
directory. Reads and writes are synchronous; writes replace the file
atomically so a crash never leaves half a value behind.

Example:
    from common.database import LocalStorage

    storage = LocalStorage(".campverse_storage")
    storage.set_item("campverse_notifications", "[]")
    raw = storage.get_item("campverse_notifications")
"""

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"[^A-Za-z0-9_.-]")


class LocalStorage:
    """Synchronous string key/value store persisted to a directory."""

    def __init__(self, directory: Union[str, Path]):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path_for(self, key: str) -> Path:
        return self._directory / f"{_SAFE_KEY.sub('_', key)}.json"

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key was never set."""
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set_item(self, key: str, value: str) -> None:
        """
        Store a value under a key.

        Raises:
            OSError: If the directory is not writable
        """
        self._directory.mkdir(parents=True, exist_ok=True)
        path = self._path_for(key)

        fd, tmp_path = tempfile.mkstemp(dir=self._directory, prefix=".tmp_", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_path, path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

        logger.debug(f"Wrote {len(value)} chars to local key {key}")

    def remove_item(self, key: str) -> None:
        """Delete a key. Missing keys are ignored."""
        try:
            self._path_for(key).unlink()
        except FileNotFoundError:
            pass

    def clear(self) -> None:
        """Delete every stored key."""
        if not self._directory.exists():
            return
        for path in self._directory.glob("*.json"):
            path.unlink()
