"""JSON file key/value store used by the sync queue."""

import json
import os
import re
import tempfile
import threading
from functools import lru_cache
from pathlib import Path
from typing import Any

from portfolio.core.config import get_settings
from portfolio.core.logging import get_logger

logger = get_logger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class OfflineStore:
    """
    Durable key/value store, one JSON file per key.

    Writes go to a temp file that replaces the target, so readers never
    see a half-written value. Unreadable files read as missing.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def _path(self, key: str) -> Path:
        return self.directory / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def get(self, key: str, default: Any = None) -> Any:
        path = self._path(key)
        with self._lock:
            if not path.exists():
                return default
            try:
                return json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.warning(f"Ignoring unreadable offline entry {key}: {e}")
                return default

    def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        with self._lock:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(value, f, default=str)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise

    def delete(self, key: str) -> None:
        with self._lock:
            self._path(key).unlink(missing_ok=True)


@lru_cache(maxsize=1)
def get_offline_store() -> OfflineStore:
    return OfflineStore(get_settings().OFFLINE_STORAGE_DIR)
