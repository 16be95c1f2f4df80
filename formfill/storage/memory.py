"""Draft stores backed by process memory and by a JSON file."""

import json
import os
import tempfile
import threading
from pathlib import Path

from formfill.storage.base import BaseDraftStore
from formfill.utils.logging import get_logger

logger = get_logger(__name__)


class InMemoryDraftStore(BaseDraftStore):
    """Drafts kept in a dict; lost on restart."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()

    def save(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def load(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def clear(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


class JsonFileDraftStore(BaseDraftStore):
    """Drafts kept in a single JSON object on disk.

    Writes go to a temporary file that replaces the store atomically.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> dict[str, str]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Draft store unreadable, starting empty", path=str(self.path), error=str(e))
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".drafts-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def save(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def load(self, key: str) -> str | None:
        with self._lock:
            return self._read().get(key)

    def clear(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if data.pop(key, None) is not None:
                self._write(data)
