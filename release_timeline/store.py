"""Key-value persistence for drafts and the theme preference."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from pydantic import TypeAdapter, ValidationError

from release_timeline.config import DRAFTS_STORAGE_KEY, THEME_STORAGE_KEY
from release_timeline.models import ReleaseRecord, Theme

logger = logging.getLogger(__name__)

_RELEASE_LIST = TypeAdapter(List[ReleaseRecord])


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def clear(self, key: str) -> None: ...


class MemoryStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def clear(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """String values kept in one JSON object on disk.

    Every write rewrites the whole file through a temporary file and
    ``os.replace``, so readers never observe a half-written state.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = self.path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Failed to read state file %s; starting empty: %s", self.path, exc)
            return {}
        if not raw:
            return {}
        try:
            loaded = json.loads(raw)
        except json.JSONDecodeError:
            logger.error("State file %s is not valid JSON; starting empty", self.path)
            return {}
        if not isinstance(loaded, dict):
            logger.error("State file %s does not hold a JSON object; starting empty", self.path)
            return {}
        return {key: value for key, value in loaded.items() if isinstance(value, str)}

    def _write_all(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(json.dumps(data, indent=2, sort_keys=True) + "\n")
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def clear(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)


class DraftStore:
    """User-authored releases stored as one serialized list under a fixed key."""

    def __init__(self, store: KeyValueStore, key: str = DRAFTS_STORAGE_KEY) -> None:
        self.store = store
        self.key = key
        self._lock = threading.Lock()

    def load_drafts(self) -> List[ReleaseRecord]:
        raw = self.store.get(self.key)
        if not raw:
            return []
        try:
            return _RELEASE_LIST.validate_json(raw)
        except ValidationError as exc:
            logger.error("Failed to parse stored drafts (%d errors); treating as empty", exc.error_count())
            return []

    def save_draft(self, record: ReleaseRecord) -> None:
        with self._lock:
            drafts = self.load_drafts()
            payload = [record.to_storage()] + [draft.to_storage() for draft in drafts]
            self.store.set(self.key, json.dumps(payload))

    def clear_drafts(self) -> None:
        with self._lock:
            self.store.clear(self.key)


class ThemePreference:
    def __init__(self, store: KeyValueStore, key: str = THEME_STORAGE_KEY) -> None:
        self.store = store
        self.key = key

    def get(self, default: Theme = Theme.LIGHT) -> Theme:
        saved = self.store.get(self.key)
        try:
            return Theme(saved)
        except ValueError:
            return default

    def set(self, theme: Theme) -> None:
        self.store.set(self.key, Theme(theme).value)

    def toggle(self, default: Theme = Theme.LIGHT) -> Theme:
        current = self.get(default)
        updated = Theme.DARK if current is Theme.LIGHT else Theme.LIGHT
        self.set(updated)
        return updated
