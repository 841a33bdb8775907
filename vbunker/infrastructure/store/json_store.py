from __future__ import annotations

import base64
import json
import logging
import threading
from pathlib import Path
from typing import Any

from vbunker.application.exceptions import ProfileStoreError
from vbunker.application.ports.profile_store import ProfileStorePort

# bytes are not JSON-native, so they are stored as {"__bytes__": "<base64>"}
_BYTES_TAG = "__bytes__"


class JsonProfileStore(ProfileStorePort):
    def __init__(self, data_dir: str = "./data/profile", file_name: str = "profile.json") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._file_path = self._data_dir / file_name
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def _load(self) -> dict[str, Any]:
        """Load all values from the JSON file, empty if missing or unreadable."""
        if not self._file_path.exists():
            return {}

        try:
            with open(self._file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            # Corrupted file reads as a fresh install
            self._logger.warning("Profile file unreadable, using defaults", extra={"reason": str(e)})
            return {}

        if not isinstance(data, dict):
            return {}
        return data

    def _save(self, data: dict[str, Any]) -> None:
        """Save all values to the JSON file atomically."""
        temp_path = self._file_path.with_suffix(".json.tmp")

        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._file_path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            raise ProfileStoreError(f"Failed to write {self._file_path}: {e}") from e

    def _encode(self, value: str | bool | bytes) -> Any:
        if isinstance(value, bytes):
            return {_BYTES_TAG: base64.b64encode(value).decode("ascii")}
        return value

    def _decode(self, raw: Any) -> Any:
        if isinstance(raw, dict) and _BYTES_TAG in raw:
            try:
                return base64.b64decode(raw[_BYTES_TAG])
            except (ValueError, TypeError):
                return None
        return raw

    def get(self, key: str) -> Any | None:
        with self._lock:
            data = self._load()
        return self._decode(data.get(key))

    def set(self, key: str, value: str | bool | bytes | None) -> None:
        with self._lock:
            data = self._load()
            if value is None:
                data.pop(key, None)
            else:
                data[key] = self._encode(value)
            self._save(data)

    def remove(self, key: str) -> None:
        self.set(key, None)
