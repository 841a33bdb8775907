from __future__ import annotations

from typing import Any

from vbunker.application.ports.profile_store import ProfileStorePort


class MemoryProfileStore(ProfileStorePort):
    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Any | None:
        return self._values.get(key)

    def set(self, key: str, value: str | bool | bytes | None) -> None:
        if value is None:
            self._values.pop(key, None)
            return
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    def snapshot(self) -> dict[str, Any]:
        return dict(self._values)
