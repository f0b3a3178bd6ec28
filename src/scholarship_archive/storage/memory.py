"""In-process storage, used for tests and one-shot validation runs."""

import copy
from typing import Any, Optional

from scholarship_archive.storage.base import RecordStorage


class MemoryStorage(RecordStorage):
    scheme = "memory"

    def __init__(self) -> None:
        self._data: dict[str, dict[str, Any]] = {}

    def get(self, key: str) -> Optional[dict[str, Any]]:
        value = self._data.get(key)
        return copy.deepcopy(value) if value is not None else None

    def put(self, key: str, value: dict[str, Any]) -> None:
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def list_keys(self) -> list[str]:
        return sorted(self._data)
