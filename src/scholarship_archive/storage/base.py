"""Abstract key-value interface the archive index persists records through."""

from abc import ABC, abstractmethod
from typing import Any, Optional


class RecordStorage(ABC):
    """
    Minimal document store: JSON-compatible dicts keyed by record id.
    Concrete stores decide the physical layout (memory, SQLite, flat files).
    """

    scheme: str = ""

    @abstractmethod
    def get(self, key: str) -> Optional[dict[str, Any]]:
        """Return the stored document or None."""
        pass

    @abstractmethod
    def put(self, key: str, value: dict[str, Any]) -> None:
        """Insert or replace the document for key. Must be atomic per key."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the document for key; no-op if absent."""
        pass

    @abstractmethod
    def list_keys(self) -> list[str]:
        pass

    def location_for(self, key: str) -> str:
        """Where the document for key lives, e.g. 'sqlite:///data/archive.db#s1'."""
        return f"{self.scheme}://{key}"
