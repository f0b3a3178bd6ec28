"""Abstract base class for raw record sources."""

from abc import ABC, abstractmethod

from scholarship_archive.models.raw import RawRecord


class RecordSource(ABC):
    """
    Hands over field values extracted by the browser-automation driver.
    Sources never parse or validate; they return raw string mappings.
    """

    source_id: str = ""

    @abstractmethod
    def fetch(self) -> list[RawRecord]:
        """Return all raw records currently available from this source."""
        pass

    @staticmethod
    def _to_raw(items: list) -> list[RawRecord]:
        """Wrap mappings; tolerate both {'data': {...}} envelopes and bare mappings."""
        raws = []
        for item in items:
            if not isinstance(item, dict):
                raise ValueError(f"Expected a JSON object per record, got {type(item).__name__}")
            if set(item) == {"data"} and isinstance(item["data"], dict):
                item = item["data"]
            raws.append(RawRecord(data=dict(item)))
        return raws
