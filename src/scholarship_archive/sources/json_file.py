"""Source reading extraction output saved as a JSON array or JSON lines."""

import json
from pathlib import Path

from scholarship_archive.models.raw import RawRecord
from scholarship_archive.sources.base import RecordSource


class JsonFileSource(RecordSource):
    source_id = "file"

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def fetch(self) -> list[RawRecord]:
        text = self.path.read_text(encoding="utf-8").strip()
        if not text:
            return []
        if text.startswith("["):
            items = json.loads(text)
        else:
            # One JSON object per line
            items = [json.loads(line) for line in text.splitlines() if line.strip()]
        return self._to_raw(items)
