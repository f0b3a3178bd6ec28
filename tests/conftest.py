"""Pytest fixtures for scholarship-archive tests."""

import json
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

from scholarship_archive.archive import ArchiveIndex
from scholarship_archive.models.raw import RawRecord
from scholarship_archive.storage import MemoryStorage

FIXED_NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def _write_json(path: Path, items: list[dict]) -> Path:
    """Write a JSON array of raw records."""
    path.write_text(json.dumps(items), encoding="utf-8")
    return path


@pytest.fixture
def sample_raw_row() -> dict[str, str]:
    """Raw values as the browser-automation driver extracts them."""
    return {
        "id": "s1",
        "title": "Community Grant",
        "amount": "$1,500",
        "deadline": "2099-01-01",
        "url": "https://example.org/s1",
        "collectionDate": "2024-01-01",
    }


@pytest.fixture
def raw_record(sample_raw_row: dict[str, str]) -> RawRecord:
    return RawRecord(data=sample_raw_row)


@pytest.fixture
def memory_index() -> ArchiveIndex:
    """Index over in-memory storage with a fixed clock."""
    return ArchiveIndex(MemoryStorage(), clock=lambda: FIXED_NOW)


@pytest.fixture
def temp_db() -> Path:
    """Temporary database path for isolated tests."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        path = Path(f.name)
    yield path
    path.unlink(missing_ok=True)


@pytest.fixture
def raw_records_file(tmp_path: Path, sample_raw_row: dict[str, str]) -> Path:
    """JSON file with one valid record, one missing its title, one with a bad url."""
    return _write_json(
        tmp_path / "records.json",
        [
            sample_raw_row,
            {"id": "s2", "url": "https://example.org/s2", "amount": "$200"},
            {
                "id": "s3",
                "title": "Regional Merit Award",
                "url": "ftp://example.org/s3",
                "amount": "USD 750",
                "deadline": "2099-03-01",
                "collectionDate": "2024-01-01",
            },
        ],
    )
