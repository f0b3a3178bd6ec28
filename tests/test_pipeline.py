"""Integration tests for the ingest pipeline."""

from pathlib import Path

import pytest

from scholarship_archive.archive import ArchiveIndex
from scholarship_archive.models import RawRecord, RecordStatus
from scholarship_archive.pipeline import ingest_records, validate_raw
from scholarship_archive.sources import JsonFileSource
from scholarship_archive.storage import ChangeLogStore, SqliteStorage
from scholarship_archive.validation import ValidationConfig


def _raw(**overrides) -> RawRecord:
    data = {
        "id": "s1",
        "title": "Community Grant",
        "amount": "$1,500",
        "deadline": "2099-01-01",
        "url": "https://example.org/s1",
        "collectionDate": "2024-01-01",
    }
    data.update(overrides)
    return RawRecord(data=data)


class TestIngestRecords:
    """Full flow: raw values -> validate -> archive -> change detection."""

    def test_mixed_batch(self, raw_records_file: Path, memory_index: ArchiveIndex) -> None:
        """Coercion and validation failures are reported without aborting the batch."""
        report = ingest_records(JsonFileSource(raw_records_file).fetch(), memory_index)
        assert report.received == 3
        assert report.stored == 1
        assert report.new == 1
        assert {r.record_id for r in report.rejected} == {"s2", "s3"}
        by_id = {r.record_id: r for r in report.rejected}
        assert [i.field for i in by_id["s2"].issues] == ["title"]
        assert [i.field for i in by_id["s3"].issues] == ["url"]
        assert report.scores == {"s1": 1.0}
        assert list(memory_index.list()) and memory_index.entry("s1").status == RecordStatus.ACTIVE

    def test_update_detects_amount_change(self, memory_index: ArchiveIndex) -> None:
        ingest_records([_raw()], memory_index)
        report = ingest_records([_raw(amount="$2,000")], memory_index)
        assert report.updated == 1
        assert report.new == 0
        (change,) = report.changes["s1"]
        assert (change.field, change.old_value, change.new_value) == ("amount", "$1,500", "$2,000")
        assert change.severity.value == "medium"

    def test_reingest_identical_is_unchanged(self, memory_index: ArchiveIndex) -> None:
        ingest_records([_raw()], memory_index)
        report = ingest_records([_raw()], memory_index)
        assert report.unchanged == 1
        assert report.changes == {}

    def test_duplicate_rejected_by_default(self, memory_index: ArchiveIndex) -> None:
        ingest_records([_raw()], memory_index)
        report = ingest_records([_raw(title="Neighbourhood Bursary")], memory_index)
        assert report.stored == 0
        assert [i.field for i in report.rejected[0].issues] == ["id"]
        assert memory_index.get("s1").title == "Community Grant"

    def test_duplicate_overwrite(self, memory_index: ArchiveIndex) -> None:
        ingest_records([_raw()], memory_index)
        report = ingest_records([_raw(title="Neighbourhood Bursary")], memory_index, overwrite=True)
        assert report.updated == 1
        assert [c.field for c in report.changes["s1"]] == ["title"]

    def test_changes_written_to_log(self, temp_db: Path) -> None:
        index = ArchiveIndex(SqliteStorage(temp_db))
        log = ChangeLogStore(temp_db)
        ingest_records([_raw()], index, change_log=log)
        ingest_records([_raw(deadline="2099-03-01", amount="$2,000")], index, change_log=log)
        logged = log.list_for("s1")
        assert [c.field for c in logged] == ["deadline", "amount"]
        assert logged[0].new_value == "2099-03-01"

    def test_scraped_status_ignored(self, memory_index: ArchiveIndex) -> None:
        """Only ArchiveIndex.cancel can cancel a record."""
        report = ingest_records([_raw(status="cancelled", qualityScore="0.1")], memory_index)
        assert report.new == 1
        stored = memory_index.get("s1")
        assert stored.status == RecordStatus.ACTIVE
        assert stored.quality_score == 1.0

    def test_config_applies(self, memory_index: ArchiveIndex) -> None:
        config = ValidationConfig(min_title_length=30)
        report = ingest_records([_raw()], memory_index, config=config)
        assert report.stored == 0
        assert report.rejected[0].issues[0].field == "title"


class TestValidateRaw:
    """Tests for validate_raw (no storage)."""

    def test_results_per_record(self, raw_records_file: Path) -> None:
        results = validate_raw(JsonFileSource(raw_records_file).fetch())
        assert [r.record_id for r in results] == ["s1", "s2", "s3"]
        assert [r.valid for r in results] == [True, False, False]
        assert results[1].error_fields() == ["title"]
        assert results[1].score == pytest.approx(0.5)

    def test_does_not_store(self, memory_index: ArchiveIndex) -> None:
        validate_raw([_raw()], index=memory_index)
        assert len(memory_index) == 0
