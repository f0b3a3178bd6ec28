"""Unit tests for change detection."""

from datetime import date

import pytest

from scholarship_archive.archive import ArchiveIndex
from scholarship_archive.changes import detect_changes, summarize_changes
from scholarship_archive.errors import MismatchedIdError
from scholarship_archive.models import ChangeSeverity, Record, RecordStatus
from scholarship_archive.validation import validate


def _make_record(**kwargs) -> Record:
    defaults = {
        "id": "s1",
        "title": "Community Grant",
        "amount": "$1,500",
        "deadline": "2099-01-01",
        "url": "https://example.org/s1",
        "collection_date": "2024-01-01",
    }
    defaults.update(kwargs)
    return Record(**defaults)


class TestDetectChanges:
    """Tests for detect_changes."""

    def test_identical_records_no_changes(self) -> None:
        """Comparing a record with itself is a no-op."""
        record = _make_record()
        assert detect_changes(record, record) == []

    def test_mismatched_ids_raise(self) -> None:
        with pytest.raises(MismatchedIdError):
            detect_changes(_make_record(), _make_record(id="s2"))

    def test_amount_change_is_medium(self) -> None:
        changes = detect_changes(_make_record(), _make_record(amount="$2,000"))
        assert len(changes) == 1
        assert changes[0].field == "amount"
        assert changes[0].old_value == "$1,500"
        assert changes[0].new_value == "$2,000"
        assert changes[0].severity == ChangeSeverity.MEDIUM

    def test_deadline_change_is_high(self) -> None:
        changes = detect_changes(_make_record(), _make_record(deadline="2099-02-01"))
        assert changes[0].severity == ChangeSeverity.HIGH
        assert changes[0].old_value == date(2099, 1, 1)
        assert changes[0].new_value == date(2099, 2, 1)

    def test_untracked_fields_ignored(self) -> None:
        """Description, tags and amount parts are outside the tracked set."""
        old = _make_record(description="Old text", tags=["a"])
        new = _make_record(description="New text", tags=["b"], amount_min="10")
        assert detect_changes(old, new) == []

    def test_status_values_are_plain_strings(self) -> None:
        old = _make_record(status=RecordStatus.ACTIVE)
        new = _make_record(status=RecordStatus.EXPIRED)
        (change,) = detect_changes(old, new)
        assert change.old_value == "active"
        assert change.new_value == "expired"
        assert change.severity == ChangeSeverity.LOW

    def test_ordering_by_severity_then_field(self) -> None:
        """High before medium before low; ties broken by field name."""
        old = _make_record()
        new = _make_record(
            deadline="2099-06-01",
            amount="$3,000",
            title="Community Grant 2099",
            url="https://example.org/s1-new",
        )
        changes = detect_changes(old, new)
        assert [c.field for c in changes] == ["deadline", "amount", "title", "url"]

    def test_scenario_after_upsert(self, memory_index: ArchiveIndex) -> None:
        """Upsert a record, then a copy with a new amount; only the amount changed."""
        first = _make_record()
        memory_index.upsert(first, validate(first, memory_index))
        old = memory_index.get("s1")

        second = _make_record(amount="$2,000")
        memory_index.upsert(second, validate(second, memory_index))
        new = memory_index.get("s1")

        changes = detect_changes(old, new)
        assert [c.model_dump(mode="json") for c in changes] == [
            {"field": "amount", "old_value": "$1,500", "new_value": "$2,000", "severity": "medium"}
        ]


class TestSummarizeChanges:
    def test_counts_all_levels(self) -> None:
        changes = detect_changes(_make_record(), _make_record(deadline="2099-02-01", title="Renamed Grant"))
        assert summarize_changes(changes) == {"high": 1, "medium": 0, "low": 1}

    def test_empty(self) -> None:
        assert summarize_changes([]) == {"high": 0, "medium": 0, "low": 0}
