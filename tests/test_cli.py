"""CLI tests: subcommands against a temporary store."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from scholarship_archive.cli.main import main
from scholarship_archive.models import RawRecord


def _ingest(input_path: Path, db: Path, *extra: str) -> None:
    main(["ingest", "--input", str(input_path), "--db", str(db), *extra])


class TestValidateCommand:
    """Tests for `validate`."""

    def test_invalid_records_exit_nonzero(self, raw_records_file: Path, capsys) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["validate", "--input", str(raw_records_file)])
        assert exc.value.code == 1
        results = json.loads(capsys.readouterr().out)
        assert [r["valid"] for r in results] == [True, False, False]

    def test_valid_records_write_output(self, tmp_path: Path, sample_raw_row: dict, capsys) -> None:
        input_path = tmp_path / "one.json"
        input_path.write_text(json.dumps([sample_raw_row]))
        output = tmp_path / "results.json"
        main(["validate", "--input", str(input_path), "--output", str(output)])
        assert "Validated 1 records, 0 invalid" in capsys.readouterr().out
        assert json.loads(output.read_text())[0]["score"] == 1.0


class TestIngestCommand:
    """Tests for `ingest` and the read commands."""

    def test_ingest_then_list(self, raw_records_file: Path, temp_db: Path, capsys) -> None:
        _ingest(raw_records_file, temp_db)
        out = capsys.readouterr().out
        assert "3 received, 1 new, 0 updated, 0 unchanged, 2 rejected" in out

        main(["list", "--db", str(temp_db), "--status", "active"])
        entries = json.loads(capsys.readouterr().out)
        assert [e["id"] for e in entries] == ["s1"]
        assert entries[0]["storage_location"].endswith("#s1")

    def test_ingest_writes_report(self, raw_records_file: Path, temp_db: Path, tmp_path: Path) -> None:
        report_path = tmp_path / "report.json"
        _ingest(raw_records_file, temp_db, "--output", str(report_path))
        report = json.loads(report_path.read_text())
        assert report["stored"] == 1
        assert {r["record_id"] for r in report["rejected"]} == {"s2", "s3"}

    def test_ingest_from_feed(self, temp_db: Path, sample_raw_row: dict, capsys) -> None:
        with patch(
            "scholarship_archive.sources.http_feed.HttpFeedSource.fetch",
            return_value=[RawRecord(data=sample_raw_row)],
        ):
            main(["ingest", "--feed", "http://automation.local/extracted", "--db", str(temp_db)])
        assert "1 new" in capsys.readouterr().out

    def test_ingest_into_directory(self, raw_records_file: Path, tmp_path: Path, capsys) -> None:
        store_dir = tmp_path / "archive"
        main(["ingest", "--input", str(raw_records_file), "--dir", str(store_dir)])
        assert (store_dir / "s1.json").exists()

    def test_show_and_stats(self, raw_records_file: Path, temp_db: Path, capsys) -> None:
        _ingest(raw_records_file, temp_db)
        capsys.readouterr()
        main(["show", "s1", "--db", str(temp_db)])
        record = json.loads(capsys.readouterr().out)
        assert record["title"] == "Community Grant"
        assert record["quality_score"] == 1.0

        main(["stats", "--db", str(temp_db)])
        stats = json.loads(capsys.readouterr().out)
        assert stats["total"] == 1
        assert stats["active"] == 1

    def test_show_unknown_exits_with_message(self, temp_db: Path) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["show", "missing", "--db", str(temp_db)])
        assert "not found" in str(exc.value.code).lower()


class TestLifecycleCommands:
    """Tests for `cancel`, `rescan`, `remove` and `changes`."""

    def test_rescan_expires(self, raw_records_file: Path, temp_db: Path, capsys) -> None:
        _ingest(raw_records_file, temp_db)
        capsys.readouterr()
        main(["rescan", "--db", str(temp_db), "--now", "2100-01-01"])
        assert "s1: active -> expired" in capsys.readouterr().out

    def test_rescan_rejects_bad_timestamp(self, temp_db: Path) -> None:
        with pytest.raises(SystemExit):
            main(["rescan", "--db", str(temp_db), "--now", "soon"])

    def test_cancel_then_remove(self, raw_records_file: Path, temp_db: Path, capsys) -> None:
        _ingest(raw_records_file, temp_db)
        main(["cancel", "s1", "--db", str(temp_db)])
        assert "s1: cancelled" in capsys.readouterr().out
        main(["remove", "s1", "--db", str(temp_db)])
        with pytest.raises(SystemExit):
            main(["remove", "s1", "--db", str(temp_db)])

    def test_changes_logged(self, tmp_path: Path, temp_db: Path, sample_raw_row: dict, capsys) -> None:
        first = tmp_path / "first.json"
        first.write_text(json.dumps([sample_raw_row]))
        second = tmp_path / "second.json"
        second.write_text(json.dumps([{**sample_raw_row, "amount": "$2,000"}]))
        _ingest(first, temp_db, "--log-changes")
        _ingest(second, temp_db, "--log-changes")
        capsys.readouterr()

        main(["changes", "s1", "--db", str(temp_db)])
        changes = json.loads(capsys.readouterr().out)
        assert [(c["field"], c["old_value"], c["new_value"]) for c in changes] == [
            ("amount", "$1,500", "$2,000")
        ]
