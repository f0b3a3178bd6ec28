"""Persistent log of detected field changes."""

import json
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from scholarship_archive.models.results import ChangeEntry, ChangeSeverity
from scholarship_archive.storage.sqlite_store import connect, ensure_schema


@dataclass
class LoggedChange:
    """A ChangeEntry as it was recorded, with its record id and detection time."""

    id: int
    record_id: str
    field: str
    old_value: Any
    new_value: Any
    severity: ChangeSeverity
    detected_at: datetime

    def to_entry(self) -> ChangeEntry:
        return ChangeEntry(
            field=self.field,
            old_value=self.old_value,
            new_value=self.new_value,
            severity=self.severity,
        )


class ChangeLogStore:
    """SQLite store for change history; shares the database file with SqliteStorage."""

    def __init__(self, db_path: str | Path = "scholarships.db"):
        self._db_path = Path(db_path)
        ensure_schema(self._db_path)

    def _connection(self) -> sqlite3.Connection:
        return connect(self._db_path)

    def record(
        self,
        record_id: str,
        changes: list[ChangeEntry],
        detected_at: Optional[datetime] = None,
    ) -> int:
        """Append changes for one record. Returns number of rows written."""
        if not changes:
            return 0
        when = (detected_at or datetime.now(timezone.utc)).isoformat()
        rows = []
        for c in changes:
            dumped = c.model_dump(mode="json")
            rows.append(
                (
                    record_id,
                    c.field,
                    json.dumps(dumped["old_value"]),
                    json.dumps(dumped["new_value"]),
                    c.severity.value,
                    when,
                )
            )
        with self._connection() as conn:
            conn.executemany(
                """
                INSERT INTO change_log (record_id, field, old_value, new_value, severity, detected_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                rows,
            )
            conn.commit()
        return len(rows)

    def _row_to_change(self, row: sqlite3.Row) -> LoggedChange:
        return LoggedChange(
            id=row["id"],
            record_id=row["record_id"],
            field=row["field"],
            old_value=json.loads(row["old_value"]) if row["old_value"] is not None else None,
            new_value=json.loads(row["new_value"]) if row["new_value"] is not None else None,
            severity=ChangeSeverity(row["severity"]),
            detected_at=datetime.fromisoformat(row["detected_at"]),
        )

    def list_for(self, record_id: str) -> list[LoggedChange]:
        """Changes for one record, oldest first."""
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT * FROM change_log WHERE record_id = ? ORDER BY detected_at, id",
                (record_id,),
            ).fetchall()
        return [self._row_to_change(r) for r in rows]

    def list_since(self, since: datetime) -> list[LoggedChange]:
        """Changes detected at or after since."""
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT * FROM change_log WHERE detected_at >= ? ORDER BY detected_at, id",
                (since.isoformat(),),
            ).fetchall()
        return [self._row_to_change(r) for r in rows]
