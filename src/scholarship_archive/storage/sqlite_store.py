"""SQLite-backed record storage."""

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from scholarship_archive.storage.base import RecordStorage


def connect(db_path: Path) -> sqlite3.Connection:
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def ensure_schema(db_path: Path) -> None:
    schema_path = Path(__file__).parent / "schema.sql"
    with connect(db_path) as conn:
        conn.executescript(schema_path.read_text())


class SqliteStorage(RecordStorage):
    """
    Stores each record as a JSON document in the records table.
    One connection per call; each put commits on its own, so a failed put leaves no partial row.
    """

    scheme = "sqlite"

    def __init__(self, db_path: str | Path = "scholarships.db"):
        self._db_path = Path(db_path)
        ensure_schema(self._db_path)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def _connection(self) -> sqlite3.Connection:
        return connect(self._db_path)

    def get(self, key: str) -> Optional[dict[str, Any]]:
        with self._connection() as conn:
            row = conn.execute("SELECT data FROM records WHERE id = ?", (key,)).fetchone()
        return json.loads(row["data"]) if row else None

    def put(self, key: str, value: dict[str, Any]) -> None:
        now = datetime.now(timezone.utc).isoformat()
        data_str = json.dumps(value, default=str)
        with self._connection() as conn:
            conn.execute(
                """
                INSERT INTO records (id, data, stored_at) VALUES (?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET data = excluded.data, stored_at = excluded.stored_at
                """,
                (key, data_str, now),
            )
            conn.commit()

    def delete(self, key: str) -> None:
        with self._connection() as conn:
            conn.execute("DELETE FROM records WHERE id = ?", (key,))
            conn.commit()

    def list_keys(self) -> list[str]:
        with self._connection() as conn:
            rows = conn.execute("SELECT id FROM records ORDER BY id").fetchall()
        return [r["id"] for r in rows]

    def location_for(self, key: str) -> str:
        return f"sqlite://{self._db_path}#{key}"
