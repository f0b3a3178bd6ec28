"""Archive index: id -> stored record, with listing projections and aggregate counts."""

import logging
import threading
from collections import Counter
from datetime import date, datetime, timezone
from typing import Callable, Iterator, Optional

from scholarship_archive.errors import DuplicateConflictError, NotFoundError, ValidationError
from scholarship_archive.models.record import Record, RecordStatus
from scholarship_archive.models.results import (
    ChangeEntry,
    ChangeSeverity,
    IndexEntry,
    IndexStats,
    ValidationResult,
)
from scholarship_archive.storage.base import RecordStorage

from .lifecycle import advance_status, derive_status

logger = logging.getLogger(__name__)

UNCATEGORIZED = "uncategorized"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class IndexListing:
    """
    Lazy, restartable view over the index.
    Each iteration re-applies the filter to the index's current state.
    """

    def __init__(
        self,
        index: "ArchiveIndex",
        status: Optional[RecordStatus] = None,
        category: Optional[str] = None,
    ):
        self._index = index
        self.status = status
        self.category = category

    def __iter__(self) -> Iterator[IndexEntry]:
        for entry in self._index._snapshot():
            if self.status is not None and entry.status != self.status:
                continue
            if self.category is not None and entry.category != self.category:
                continue
            yield entry


class ArchiveIndex:
    """
    Owns the mapping from record id to storage location.
    Writes are serialized by one lock; readers work from a snapshot taken under it.
    Every write either fully applies or leaves the index unchanged.
    """

    def __init__(self, storage: RecordStorage, *, clock: Optional[Callable[[], datetime]] = None):
        self._storage = storage
        self._clock = clock or _now_utc
        self._lock = threading.RLock()
        self._entries: dict[str, IndexEntry] = {}
        self._stats = IndexStats()
        self._load()

    def _load(self) -> None:
        entries: dict[str, IndexEntry] = {}
        for key in self._storage.list_keys():
            doc = self._storage.get(key)
            if doc is None:
                continue
            record = Record.model_validate(doc)
            entries[record.id] = self._project(record)
        self._entries = entries
        self._stats = self._compute_stats(entries)
        logger.debug("Loaded %d archived records", len(entries))

    def _project(self, record: Record) -> IndexEntry:
        return IndexEntry(
            id=record.id,
            title=record.title,
            deadline=record.deadline,
            amount=record.amount,
            status=record.status or RecordStatus.ACTIVE,
            category=record.category,
            storage_location=self._storage.location_for(record.id),
        )

    @staticmethod
    def _compute_stats(entries: dict[str, IndexEntry]) -> IndexStats:
        statuses = Counter(e.status for e in entries.values())
        categories = Counter(e.category or UNCATEGORIZED for e in entries.values())
        return IndexStats(
            total=len(entries),
            active=statuses.get(RecordStatus.ACTIVE, 0),
            expired=statuses.get(RecordStatus.EXPIRED, 0),
            upcoming=statuses.get(RecordStatus.UPCOMING, 0),
            cancelled=statuses.get(RecordStatus.CANCELLED, 0),
            by_category=dict(sorted(categories.items())),
        )

    def _write(self, record: Record) -> IndexEntry:
        """Persist record and swap in the new projection; storage failure leaves state untouched."""
        entry = self._project(record)
        entries = dict(self._entries)
        entries[record.id] = entry
        stats = self._compute_stats(entries)
        self._storage.put(record.id, record.model_dump(mode="json"))
        self._entries = entries
        self._stats = stats
        return entry

    def _now(self) -> datetime:
        return _as_utc(self._clock())

    def _snapshot(self) -> list[IndexEntry]:
        with self._lock:
            entries = list(self._entries.values())
        return sorted(entries, key=lambda e: (e.deadline or date.max, e.id))

    # Reads

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def find(self, record_id: str) -> Optional[Record]:
        """Stored record or None."""
        with self._lock:
            if record_id not in self._entries:
                return None
            doc = self._storage.get(record_id)
        return Record.model_validate(doc) if doc is not None else None

    def get(self, record_id: str) -> Record:
        """Stored record; raises NotFoundError for unknown ids."""
        record = self.find(record_id)
        if record is None:
            raise NotFoundError(record_id)
        return record

    def entry(self, record_id: str) -> IndexEntry:
        """Listing projection for one id."""
        with self._lock:
            entry = self._entries.get(record_id)
        if entry is None:
            raise NotFoundError(record_id)
        return entry

    def stats(self) -> IndexStats:
        with self._lock:
            return self._stats.model_copy(deep=True)

    # Writes

    def upsert(
        self,
        record: Record,
        validation: Optional[ValidationResult],
        *,
        overwrite: bool = False,
    ) -> IndexEntry:
        """
        Store or replace a validated record.
        Raises ValidationError if validation is missing, failed, or belongs to other content;
        DuplicateConflictError if the id is archived with a different title/url and overwrite is off.
        """
        if validation is None or validation.record_id != record.id or validation.content_hash is None:
            raise ValidationError(
                f"Record {record.id!r} has not been validated",
                issues=[("record", "No validation result for this record")],
            )
        if validation.content_hash != record.content_hash():
            raise ValidationError(
                f"Validation result is stale for record {record.id!r}",
                issues=[("record", "Record changed after validation")],
            )
        if not validation.valid:
            raise ValidationError(
                f"Record {record.id!r} failed validation",
                issues=[(e.field, e.message) for e in validation.errors],
            )

        with self._lock:
            existing = self.find(record.id)
            if existing is not None and not overwrite:
                differing = [
                    name for name in ("title", "url") if getattr(existing, name) != getattr(record, name)
                ]
                if differing:
                    raise DuplicateConflictError(record.id, differing)

            now = self._now()
            if existing is not None and existing.status == RecordStatus.CANCELLED:
                status = RecordStatus.CANCELLED
            else:
                status = derive_status(record, now)
            verified = max(record.last_verified or record.collection_date, now)

            stored = record.model_copy(
                update={
                    "status": status,
                    "quality_score": validation.score,
                    "last_verified": verified,
                }
            )
            entry = self._write(stored)

        logger.info(
            "%s record %s (status=%s, score=%.3f)",
            "Updated" if existing is not None else "Archived",
            record.id,
            status.value,
            validation.score,
        )
        return entry

    def remove(self, record_id: str) -> None:
        """Delete a record; raises NotFoundError if absent."""
        with self._lock:
            if record_id not in self._entries:
                raise NotFoundError(record_id)
            self._storage.delete(record_id)
            entries = dict(self._entries)
            del entries[record_id]
            self._entries = entries
            self._stats = self._compute_stats(entries)
        logger.info("Removed record %s", record_id)

    def cancel(self, record_id: str) -> IndexEntry:
        """Apply an explicit cancellation signal. Cancelled is terminal."""
        with self._lock:
            record = self.get(record_id)
            if record.status == RecordStatus.CANCELLED:
                return self._entries[record_id]
            entry = self._write(record.model_copy(update={"status": RecordStatus.CANCELLED}))
        logger.info("Cancelled record %s", record_id)
        return entry

    def rescan(self, now: Optional[datetime] = None) -> dict[str, list[ChangeEntry]]:
        """
        Re-derive every record's status at time now.
        Transitions only move forward. Returns the status changes keyed by record id.
        """
        now = _as_utc(now) if now is not None else self._now()
        transitions: dict[str, list[ChangeEntry]] = {}
        with self._lock:
            for record_id in list(self._entries):
                record = self.find(record_id)
                if record is None:
                    continue
                new_status = advance_status(record.status, derive_status(record, now))
                if new_status == record.status:
                    continue
                self._write(record.model_copy(update={"status": new_status}))
                transitions[record_id] = [
                    ChangeEntry(
                        field="status",
                        old_value=record.status.value if record.status else None,
                        new_value=new_status.value,
                        severity=ChangeSeverity.LOW,
                    )
                ]
        if transitions:
            logger.info("Rescan moved %d record(s) to a new status", len(transitions))
        return transitions

    # Defined last: the name shadows the builtin for annotations later in the class body
    def list(
        self,
        status: Optional[RecordStatus | str] = None,
        category: Optional[str] = None,
    ) -> IndexListing:
        """Entries narrowed by status and/or category, ordered by deadline then id."""
        return IndexListing(self, RecordStatus(status) if status is not None else None, category)
