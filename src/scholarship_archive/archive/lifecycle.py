"""Status lifecycle: upcoming -> active -> expired, with a sticky cancelled state."""

from datetime import datetime
from typing import Optional

from scholarship_archive.models.record import Record, RecordStatus

_RANK = {
    RecordStatus.UPCOMING: 0,
    RecordStatus.ACTIVE: 1,
    RecordStatus.EXPIRED: 2,
}


def derive_status(record: Record, now: datetime) -> RecordStatus:
    """
    Status implied by the record's dates at time now.
    Cancelled is never inferred, only carried over from the record.
    """
    if record.status == RecordStatus.CANCELLED:
        return RecordStatus.CANCELLED
    today = now.date()
    if record.deadline is not None and today > record.deadline:
        return RecordStatus.EXPIRED
    if record.application_opens is not None and today < record.application_opens:
        return RecordStatus.UPCOMING
    return RecordStatus.ACTIVE


def advance_status(current: Optional[RecordStatus], derived: RecordStatus) -> RecordStatus:
    """Move forward only; a periodic re-scan never reverses a transition."""
    if current is None:
        return derived
    if RecordStatus.CANCELLED in (current, derived):
        return RecordStatus.CANCELLED
    return current if _RANK[current] >= _RANK[derived] else derived
