"""Field-level change detection between two versions of the same record."""

from collections import Counter

from scholarship_archive.errors import MismatchedIdError
from scholarship_archive.models.record import Record
from scholarship_archive.models.results import ChangeEntry, ChangeSeverity

TRACKED_FIELDS: dict[str, ChangeSeverity] = {
    "deadline": ChangeSeverity.HIGH,
    "amount": ChangeSeverity.MEDIUM,
    "status": ChangeSeverity.LOW,
    "title": ChangeSeverity.LOW,
    "url": ChangeSeverity.LOW,
}


def _plain(value):
    """Enum members compare and serialize by value."""
    return getattr(value, "value", value)


def detect_changes(old: Record, new: Record) -> list[ChangeEntry]:
    """
    Compare tracked fields only; untracked fields are ignored even if changed.
    Ordered by severity (high first), then field name.
    """
    if old.id != new.id:
        raise MismatchedIdError(old.id, new.id)

    changes: list[ChangeEntry] = []
    for field, severity in TRACKED_FIELDS.items():
        old_value = _plain(getattr(old, field))
        new_value = _plain(getattr(new, field))
        if old_value != new_value:
            changes.append(
                ChangeEntry(field=field, old_value=old_value, new_value=new_value, severity=severity)
            )
    changes.sort(key=lambda c: (-c.severity.rank, c.field))
    return changes


def summarize_changes(changes: list[ChangeEntry]) -> dict[str, int]:
    """Count changes per severity, always including all three levels."""
    counts = Counter(c.severity.value for c in changes)
    return {s.value: counts.get(s.value, 0) for s in (ChangeSeverity.HIGH, ChangeSeverity.MEDIUM, ChangeSeverity.LOW)}
