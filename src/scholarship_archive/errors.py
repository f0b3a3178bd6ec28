"""Exceptions raised by validation, change detection and the archive index."""

from typing import Iterable, Optional


class ArchiveError(Exception):
    """Base class for scholarship-archive errors."""


class ValidationError(ArchiveError):
    """
    Record failed required-field or format checks.
    Carries the offending (field, message) pairs so callers can fix and resubmit.
    """

    def __init__(self, message: str, issues: Optional[Iterable[tuple[str, str]]] = None):
        super().__init__(message)
        self.issues: list[tuple[str, str]] = list(issues or [])

    @property
    def fields(self) -> list[str]:
        return [field for field, _ in self.issues]


class DuplicateConflictError(ArchiveError):
    """Identifier already archived with a different title or url."""

    def __init__(self, record_id: str, differing: Iterable[str]):
        self.record_id = record_id
        self.differing = sorted(differing)
        super().__init__(
            f"Record {record_id!r} already archived with different {', '.join(self.differing)}"
        )


class NotFoundError(ArchiveError, KeyError):
    """Read or delete of an unknown record id."""

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(record_id)

    def __str__(self) -> str:
        return f"Record not found: {self.record_id}"


class MismatchedIdError(ArchiveError):
    """Change detection was asked to compare two different records."""

    def __init__(self, old_id: str, new_id: str):
        self.old_id = old_id
        self.new_id = new_id
        super().__init__(f"Cannot compare records with different ids: {old_id!r} != {new_id!r}")
