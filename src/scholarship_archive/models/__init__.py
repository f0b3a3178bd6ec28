"""Data models for scholarship records, validation results and index projections."""

from scholarship_archive.models.application import ApplicationRecord, ApplicationStatus
from scholarship_archive.models.record import Record, RecordStatus
from scholarship_archive.models.results import (
    ChangeEntry,
    ChangeSeverity,
    IndexEntry,
    IndexStats,
    ValidationIssue,
    ValidationResult,
)
from scholarship_archive.models.raw import RawRecord, coerce_record

__all__ = [
    "ApplicationRecord",
    "ApplicationStatus",
    "ChangeEntry",
    "ChangeSeverity",
    "IndexEntry",
    "IndexStats",
    "RawRecord",
    "Record",
    "RecordStatus",
    "ValidationIssue",
    "ValidationResult",
    "coerce_record",
]
