"""Pipeline orchestration: raw values -> record -> validate -> archive -> detect changes."""

import logging
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from scholarship_archive.archive import ArchiveIndex
from scholarship_archive.changes import detect_changes, summarize_changes
from scholarship_archive.errors import DuplicateConflictError, ValidationError
from scholarship_archive.models.raw import RawRecord, coerce_record
from scholarship_archive.models.results import ChangeEntry, ValidationIssue, ValidationResult
from scholarship_archive.storage.change_log import ChangeLogStore
from scholarship_archive.validation import RecordValidator, ValidationConfig, compute_score

logger = logging.getLogger(__name__)


class RejectedRecord(BaseModel):
    """A raw record that did not make it into the archive."""

    record_id: Optional[str] = None
    reason: str
    issues: list[ValidationIssue] = Field(default_factory=list)


class IngestReport(BaseModel):
    """Counts and details of one ingest batch."""

    received: int = 0
    stored: int = 0
    new: int = 0
    updated: int = 0
    unchanged: int = 0
    rejected: list[RejectedRecord] = Field(default_factory=list)
    scores: dict[str, float] = Field(default_factory=dict)
    changes: dict[str, list[ChangeEntry]] = Field(default_factory=dict)


def _raw_id(raw: RawRecord) -> Optional[str]:
    value = raw.data.get("id")
    if value is None:
        return None
    return str(value).strip() or None


def _issues(error: ValidationError) -> list[ValidationIssue]:
    return [ValidationIssue(field=f, message=m) for f, m in error.issues]


def validate_raw(
    raw_records: Iterable[RawRecord],
    *,
    config: Optional[ValidationConfig] = None,
    index: Optional[ArchiveIndex] = None,
) -> list[ValidationResult]:
    """
    Validate without storing. Records that cannot be coerced come back
    as invalid results carrying the coercion errors.
    """
    validator = RecordValidator(config, index)
    results: list[ValidationResult] = []
    for raw in raw_records:
        try:
            record = coerce_record(raw)
        except ValidationError as e:
            errors = _issues(e)
            results.append(
                ValidationResult(
                    record_id=_raw_id(raw) or "",
                    valid=False,
                    score=compute_score(len(errors), 0, validator.config),
                    errors=errors,
                )
            )
            continue
        results.append(validator.validate(record))
    return results


def ingest_records(
    raw_records: Iterable[RawRecord],
    index: ArchiveIndex,
    *,
    config: Optional[ValidationConfig] = None,
    change_log: Optional[ChangeLogStore] = None,
    overwrite: bool = False,
) -> IngestReport:
    """
    Coerce, validate and archive each raw record, then diff against the prior version.
    A failing record is reported and skipped; it never aborts the batch.
    """
    # With overwrite on, id collisions are intended, so the duplicate rule is skipped
    validator = RecordValidator(config, index, check_duplicates=not overwrite)
    report = IngestReport()

    for raw in raw_records:
        report.received += 1
        try:
            record = coerce_record(raw)
        except ValidationError as e:
            logger.warning("Rejected raw record %s: %s", _raw_id(raw), e)
            report.rejected.append(RejectedRecord(record_id=_raw_id(raw), reason=str(e), issues=_issues(e)))
            continue

        result = validator.validate(record)
        if not result.valid:
            logger.warning("Record %s failed validation: %s", record.id, result.error_fields())
            report.rejected.append(
                RejectedRecord(record_id=record.id, reason="failed validation", issues=result.errors)
            )
            continue

        prior = index.find(record.id)
        try:
            index.upsert(record, result, overwrite=overwrite)
        except (DuplicateConflictError, ValidationError) as e:
            logger.warning("Record %s not archived: %s", record.id, e)
            issues = _issues(e) if isinstance(e, ValidationError) else [
                ValidationIssue(field="id", message=str(e))
            ]
            report.rejected.append(RejectedRecord(record_id=record.id, reason=str(e), issues=issues))
            continue

        report.stored += 1
        report.scores[record.id] = result.score
        if prior is None:
            report.new += 1
            continue

        changes = detect_changes(prior, index.get(record.id))
        if not changes:
            report.unchanged += 1
            continue
        report.updated += 1
        report.changes[record.id] = changes
        logger.info("Record %s changed: %s", record.id, summarize_changes(changes))
        if change_log is not None:
            change_log.record(record.id, changes)

    return report
