"""Checks for application records against the archived scholarship they target."""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from scholarship_archive.models.application import ApplicationRecord, ApplicationStatus
from scholarship_archive.models.record import RecordStatus
from scholarship_archive.models.results import ValidationIssue, ValidationResult
from scholarship_archive.validation.config import DEFAULT_CONFIG, ValidationConfig
from scholarship_archive.validation.engine import compute_score

if TYPE_CHECKING:
    from scholarship_archive.archive.index import ArchiveIndex

_OPEN_STATES = (ApplicationStatus.PLANNED, ApplicationStatus.IN_PROGRESS)


def validate_application(
    app: ApplicationRecord,
    index: "ArchiveIndex",
    now: Optional[datetime] = None,
    config: Optional[ValidationConfig] = None,
) -> ValidationResult:
    """
    Application must reference an archived record and, when submitted,
    be submitted on or before that record's deadline.
    Warns when an unsubmitted application targets an expired or cancelled record.
    """
    config = config or DEFAULT_CONFIG
    now = now or datetime.now(timezone.utc)
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []

    record = index.find(app.record_id)
    if record is None:
        errors.append(ValidationIssue(field="record_id", message=f"No archived record {app.record_id!r}"))
    else:
        if app.submitted_at is not None and record.deadline is not None:
            if app.submitted_at.date() > record.deadline:
                errors.append(
                    ValidationIssue(
                        field="submitted_at",
                        message=f"Submitted after deadline {record.deadline.isoformat()}",
                    )
                )
        if app.status in _OPEN_STATES and record.status in (RecordStatus.EXPIRED, RecordStatus.CANCELLED):
            warnings.append(
                ValidationIssue(field="status", message=f"Scholarship is {record.status.value}")
            )

    if app.status == ApplicationStatus.SUBMITTED and app.submitted_at is None:
        warnings.append(ValidationIssue(field="submitted_at", message="Submitted without a timestamp"))
    elif app.submitted_at is not None and app.submitted_at > now:
        errors.append(ValidationIssue(field="submitted_at", message="Submission time is in the future"))

    return ValidationResult(
        record_id=app.id,
        valid=not errors,
        score=compute_score(len(errors), len(warnings), config),
        errors=errors,
        warnings=warnings,
    )
