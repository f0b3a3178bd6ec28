"""Validation engine: runs every rule and folds failures into a quality score."""

import logging
from typing import TYPE_CHECKING, Callable, Optional

from scholarship_archive.errors import ValidationError
from scholarship_archive.models.record import Record
from scholarship_archive.models.results import ValidationIssue, ValidationResult
from scholarship_archive.validation.config import DEFAULT_CONFIG, ValidationConfig

from .rules import (
    RuleOutcome,
    check_amount,
    check_deadline,
    check_duplicate_id,
    check_title,
    check_url,
)

if TYPE_CHECKING:
    from scholarship_archive.archive.index import ArchiveIndex

logger = logging.getLogger(__name__)

RuleFn = Callable[[Record, ValidationConfig, "ArchiveIndex | None"], RuleOutcome]

DEFAULT_RULES: list[RuleFn] = [
    check_title,
    check_deadline,
    check_amount,
    check_url,
    check_duplicate_id,
]


def compute_score(error_count: int, warning_count: int, config: ValidationConfig = DEFAULT_CONFIG) -> float:
    """Multiplicative decay: 1.0 only with zero errors and zero warnings."""
    return (config.error_weight ** error_count) * (config.warning_weight ** warning_count)


class RecordValidator:
    """
    Applies all rules to a record; none short-circuit.
    The index is read only by the duplicate-id rule.
    """

    def __init__(
        self,
        config: Optional[ValidationConfig] = None,
        index: "ArchiveIndex | None" = None,
        *,
        check_duplicates: bool = True,
    ):
        self.config = config or DEFAULT_CONFIG
        self.index = index
        self._rules: list[RuleFn] = [
            rule for rule in DEFAULT_RULES if check_duplicates or rule is not check_duplicate_id
        ]

    def validate(self, record: Record) -> ValidationResult:
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []

        for rule_fn in self._rules:
            outcome = rule_fn(record, self.config, self.index)
            if outcome is None:
                continue
            level, issue = outcome
            if level == "error":
                errors.append(issue)
            else:
                warnings.append(issue)

        score = compute_score(len(errors), len(warnings), self.config)
        if errors:
            logger.debug("Record %s failed validation: %s", record.id, [e.field for e in errors])

        return ValidationResult(
            record_id=record.id,
            valid=not errors,
            score=score,
            errors=errors,
            warnings=warnings,
            content_hash=record.content_hash(),
        )

    def validate_many(self, records: list[Record]) -> list[ValidationResult]:
        return [self.validate(r) for r in records]


def validate(
    record: Record,
    index: "ArchiveIndex | None" = None,
    config: Optional[ValidationConfig] = None,
) -> ValidationResult:
    """Validate one record with the default rule set."""
    return RecordValidator(config, index).validate(record)


def apply_result(record: Record, result: ValidationResult) -> Record:
    """Return a copy of record with the result's score folded in."""
    if result.record_id != record.id or result.content_hash != record.content_hash():
        raise ValidationError(
            f"Validation result does not belong to record {record.id!r}",
            issues=[("record", "Stale or foreign validation result")],
        )
    return record.model_copy(update={"quality_score": result.score})
