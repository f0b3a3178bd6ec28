"""Validation rules: each returns (level, issue) or None when the rule passes."""

from typing import TYPE_CHECKING, Literal, Optional

from scholarship_archive.models.amount import is_currency_amount
from scholarship_archive.models.record import Record
from scholarship_archive.models.results import ValidationIssue
from scholarship_archive.validation.config import ValidationConfig

if TYPE_CHECKING:
    from scholarship_archive.archive.index import ArchiveIndex

Level = Literal["error", "warning"]
RuleOutcome = Optional[tuple[Level, ValidationIssue]]


def _error(field: str, message: str) -> tuple[Level, ValidationIssue]:
    return "error", ValidationIssue(field=field, message=message)


def _warning(field: str, message: str) -> tuple[Level, ValidationIssue]:
    return "warning", ValidationIssue(field=field, message=message)


def check_title(record: Record, config: ValidationConfig, index: "ArchiveIndex | None") -> RuleOutcome:
    """Title must be present and at least min_title_length characters."""
    title = (record.title or "").strip()
    if not title:
        return _error("title", "Title is missing")
    if len(title) < config.min_title_length:
        return _error(
            "title",
            f"Title too short ({len(title)} chars, minimum {config.min_title_length})",
        )
    return None


def check_deadline(record: Record, config: ValidationConfig, index: "ArchiveIndex | None") -> RuleOutcome:
    """
    Deadline strictly before the collection date is an error, not a warning:
    the record was already closed when it was collected.
    """
    if record.deadline is None:
        if config.warn_on_missing_deadline:
            return _warning("deadline", "No deadline found")
        return None
    collected_on = record.collection_date.date()
    if record.deadline < collected_on:
        return _error(
            "deadline",
            f"Deadline {record.deadline.isoformat()} is before collection date {collected_on.isoformat()}",
        )
    return None


def check_amount(record: Record, config: ValidationConfig, index: "ArchiveIndex | None") -> RuleOutcome:
    """Amount, when present, must look like a currency amount."""
    if not record.amount:
        if config.warn_on_missing_amount:
            return _warning("amount", "No amount found")
        return None
    if not is_currency_amount(
        record.amount,
        config.amount_pattern,
        symbols=config.currency_symbols,
        codes=config.currency_codes,
    ):
        return _error("amount", f"Unrecognized amount format: {record.amount!r}")
    return None


def check_url(record: Record, config: ValidationConfig, index: "ArchiveIndex | None") -> RuleOutcome:
    if record.url is None:
        return None
    if not record.url.startswith(("http://", "https://")):
        return _error("url", f"URL must start with http:// or https://: {record.url!r}")
    return None


def check_duplicate_id(record: Record, config: ValidationConfig, index: "ArchiveIndex | None") -> RuleOutcome:
    """
    Id already archived with a different title or url signals a possible collision.
    Only rule that reads outside the record; passes when no index is supplied.
    """
    if index is None:
        return None
    existing = index.find(record.id)
    if existing is None:
        return None
    differing = [
        name
        for name in ("title", "url")
        if getattr(existing, name) != getattr(record, name)
    ]
    if differing:
        return _error(
            "id",
            f"Id {record.id!r} already archived with different {', '.join(differing)}",
        )
    return None
