"""Value objects produced by the validator, change detector and archive index."""

from datetime import date
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from scholarship_archive.models.record import RecordStatus


class ValidationIssue(BaseModel):
    """A single error or warning attached to a record field."""

    field: str
    message: str


class ValidationResult(BaseModel):
    """Outcome of validating one record. Created fresh per call."""

    record_id: str
    valid: bool = Field(..., description="True when there are no errors")
    score: float = Field(..., ge=0.0, le=1.0)
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)
    content_hash: Optional[str] = Field(
        default=None,
        description="Hash of the record content this result was computed for",
    )

    def error_fields(self) -> list[str]:
        return [e.field for e in self.errors]

    def warning_fields(self) -> list[str]:
        return [w.field for w in self.warnings]


class ChangeSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return {"low": 0, "medium": 1, "high": 2}[self.value]


class ChangeEntry(BaseModel):
    """Field-level difference between two versions of the same record."""

    field: str
    old_value: Any = None
    new_value: Any = None
    severity: ChangeSeverity


class IndexEntry(BaseModel):
    """Denormalized projection of an archived record, kept for fast listing."""

    id: str
    title: str
    deadline: Optional[date] = None
    amount: Optional[str] = None
    status: RecordStatus
    category: Optional[str] = None
    storage_location: str


class IndexStats(BaseModel):
    """Aggregate counts over the archive index."""

    total: int = 0
    active: int = 0
    expired: int = 0
    upcoming: int = 0
    cancelled: int = 0
    by_category: dict[str, int] = Field(default_factory=dict)
