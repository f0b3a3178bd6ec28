"""Application tracking record linked to an archived scholarship."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from scholarship_archive.models.record import parse_timestamp


class ApplicationStatus(str, Enum):
    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"
    AWARDED = "awarded"
    REJECTED = "rejected"


class ApplicationRecord(BaseModel):
    """An applicant's progress on one archived record."""

    id: str = Field(..., min_length=1)
    record_id: str = Field(..., min_length=1, description="Id of the archived scholarship")
    status: ApplicationStatus = ApplicationStatus.PLANNED
    submitted_at: Optional[datetime] = None
    notes: Optional[str] = None

    @field_validator("submitted_at", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value):
        return parse_timestamp(value)
