"""Scholarship record model and derived status."""

import hashlib
import json
from datetime import date, datetime, time, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator
from pydantic.alias_generators import to_camel


class RecordStatus(str, Enum):
    """Lifecycle status of an archived record. Derived, except for cancelled."""

    UPCOMING = "upcoming"
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


# Bookkeeping fields set by the archive, never taken from extracted values
DERIVED_FIELDS = {"status", "quality_score", "last_verified"}


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def parse_date(value: Any) -> Optional[date]:
    """Accept date, datetime or ISO date/datetime string; empty string is None."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if len(text) > 10:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    return value


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Accept datetime, date or ISO string; naive values are taken as UTC."""
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if len(text) == 10:
            value = date.fromisoformat(text)
        else:
            value = datetime.fromisoformat(text.replace("Z", "+00:00"))
    if isinstance(value, date) and not isinstance(value, datetime):
        value = datetime.combine(value, time())
    if isinstance(value, datetime) and value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


class Record(BaseModel):
    """
    Canonical scholarship/opportunity record.
    Accepts camelCase keys (collectionDate, amountMin, ...) as well as snake_case.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., min_length=1, frozen=True, description="Stable join key")
    title: str = ""
    amount: Optional[str] = None
    amount_min: Optional[Decimal] = None
    amount_max: Optional[Decimal] = None
    currency: Optional[str] = None

    deadline: Optional[date] = None
    application_opens: Optional[date] = None

    url: Optional[str] = None
    category: Optional[str] = None
    sponsor: Optional[str] = None
    description: Optional[str] = None

    status: Optional[RecordStatus] = None
    collection_date: datetime = Field(default_factory=_now_utc)
    last_verified: Optional[datetime] = None
    quality_score: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    tags: frozenset[str] = Field(default_factory=frozenset)

    @field_validator("deadline", "application_opens", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> Any:
        return parse_date(value)

    @field_validator("collection_date", "last_verified", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> Any:
        return parse_timestamp(value)

    @field_validator("collection_date", "last_verified")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> Any:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            return frozenset(t.strip() for t in value.split(",") if t.strip())
        return value

    @model_validator(mode="after")
    def _check_invariants(self) -> "Record":
        if self.amount_min is not None and self.amount_max is not None:
            if self.amount_min > self.amount_max:
                raise ValueError(
                    f"amount_min ({self.amount_min}) exceeds amount_max ({self.amount_max})"
                )
        if self.last_verified is None:
            self.last_verified = self.collection_date
        elif self.last_verified < self.collection_date:
            raise ValueError("last_verified must not be before collection_date")
        return self

    @field_serializer("tags")
    def _serialize_tags(self, tags: frozenset[str]) -> list[str]:
        return sorted(tags)

    def content_hash(self) -> str:
        """Hash of caller-supplied content; derived bookkeeping fields are excluded."""
        data = self.model_dump(mode="json", exclude=DERIVED_FIELDS)
        payload = json.dumps(data, sort_keys=True, default=str)
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()

    def with_updates(self, **changes: Any) -> "Record":
        """Return a re-validated copy with the given fields replaced (id cannot change)."""
        if "id" in changes and changes["id"] != self.id:
            raise ValueError("Record id is immutable")
        data = self.model_dump()
        data.update(changes)
        return Record.model_validate(data)
