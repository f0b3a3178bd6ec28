"""Raw extraction output and typed coercion into Record."""

import re
from typing import Any

import pydantic
from pydantic import BaseModel, ConfigDict, Field

from scholarship_archive.errors import ValidationError
from scholarship_archive.models.amount import parse_amount
from scholarship_archive.models.record import DERIVED_FIELDS, Record

REQUIRED_FIELDS: tuple[str, ...] = ("id", "title", "url")

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(key: str) -> str:
    """collectionDate -> collection_date; 'Application Opens' -> application_opens."""
    key = key.strip().replace("-", "_").replace(" ", "_")
    if "_" not in key and not key.isupper():
        key = _CAMEL_BOUNDARY.sub("_", key)
    return key.lower()


class RawRecord(BaseModel):
    """
    Field values as extracted by the browser-automation driver.
    Everything is a string; parsing into types happens in to_record().
    """

    model_config = ConfigDict(extra="allow")

    data: dict[str, Any] = Field(default_factory=dict)

    def to_record(self) -> Record:
        return coerce_record(self)


def coerce_record(raw: RawRecord | dict[str, Any]) -> Record:
    """
    Build a Record from raw extracted values.
    Fails fast with ValidationError when a required field is missing or blank
    rather than silently defaulting to empty strings. Status, score and
    last_verified are owned by the archive and dropped from the input.
    """
    data = raw.data if isinstance(raw, RawRecord) else raw
    cleaned: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            value = value.strip()
            if value == "":
                value = None
        cleaned[_snake(key)] = value

    missing = [f for f in REQUIRED_FIELDS if not cleaned.get(f)]
    if missing:
        raise ValidationError(
            f"Missing required field(s): {', '.join(missing)}",
            issues=[(f, "Required field is missing") for f in missing],
        )

    amount = cleaned.get("amount")
    if amount and not any(cleaned.get(k) for k in ("amount_min", "amount_max", "currency")):
        parts = parse_amount(str(amount))
        cleaned["amount_min"] = parts.minimum
        cleaned["amount_max"] = parts.maximum
        cleaned["currency"] = parts.currency

    known = {k: v for k, v in cleaned.items() if k in Record.model_fields and k not in DERIVED_FIELDS}
    try:
        return Record.model_validate(known)
    except (pydantic.ValidationError, ValueError) as e:
        issues = _issues_from(e)
        raise ValidationError(f"Record {cleaned.get('id')!r} could not be coerced", issues) from e


def _issues_from(error: Exception) -> list[tuple[str, str]]:
    if isinstance(error, pydantic.ValidationError):
        issues = []
        for item in error.errors():
            loc = ".".join(str(p) for p in item.get("loc", ())) or "record"
            issues.append((loc, item.get("msg", "invalid value")))
        return issues
    return [("record", str(error))]
