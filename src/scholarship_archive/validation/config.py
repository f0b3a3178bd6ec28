"""Validation thresholds and score weights, loadable from YAML."""

import re
from functools import cached_property
from pathlib import Path
from typing import Optional

try:
    import yaml
except ModuleNotFoundError as e:
    raise ModuleNotFoundError(
        "PyYAML is required for config loading. Run: poetry install"
    ) from e
from pydantic import BaseModel, ConfigDict, Field

from scholarship_archive.models.amount import CURRENCY_SYMBOLS, build_amount_pattern


class ValidationConfig(BaseModel):
    """Rule thresholds and multiplicative score weights."""

    model_config = ConfigDict(frozen=True)

    min_title_length: int = Field(default=5, ge=1)
    error_weight: float = Field(default=0.5, gt=0.0, lt=1.0, description="Score factor per error")
    warning_weight: float = Field(default=0.85, gt=0.0, lt=1.0, description="Score factor per warning")
    warn_on_missing_deadline: bool = True
    warn_on_missing_amount: bool = True
    currency_symbols: list[str] = Field(default_factory=lambda: list(CURRENCY_SYMBOLS))
    currency_codes: Optional[list[str]] = Field(
        default=None,
        description="Accepted ISO codes; None accepts any three-letter upper-case code",
    )

    @cached_property
    def amount_pattern(self) -> re.Pattern[str]:
        return build_amount_pattern(self.currency_symbols, self.currency_codes)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ValidationConfig":
        """Load config from YAML file. Supports nested (validation/scoring) or flat structure."""
        data = yaml.safe_load(Path(path).read_text()) or {}
        validation = data.get("validation", {})
        scoring = data.get("scoring", {})

        def _get(key: str, nested: dict, top: dict):
            return nested.get(key, top.get(key))

        flat: dict = {}
        for key in (
            "min_title_length",
            "warn_on_missing_deadline",
            "warn_on_missing_amount",
            "currency_symbols",
            "currency_codes",
        ):
            value = _get(key, validation, data)
            if value is not None:
                flat[key] = value
        for key in ("error_weight", "warning_weight"):
            value = _get(key, scoring, data)
            if value is not None:
                flat[key] = value
        return cls.model_validate(flat)


DEFAULT_CONFIG = ValidationConfig()
