"""Record validation rules, engine and configuration."""

from .applications import validate_application
from .config import DEFAULT_CONFIG, ValidationConfig
from .engine import RecordValidator, apply_result, compute_score, validate

__all__ = [
    "DEFAULT_CONFIG",
    "RecordValidator",
    "ValidationConfig",
    "apply_result",
    "compute_score",
    "validate",
    "validate_application",
]
