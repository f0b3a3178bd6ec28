"""Change detection between record versions."""

from .detector import TRACKED_FIELDS, detect_changes, summarize_changes

__all__ = ["TRACKED_FIELDS", "detect_changes", "summarize_changes"]
