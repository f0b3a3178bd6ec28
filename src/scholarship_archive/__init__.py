"""Validation, change detection and archival indexing for scraped scholarship records."""

__version__ = "0.1.0"
