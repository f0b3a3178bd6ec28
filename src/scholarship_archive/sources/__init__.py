"""Raw record sources (browser-automation extraction output)."""

from scholarship_archive.sources.base import RecordSource
from scholarship_archive.sources.http_feed import HttpFeedSource
from scholarship_archive.sources.json_file import JsonFileSource
from scholarship_archive.sources.registry import SourceRegistry

__all__ = ["HttpFeedSource", "JsonFileSource", "RecordSource", "SourceRegistry"]
