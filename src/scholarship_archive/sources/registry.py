"""Name and location lookup for record sources."""

from pathlib import Path
from typing import Type
from urllib.parse import urlparse

from scholarship_archive.sources.base import RecordSource
from scholarship_archive.sources.http_feed import HttpFeedSource
from scholarship_archive.sources.json_file import JsonFileSource


class SourceRegistry:
    """
    Where extraction output can come from.
    Sources are looked up by name ("file", "http") or inferred from a location:
    http(s) URLs are fetched from the automation host, anything else is a local file.
    """

    _sources: dict[str, Type[RecordSource]] = {
        "file": JsonFileSource,
        "http": HttpFeedSource,
    }
    _schemes: dict[str, str] = {"http": "http", "https": "http", "file": "file", "": "file"}

    @classmethod
    def register(cls, name: str, source_cls: Type[RecordSource], *schemes: str) -> None:
        """Add a source, optionally claiming URL schemes for for_location()."""
        cls._sources[name.lower()] = source_cls
        for scheme in schemes:
            cls._schemes[scheme.lower()] = name.lower()

    @classmethod
    def get(cls, name: str, *args, **kwargs) -> RecordSource:
        """Source instance by name; args/kwargs go to the source constructor."""
        source_cls = cls._sources.get(name.lower())
        if not source_cls:
            raise ValueError(f"Unknown source: {name}. Available: {cls.available_sources()}")
        return source_cls(*args, **kwargs)

    @classmethod
    def for_location(cls, location: str | Path) -> RecordSource:
        """Source for a path or URL, chosen by its scheme."""
        if isinstance(location, Path):
            return cls.get("file", location)
        parsed = urlparse(location)
        # Windows drive letters parse as one-letter schemes
        scheme = "" if len(parsed.scheme) == 1 else parsed.scheme.lower()
        name = cls._schemes.get(scheme)
        if name is None:
            raise ValueError(f"No source handles {scheme}:// locations")
        if name == "file":
            return cls.get("file", Path(parsed.path) if scheme == "file" else Path(location))
        return cls.get(name, location)

    @classmethod
    def available_sources(cls) -> list[str]:
        """Registered source names, in registration order."""
        return list(cls._sources.keys())
