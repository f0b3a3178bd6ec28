"""Archive index and record status lifecycle."""

from .index import ArchiveIndex, IndexListing
from .lifecycle import advance_status, derive_status

__all__ = ["ArchiveIndex", "IndexListing", "advance_status", "derive_status"]
