"""Storage backends for archived records and the change log."""

from scholarship_archive.storage.base import RecordStorage
from scholarship_archive.storage.change_log import ChangeLogStore, LoggedChange
from scholarship_archive.storage.json_dir import JsonDirectoryStorage
from scholarship_archive.storage.memory import MemoryStorage
from scholarship_archive.storage.sqlite_store import SqliteStorage

__all__ = [
    "ChangeLogStore",
    "JsonDirectoryStorage",
    "LoggedChange",
    "MemoryStorage",
    "RecordStorage",
    "SqliteStorage",
]
