"""filetag - tag files on disk and find them again by tag."""

from filetag.errors import FileTagError, InvalidTagError, StoreCorruptError
from filetag.persistence import DEFAULT_DB_NAME, TagRecord, TagStore

__version__ = "1.0.0"

__all__ = [
    "DEFAULT_DB_NAME",
    "FileTagError",
    "InvalidTagError",
    "StoreCorruptError",
    "TagRecord",
    "TagStore",
]
