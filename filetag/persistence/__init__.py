"""Persistence layer – each store owns its file path, data format, and I/O."""

from ._base import JsonStore
from .tags import DEFAULT_DB_NAME, TagRecord, TagStore, normalize_tag, normalize_tags

__all__ = [
    "DEFAULT_DB_NAME",
    "JsonStore",
    "TagRecord",
    "TagStore",
    "normalize_tag",
    "normalize_tags",
]
