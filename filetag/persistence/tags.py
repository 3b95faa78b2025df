"""File tag persistence store.

The whole store is held in memory and rewritten on every mutation.  That is
fine for a personal index of a few thousand files but does not scale to very
large record counts.
"""

from __future__ import annotations

import copy
import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from ..errors import InvalidTagError, StoreCorruptError
from ..log import logger
from ._base import JsonStore

DEFAULT_DB_NAME = ".filetag.json"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


def normalize_tag(tag: str) -> str:
    """Strip whitespace and lowercase *tag*.

    Raises :class:`InvalidTagError` for non-strings and for tags that are
    empty once stripped.
    """
    if not isinstance(tag, str):
        raise InvalidTagError(f"Tag must be a string, got {type(tag).__name__}")
    normalized = tag.strip().lower()
    if not normalized:
        raise InvalidTagError(f"Invalid tag {tag!r}: tags cannot be empty")
    return normalized


def normalize_tags(tags: Iterable[str]) -> list[str]:
    """Normalize *tags*, dropping duplicates but keeping first-seen order."""
    if isinstance(tags, str):
        tags = [tags]
    return list(dict.fromkeys(normalize_tag(t) for t in tags))


@dataclass
class TagRecord:
    """Tags and timestamps for one file."""

    tags: list[str] = field(default_factory=list)
    created: str = ""
    modified: str = ""

    def to_dict(self) -> dict:
        return {
            "tags": list(self.tags),
            "created": self.created,
            "modified": self.modified,
        }

    @classmethod
    def from_dict(cls, path: str, data: object) -> TagRecord:
        """Build a record from its on-disk form, validating the shape."""
        if not isinstance(data, dict):
            raise StoreCorruptError(f"Record for {path!r} is not an object")
        tags = data.get("tags")
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            raise StoreCorruptError(f"Record for {path!r} has invalid 'tags'")
        for key in ("created", "modified"):
            if not isinstance(data.get(key), str):
                raise StoreCorruptError(f"Record for {path!r} has invalid {key!r}")
        try:
            tags = normalize_tags(tags)
        except InvalidTagError as exc:
            raise StoreCorruptError(f"Record for {path!r}: {exc}") from exc
        return cls(tags=tags, created=data["created"], modified=data["modified"])


class TagStore(JsonStore):
    """File tags (``{abs_path: {tags, created, modified}}``).

    Loaded lazily on first use and written back after every mutation.
    Not safe for unsynchronized use from several threads; separate
    processes sharing one file get last-writer-wins semantics.
    """

    def __init__(self, path: Path | str = DEFAULT_DB_NAME) -> None:
        super().__init__(path)
        self._records: dict[str, TagRecord] | None = None

    @staticmethod
    def resolve(path: str | os.PathLike[str]) -> str:
        """Return the absolute form of *path* (symlinks are not resolved)."""
        return os.path.abspath(os.fspath(path))

    # -- persistence ----------------------------------------------------------

    def load(self) -> dict[str, TagRecord]:
        """Load all records, creating an empty store file if none exists."""
        existed = self.path.exists()
        raw = self.load_raw()
        records = {path: TagRecord.from_dict(path, data) for path, data in raw.items()}
        self._records = records
        if not existed:
            logger.debug("creating empty tag store at %s", self.path)
            self.save()
        logger.debug("loaded %d record(s) from %s", len(records), self.path)
        return records

    def save(self) -> None:
        """Persist every record to disk.

        If the write fails the in-memory copy is dropped, so the next
        operation reloads what is actually on disk instead of persisting a
        change that never made it.
        """
        records = self._ensure_loaded()
        try:
            self.save_raw({path: rec.to_dict() for path, rec in records.items()})
        except BaseException:
            self._records = None
            raise

    def reload(self) -> None:
        """Forget the in-memory copy and read the file again."""
        self._records = None
        self._ensure_loaded()

    def _ensure_loaded(self) -> dict[str, TagRecord]:
        if self._records is None:
            return self.load()
        return self._records

    # -- mutation -------------------------------------------------------------

    def add_tags(self, path: str | os.PathLike[str], tags: Iterable[str]) -> list[str]:
        """Add *tags* to the file at *path* and return its full tag list.

        Raises :class:`FileNotFoundError` if *path* does not exist and
        :class:`InvalidTagError` for empty tags; neither touches the store.
        """
        records = self._ensure_loaded()
        abs_path = self.resolve(path)
        new_tags = normalize_tags(tags)
        if not new_tags:
            raise InvalidTagError("At least one tag is required")
        if not os.path.exists(abs_path):
            raise FileNotFoundError(f"File not found: {abs_path}")

        now = _now()
        record = records.get(abs_path)
        if record is None:
            record = records[abs_path] = TagRecord(created=now)
        for tag in new_tags:
            if tag not in record.tags:
                record.tags.append(tag)
        record.modified = now

        self.save()
        logger.debug("added %s to %s", new_tags, abs_path)
        return list(record.tags)

    def remove_tags(
        self, path: str | os.PathLike[str], tags: Iterable[str]
    ) -> list[str]:
        """Remove *tags* from *path* and return the tags that remain.

        An untracked path yields ``[]``.  A record left with no tags is kept
        (with its original ``created``); use :meth:`clear_tags` to drop it.
        """
        records = self._ensure_loaded()
        abs_path = self.resolve(path)
        doomed = set(normalize_tags(tags))
        record = records.get(abs_path)
        if record is None:
            return []

        record.tags = [t for t in record.tags if t not in doomed]
        record.modified = _now()

        self.save()
        logger.debug("removed %s from %s", sorted(doomed), abs_path)
        return list(record.tags)

    def clear_tags(self, path: str | os.PathLike[str]) -> None:
        """Forget *path* entirely.  Untracked paths are a no-op."""
        records = self._ensure_loaded()
        abs_path = self.resolve(path)
        if records.pop(abs_path, None) is not None:
            logger.debug("cleared %s", abs_path)
        self.save()

    # -- queries --------------------------------------------------------------

    def get_tags(self, path: str | os.PathLike[str]) -> list[str]:
        """Return the tags for *path* (empty list if untracked)."""
        record = self._ensure_loaded().get(self.resolve(path))
        return list(record.tags) if record else []

    def find_by_tags(self, tags: Iterable[str], match_all: bool = False) -> list[str]:
        """Return paths carrying any (or, with *match_all*, every) tag in *tags*.

        With an empty query, AND matches every tracked path and OR matches
        none.
        """
        wanted = set(normalize_tags(tags))
        results = []
        for path, record in self._ensure_loaded().items():
            have = set(record.tags)
            if match_all:
                if wanted <= have:
                    results.append(path)
            elif wanted & have:
                results.append(path)
        return results

    def list_all_tags(self) -> list[str]:
        """Return every tag in use, deduplicated and sorted."""
        return sorted({t for rec in self._ensure_loaded().values() for t in rec.tags})

    def list_all(self) -> dict[str, TagRecord]:
        """Return a deep copy of every record keyed by path."""
        return copy.deepcopy(self._ensure_loaded())

    def __len__(self) -> int:
        return len(self._ensure_loaded())

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, os.PathLike)):
            return False
        return self.resolve(path) in self._ensure_loaded()
