"""Exceptions raised by the tag store."""

from __future__ import annotations


class FileTagError(Exception):
    """Base class for tag store errors."""


class StoreCorruptError(FileTagError):
    """The backing file exists but does not hold a valid tag store."""


class InvalidTagError(FileTagError, ValueError):
    """A tag is empty (after normalization) or not a string."""
