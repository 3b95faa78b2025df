"""Package-wide logger."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

logger = logging.getLogger("filetag")


def configure_logging(level: str | int = "WARNING") -> None:
    """Attach a stderr handler to the package logger and set its level.

    Unknown level names fall back to ``WARNING``.  Calling this more than
    once only adjusts the level.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logger.setLevel(level)
    if not any(getattr(h, "_filetag", False) for h in logger.handlers):
        handler = RichHandler(
            console=Console(stderr=True),
            show_time=False,
            show_path=False,
            markup=False,
        )
        handler._filetag = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
