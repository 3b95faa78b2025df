"""Base JSON persistence store."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from ..errors import StoreCorruptError
from ..log import logger


class JsonStore:
    """JSON object file store with strict reads and atomic writes.

    Subclasses override ``_default()`` to provide the empty-state value.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    # -- core I/O -------------------------------------------------------------

    def load_raw(self) -> dict:
        """Read and parse the JSON file.

        Returns ``_default()`` when the file does not exist.  Content that is
        not UTF-8 JSON holding an object raises :class:`StoreCorruptError`;
        read failures propagate as :class:`OSError`.
        """
        if not self.path.exists():
            return self._default()
        data = self.path.read_bytes()
        try:
            raw = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("corrupt JSON store %s: %s", self.path, exc)
            raise StoreCorruptError(
                f"Store file {self.path} is not valid JSON: {exc}"
            ) from exc
        if not isinstance(raw, dict):
            logger.warning("store %s: top level is not an object", self.path)
            raise StoreCorruptError(
                f"Store file {self.path} must contain a JSON object"
            )
        return raw

    def save_raw(self, data: dict) -> None:
        """Atomically write *data* as pretty-printed JSON.

        The document goes to a temp file next to the target, which is then
        renamed over it, so readers only ever see a complete file.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        text = json.dumps(data, indent=2, ensure_ascii=False)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.",
            suffix=".tmp",
            dir=self.path.parent,
        )
        try:
            with open(fd, "w", encoding="utf-8") as f:
                f.write(text + "\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("saved %s (%d bytes)", self.path, len(text) + 1)

    # -- override point -------------------------------------------------------

    def _default(self) -> dict:  # noqa: PLR6301
        """Return the empty-state value for this store."""
        return {}
