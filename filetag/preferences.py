"""User preferences for filetag.

Loads settings from ~/.filetag/preferences.yaml.
Falls back to sensible defaults if the file doesn't exist or is invalid.
Creates a default file on first run so users can discover and edit it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .log import logger
from .persistence import DEFAULT_DB_NAME

PREFS_PATH = Path.home() / ".filetag" / "preferences.yaml"

_DEFAULT_YAML = f"""\
# filetag preferences
# Command-line flags (--db, --json) take precedence over these values.
# Delete this file to reset to defaults.

store:
  path: "{DEFAULT_DB_NAME}"      # tag database; relative paths use the current directory

output:
  json: false                    # machine-readable output by default
  color: true                    # colored console output

logging:
  level: "WARNING"               # DEBUG, INFO, WARNING, ERROR
"""


@dataclass
class StorePreferences:
    """Where the tag database lives."""

    path: str = DEFAULT_DB_NAME


@dataclass
class OutputPreferences:
    """Console output settings."""

    json: bool = False
    color: bool = True


@dataclass
class LoggingPreferences:
    level: str = "WARNING"


@dataclass
class Preferences:
    """Top-level filetag preferences."""

    store: StorePreferences = field(default_factory=StorePreferences)
    output: OutputPreferences = field(default_factory=OutputPreferences)
    logging: LoggingPreferences = field(default_factory=LoggingPreferences)


def load_preferences(path: Path | None = None) -> Preferences:
    """Load preferences from YAML file.

    Falls back to sensible defaults if the file doesn't exist or is invalid.
    Creates a default preferences file on first run.
    """
    path = path or PREFS_PATH
    prefs = Preferences()

    if path.exists():
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError):
            logger.debug("failed to read preferences from %s", path, exc_info=True)
            return prefs
        if not isinstance(data, dict):
            return prefs
        if isinstance(data.get("store"), dict):
            sdata = data["store"]
            if sdata.get("path"):
                prefs.store.path = str(sdata["path"])
        if isinstance(data.get("output"), dict):
            odata = data["output"]
            if isinstance(odata.get("json"), bool):
                prefs.output.json = odata["json"]
            if isinstance(odata.get("color"), bool):
                prefs.output.color = odata["color"]
        if isinstance(data.get("logging"), dict):
            ldata = data["logging"]
            if ldata.get("level"):
                prefs.logging.level = str(ldata["level"]).upper()
    else:
        # Create default file for user to customize
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(_DEFAULT_YAML, encoding="utf-8")
        except OSError:
            logger.debug("could not write default preferences to %s", path)

    return prefs
