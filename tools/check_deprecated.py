#!/usr/bin/env python3
"""Report deprecated packages in a dependency-tree JSON dump.

Walks every object in the document and collects the ones carrying a truthy
``deprecated`` field (the shape produced by ``pnpm list --json`` and similar
tree dumps).

Usage:
    python tools/check_deprecated.py [deps.json]

Exit status: 0 when nothing is deprecated, 1 when something is, 2 when the
file is missing or is not valid JSON.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

DEFAULT_DEPS_FILE = "deps.json"


def find_deprecated(obj: object, path: str = "") -> list[dict[str, str]]:
    """Return ``{path, name, deprecated}`` for every deprecated node under *obj*."""
    found: list[dict[str, str]] = []
    if isinstance(obj, list):
        for i, item in enumerate(obj):
            found.extend(find_deprecated(item, f"{path}[{i}]"))
        return found
    if not isinstance(obj, dict):
        return found

    if obj.get("deprecated"):
        name = obj.get("name")
        if not name and isinstance(obj.get("pkg"), dict):
            name = obj["pkg"].get("name")
        found.append(
            {
                "path": path or "/",
                "name": str(name or ""),
                "deprecated": str(obj["deprecated"]),
            }
        )

    for key, value in obj.items():
        if isinstance(value, (dict, list)):
            found.extend(find_deprecated(value, f"{path}/{key}"))
    return found


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Report deprecated packages in a dependency tree dump"
    )
    parser.add_argument(
        "deps_file",
        nargs="?",
        type=Path,
        default=Path(DEFAULT_DEPS_FILE),
        help=f"Dependency JSON file (default: {DEFAULT_DEPS_FILE})",
    )
    args = parser.parse_args(argv)

    if not args.deps_file.exists():
        print(f"Deps file not found: {args.deps_file}", file=sys.stderr)
        return 2
    try:
        data = json.loads(args.deps_file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        print(f"Failed to parse deps JSON: {exc}", file=sys.stderr)
        return 2

    deprecated = find_deprecated(data)
    if not deprecated:
        print("No deprecated packages found.")
        return 0

    print("Deprecated packages found:", file=sys.stderr)
    for d in deprecated:
        print(f"- {d['path']} {d['name']} => {d['deprecated']}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
