"""Pure-function output formatters for the CLI.

Each ``format_*`` helper returns Rich markup ready for ``Console.print``;
``*_json`` helpers return plain JSON-serializable data.  User-supplied text
(paths, tags) is escaped so brackets in filenames survive markup parsing.
"""

from __future__ import annotations

import json

from rich.markup import escape

from .persistence import TagRecord

NO_TAGS = "[dim](no tags)[/dim]"


def _join(tags: list[str]) -> str:
    return escape(", ".join(tags))


def format_added(file: str, tags: list[str]) -> str:
    return f"[green]Tags added to[/green] {escape(file)}:\n{_join(tags)}"


def format_remaining(file: str, tags: list[str]) -> str:
    return f"Remaining tags for {escape(file)}:\n{_join(tags) if tags else NO_TAGS}"


def format_tags_for(file: str, tags: list[str]) -> str:
    return f"Tags for {escape(file)}:\n{_join(tags) if tags else NO_TAGS}"


def format_search(tags: list[str], match_all: bool, files: list[str]) -> str:
    """Header naming the query and mode, then one indented path per line."""
    label = "tags" if len(tags) > 1 else "tag"
    mode = "all" if match_all else "any"
    lines = [f"Files with {label} {_join(tags)} ({mode}):"]
    if not files:
        lines.append("[dim](no files found)[/dim]")
    else:
        lines.extend(f"  {escape(f)}" for f in files)
    return "\n".join(lines)


def format_all_tags(tags: list[str]) -> str:
    lines = ["All tags:"]
    if not tags:
        lines.append(NO_TAGS)
    else:
        lines.extend(f"  [cyan]{escape(t)}[/cyan]" for t in tags)
    return "\n".join(lines)


def format_all(records: dict[str, TagRecord]) -> str:
    """One block per file: tags and both timestamps."""
    lines = ["All files and tags:"]
    if not records:
        lines.append("[dim](no files tagged)[/dim]")
    for path, rec in records.items():
        lines.append("")
        lines.append(f"[bold]{escape(path)}[/bold]:")
        lines.append(f"  Tags: {_join(rec.tags) or '(none)'}")
        lines.append(f"  Created: {rec.created}")
        lines.append(f"  Modified: {rec.modified}")
    return "\n".join(lines)


def format_cleared(file: str) -> str:
    return f"All tags cleared from {escape(file)}"


# -- JSON -------------------------------------------------------------------


def records_json(records: dict[str, TagRecord]) -> dict[str, dict]:
    """Records in the same shape as the backing file."""
    return {path: rec.to_dict() for path, rec in records.items()}


def dumps(data: object) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)
