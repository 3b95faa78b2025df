"""Entry point for the filetag CLI."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from . import __version__
from . import output
from .errors import FileTagError
from .log import configure_logging, logger
from .persistence import TagStore
from .preferences import load_preferences

EPILOG = """\
examples:
  filetag add document.pdf work important
  filetag list document.pdf
  filetag search work
  filetag search work important --all
  filetag remove document.pdf important
"""


class _Parser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"Error: {message}\n")


def _common_options(default: object) -> argparse.ArgumentParser:
    """Global flags, accepted both before and after the command name."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--db",
        metavar="PATH",
        default=default,
        help="Tag database file (default: .filetag.json)",
    )
    common.add_argument(
        "--json",
        action="store_true",
        default=default,
        help="Print machine-readable JSON",
    )
    return common


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="filetag",
        description="Attach tags to files and find files by tag.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        parents=[_common_options(None)],
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"filetag {__version__}",
    )
    # Sub-command flags must not clobber values given before the command.
    common = _common_options(argparse.SUPPRESS)
    sub = parser.add_subparsers(dest="command", metavar="COMMAND", parser_class=_Parser)

    p_add = sub.add_parser("add", parents=[common], help="Add tags to a file")
    p_add.add_argument("file")
    p_add.add_argument("tags", nargs="+", metavar="tag")

    p_remove = sub.add_parser("remove", parents=[common], help="Remove tags from a file")
    p_remove.add_argument("file")
    p_remove.add_argument("tags", nargs="+", metavar="tag")

    p_list = sub.add_parser("list", parents=[common], help="List tags for a file")
    p_list.add_argument("file")

    p_search = sub.add_parser("search", parents=[common], help="Search files by tags")
    p_search.add_argument("tags", nargs="+", metavar="tag")
    p_search.add_argument(
        "--all",
        dest="match_all",
        action="store_true",
        help="Require every tag to match (AND logic)",
    )

    sub.add_parser("tags", parents=[common], help="List all tags")
    sub.add_parser("all", parents=[common], help="List all files and their tags")

    p_clear = sub.add_parser("clear", parents=[common], help="Clear all tags from a file")
    p_clear.add_argument("file")

    sub.add_parser("help", help="Show this help message")
    return parser


def run_command(args: argparse.Namespace, store: TagStore, console: Console) -> None:
    """Dispatch *args.command* against *store* and print the result."""
    as_json = args.json

    if args.command == "add":
        tags = store.add_tags(args.file, args.tags)
        if as_json:
            print(output.dumps({"path": store.resolve(args.file), "tags": tags}))
        else:
            console.print(output.format_added(args.file, tags))

    elif args.command == "remove":
        tags = store.remove_tags(args.file, args.tags)
        if as_json:
            print(output.dumps({"path": store.resolve(args.file), "tags": tags}))
        else:
            console.print(output.format_remaining(args.file, tags))

    elif args.command == "list":
        tags = store.get_tags(args.file)
        if as_json:
            print(output.dumps({"path": store.resolve(args.file), "tags": tags}))
        else:
            console.print(output.format_tags_for(args.file, tags))

    elif args.command == "search":
        files = store.find_by_tags(args.tags, match_all=args.match_all)
        if as_json:
            print(
                output.dumps(
                    {"tags": args.tags, "match_all": args.match_all, "files": files}
                )
            )
        else:
            console.print(output.format_search(args.tags, args.match_all, files))

    elif args.command == "tags":
        tags = store.list_all_tags()
        if as_json:
            print(output.dumps(tags))
        else:
            console.print(output.format_all_tags(tags))

    elif args.command == "all":
        records = store.list_all()
        if as_json:
            print(output.dumps(output.records_json(records)))
        else:
            console.print(output.format_all(records))

    elif args.command == "clear":
        store.clear_tags(args.file)
        if as_json:
            print(output.dumps({"path": store.resolve(args.file), "cleared": True}))
        else:
            console.print(output.format_cleared(args.file))


def main(argv: list[str] | None = None) -> int:
    """Run the filetag CLI and return the process exit status."""
    parser = build_parser()
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        parser.print_help()
        return 0

    args = parser.parse_args(argv)
    if args.command in (None, "help"):
        parser.print_help()
        return 0

    prefs = load_preferences()
    configure_logging(prefs.logging.level)
    if args.json is None:
        args.json = prefs.output.json
    db_path = args.db or prefs.store.path

    console = Console(
        highlight=False, emoji=False, soft_wrap=True, no_color=not prefs.output.color
    )
    err_console = Console(stderr=True, highlight=False, emoji=False, soft_wrap=True)
    store = TagStore(Path(db_path).expanduser())
    logger.debug("command %s against %s", args.command, store.path)

    try:
        run_command(args, store, console)
    except (FileTagError, OSError) as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        return 1
    except Exception:
        logger.debug("Fatal error in filetag", exc_info=True)
        raise
    return 0


if __name__ == "__main__":
    sys.exit(main())
