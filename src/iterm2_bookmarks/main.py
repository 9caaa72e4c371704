"""
iterm2-bookmarks command line.

Usage:
    iterm2-bookmarks                     # pick a bookmark, type it into iTerm2
    iterm2-bookmarks pick --print        # pick a bookmark, print it
    iterm2-bookmarks list --by label dev
    iterm2-bookmarks labels
    iterm2-bookmarks resolve deploy --no-exec
"""

import argparse
import sys
from pathlib import Path
from uuid import uuid4

from loguru import logger

from . import __version__
from .config_loader import load_catalog
from .filters import BookmarkFilter
from .list_manager import ListManager
from .logging_config import setup_logger, trace_id_var
from .models import FilterMode
from .picker import PickerState
from .preferences import load_preferences
from .resolver import resolve_command

FILTER_MODES = {
    "name": FilterMode.NAME,
    "id": FilterMode.ID,
    "label": FilterMode.LABEL,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="iterm2-bookmarks",
        description="Filterable shell-command bookmarks for iTerm2.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--file", type=Path, help="Bookmark catalog (TOML)")
    parser.add_argument("--verbose", action="store_true", help="Log debug output to stderr")

    commands = parser.add_subparsers(dest="command")

    pick = commands.add_parser("pick", help="Pick a bookmark interactively (default)")
    pick.add_argument("--print", action="store_true", dest="print_only",
                      help="Print the command instead of sending it to iTerm2")
    pick.add_argument("--exec", action=argparse.BooleanOptionalAction, default=None,
                      help="Submit the command (append a newline) unless the bookmark says otherwise")

    list_cmd = commands.add_parser("list", help="List bookmarks")
    list_cmd.add_argument("filter", nargs="?", default="", help="Filter text")
    list_cmd.add_argument("--by", choices=sorted(FILTER_MODES), default="name")
    list_cmd.add_argument("--case-sensitive", action="store_true")

    commands.add_parser("labels", help="List labels")

    resolve = commands.add_parser("resolve", help="Print the resolved command of a bookmark")
    resolve.add_argument("name")
    resolve.add_argument("--exec", action=argparse.BooleanOptionalAction, default=None)

    return parser


def handle_pick(args, prefs, catalog_path: Path) -> int:
    state = PickerState(prefs, catalog_path)
    if args.exec is not None:
        state.exec = args.exec
    state.load()

    # Imported here: curses is only needed for the interactive picker
    from .tui import pick

    command = pick(state)
    if command is None:
        return 0

    if prefs.inject and not args.print_only:
        from .panes import send_to_iterm2

        if send_to_iterm2(command):
            return 0
        logger.warning(
            "Could not send to iTerm2, printing instead",
            operation="handle_pick",
            status="fallback"
        )

    sys.stdout.write(command)
    sys.stdout.flush()
    return 0


def handle_list(args, prefs, catalog_path: Path) -> int:
    result = load_catalog(catalog_path)
    if result.is_err():
        print(f"Error: {result.error.message}", file=sys.stderr)
        return 1

    manager = ListManager(result.value.bookmarks)
    ignore_case = prefs.ignore_case and not args.case_sensitive
    manager.apply_filter(BookmarkFilter(FILTER_MODES[args.by], args.filter, ignore_case))
    for _, bookmark in manager.iterate():
        line = f"{bookmark.id}. {bookmark.name}"
        if bookmark.desc:
            line += f"  - {bookmark.desc}"
        print(line)
    return 0


def handle_labels(args, prefs, catalog_path: Path) -> int:
    result = load_catalog(catalog_path)
    if result.is_err():
        print(f"Error: {result.error.message}", file=sys.stderr)
        return 1

    for label in result.value.labels:
        print(f"{label.id}. {label.name}")
    return 0


def handle_resolve(args, prefs, catalog_path: Path) -> int:
    result = load_catalog(catalog_path)
    if result.is_err():
        print(f"Error: {result.error.message}", file=sys.stderr)
        return 1

    catalog = result.value
    bookmark = catalog.find_bookmark(args.name)
    if bookmark is None:
        print(f"Error: Bookmark '{args.name}' not found", file=sys.stderr)
        return 1

    default_exec = prefs.exec if args.exec is None else args.exec
    resolved = resolve_command(bookmark, catalog, default_exec)
    if resolved.is_err():
        print(f"Error: Failed to generate command: {resolved.error.message}", file=sys.stderr)
        return 1

    sys.stdout.write(resolved.value if resolved.value.endswith("\n") else resolved.value + "\n")
    return 0


HANDLERS = {
    "pick": handle_pick,
    "list": handle_list,
    "labels": handle_labels,
    "resolve": handle_resolve,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        args = parser.parse_args([*(argv if argv is not None else sys.argv[1:]), "pick"])

    # The picker owns the terminal; keep stderr quiet while it runs
    if args.command == "pick":
        setup_logger(console_level=None)
    else:
        setup_logger(console_level="DEBUG" if args.verbose else "WARNING")

    trace_id_var.set(str(uuid4()))
    prefs, report = load_preferences()
    for message in report.messages():
        print(f"Warning: {message}", file=sys.stderr)

    catalog_path = args.file.expanduser() if args.file else prefs.catalog_path

    logger.debug(
        "Command started",
        operation="main",
        status="started",
        command=args.command,
        catalog_path=str(catalog_path)
    )
    return HANDLERS[args.command](args, prefs, catalog_path)


def cli() -> None:
    sys.exit(main())
