"""CLI entry point for mdtasks."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import Config, load_config
from .errors import ConfigError
from .filehost import FileDocumentHost
from .models import View
from .session import SyncController

DERIVED_VIEWS = {"incomplete": View.INCOMPLETE, "complete": View.COMPLETE}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdtasks",
        description="Track checkbox tasks in a markdown file.",
    )
    parser.add_argument(
        "markdown_file",
        type=str,
        help="Path to the markdown file",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON file with width, top_height, update_interval and git_integration",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("show", help="Print the incomplete and completed task views")

    toggle = sub.add_parser("toggle", help="Toggle a task and save the file")
    toggle.add_argument(
        "position",
        type=int,
        help="Source line number, or a view row when --view is given",
    )
    toggle.add_argument(
        "--view",
        choices=sorted(DERIVED_VIEWS),
        default=None,
        help="Treat POSITION as a 1-based row in this task view",
    )

    jump = sub.add_parser("jump", help="Print the source line behind a view row")
    jump.add_argument("view", choices=sorted(DERIVED_VIEWS))
    jump.add_argument("row", type=int)

    note = sub.add_parser("note", help="Insert a timestamped note section and save")
    note.add_argument(
        "--git",
        action="store_true",
        help="Commit the file with the timestamp as message before inserting",
    )
    return parser


def _print_views(host: FileDocumentHost) -> None:
    for title, view in (("Incomplete", View.INCOMPLETE), ("Complete", View.COMPLETE)):
        lines = host.views[view]
        print(f"{title} ({len(lines)})")
        for row, line in enumerate(lines, start=1):
            print(f"{row:>4}  {line}")


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    # Configure logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(message)s",
    )

    try:
        config = load_config(args.config) if args.config else Config()
    except ConfigError as e:
        logging.error("%s", e)
        return 1
    if getattr(args, "git", False):
        config = config.merged(git_integration=True)

    path = Path(args.markdown_file)
    if not path.is_file():
        logging.error("Markdown file not found: %s", path)
        return 1

    host = FileDocumentHost(path, on_notify=print)
    controller = SyncController(host, config, timer_factory=None)
    if not controller.activate():
        return 1

    try:
        if args.command == "show":
            _print_views(host)
            return 0

        if args.command == "jump":
            line_number = controller.handle_jump_request(DERIVED_VIEWS[args.view], args.row)
            if line_number is None:
                logging.error("No task at row %d of the %s view", args.row, args.view)
                return 1
            print(line_number)
            return 0

        if args.command == "toggle":
            origin = DERIVED_VIEWS[args.view] if args.view else View.SOURCE
            new_line = controller.handle_toggle_request(origin, args.position)
            if new_line is None:
                logging.error("No task at %s %d", args.view or "line", args.position)
                return 1
            host.save()
            logging.info("%s", new_line.strip())
            return 0

        if args.command == "note":
            cursor = controller.create_note()
            host.save()
            logging.info("Inserted note in %s; write it at line %d", path, cursor)
            return 0
    finally:
        controller.deactivate()

    return 1


if __name__ == "__main__":
    sys.exit(main())
