"""Insert timestamped note sections under a document's title heading."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from .parser import is_title_heading

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
UNTITLED_HEADING = "# Untitled"


@dataclass(frozen=True)
class NoteEdit:
    """Lines to insert after ``after_line`` (0 means the top of the document)."""

    after_line: int
    lines: tuple[str, ...]
    cursor_line: int


def format_timestamp(when: datetime | None = None) -> str:
    """Format ``when`` (default: local now) as ``YYYY-MM-DD HH:MM:SS``."""
    return (when or datetime.now()).strftime(TIMESTAMP_FORMAT)


def find_first_heading(lines: Sequence[str]) -> int | None:
    """Return the 1-based line number of the first level-1 heading."""
    for number, line in enumerate(lines, start=1):
        if is_title_heading(line):
            return number
    return None


def plan_note(lines: Sequence[str], timestamp: str) -> NoteEdit:
    """Work out where a ``## <timestamp>`` section goes.

    The section goes right after the first level-1 heading. Documents without
    one get an ``# Untitled`` heading on top. The cursor line is the empty
    line ready for typing the note.
    """
    block = ("", f"## {timestamp}", "", "")
    heading = find_first_heading(lines)
    if heading is None:
        return NoteEdit(after_line=0, lines=(UNTITLED_HEADING, *block), cursor_line=6)
    return NoteEdit(after_line=heading, lines=block, cursor_line=heading + 4)


def insert_note(lines: Sequence[str], timestamp: str) -> tuple[list[str], int]:
    """Return ``lines`` with the note section spliced in, and the cursor line."""
    edit = plan_note(lines, timestamp)
    at = edit.after_line
    return [*lines[:at], *edit.lines, *lines[at:]], edit.cursor_line
