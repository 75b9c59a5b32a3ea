"""Flip the checkbox marker on a single task line."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

logger = logging.getLogger(__name__)

RE_ANY_CHECKBOX = re.compile(r"- \[(.?)\]")

# Bracket content -> replacement marker
TOGGLED_MARKERS = {"X": "- [ ]", " ": "- [X]", "": "- [X]"}


def toggle_line(line: str) -> str | None:
    """Return ``line`` with its checkbox flipped, or None if it has none.

    Only the first marker in the line is looked at and changed; the rest of
    the line is kept verbatim.
    """
    m = RE_ANY_CHECKBOX.search(line)
    if not m:
        return None

    replacement = TOGGLED_MARKERS.get(m.group(1))
    if replacement is None:
        # e.g. "- [x]": looks like a checkbox but carries no known marker
        return None
    return line[:m.start()] + replacement + line[m.end():]


def toggle_task(lines: Sequence[str], line_number: int) -> str | None:
    """Toggle the task at 1-based ``line_number`` in ``lines``.

    The caller writes the returned line back into the source.
    """
    if line_number < 1 or line_number > len(lines):
        logger.debug("Line %d is outside the document (%d lines)", line_number, len(lines))
        return None
    new_line = toggle_line(lines[line_number - 1])
    if new_line is None:
        logger.debug("Line %d is not a task line", line_number)
    return new_line
