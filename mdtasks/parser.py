"""Parser for checkbox task lines in markdown documents."""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path

from .models import Task

# Regex patterns
RE_COMPLETE_TASK = re.compile(r"^\s*- \[X\](.*)$")
RE_INCOMPLETE_TASK = re.compile(r"^\s*- \[ ?\](.*)$")
RE_TITLE_HEADING = re.compile(r"^#\s+.*\s*$")


def parse_tasks(lines: Iterable[str]) -> tuple[list[Task], list[Task]]:
    """Split task lines into (incomplete, complete), both in source order."""
    incomplete: list[Task] = []
    complete: list[Task] = []

    for number, line in enumerate(lines, start=1):
        # The completed marker is checked first so a line never lands in both lists
        if RE_COMPLETE_TASK.match(line):
            complete.append(Task(number, line.lstrip(), completed=True))
        elif RE_INCOMPLETE_TASK.match(line):
            incomplete.append(Task(number, line.lstrip(), completed=False))

    return incomplete, complete


def parse_tasks_md(content: str) -> tuple[list[Task], list[Task]]:
    """Parse a markdown string."""
    return parse_tasks(content.splitlines())


def parse_tasks_file(path: str | Path) -> tuple[list[Task], list[Task]]:
    """Parse a markdown file from disk."""
    p = Path(path)
    return parse_tasks_md(p.read_text(encoding="utf-8"))


def is_title_heading(line: str) -> bool:
    """True for a level-1 heading such as ``# Notes``."""
    return RE_TITLE_HEADING.match(line) is not None
