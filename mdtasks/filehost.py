"""A DocumentHost backed by a markdown file on disk."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from .models import View
from .notes import format_timestamp
from .session import LineRange

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIXES = {".md", ".markdown", ".mdown", ".mkd"}


class FileDocumentHost:
    """Holds a file's lines in memory; ``save()`` writes them back.

    Rendered views and notifications are kept on the instance so callers
    (the CLI, tests) can read them after each operation.
    """

    def __init__(
        self,
        path: str | Path,
        on_notify: Callable[[str], None] | None = None,
    ) -> None:
        self.path = Path(path)
        self.views: dict[View, list[str]] = {View.INCOMPLETE: [], View.COMPLETE: []}
        self.messages: list[str] = []
        self.cursor_line: int | None = None
        self.dirty = False
        self._on_notify = on_notify

        if self.path.exists():
            # newline="" keeps "\r\n" as written; only "\n" ends a line here
            with self.path.open(encoding="utf-8", newline="") as f:
                content = f.read()
        else:
            content = ""
        self.lines: list[str] = []
        self._eols: list[str] = []
        *terminated, tail = content.split("\n")
        for raw in terminated:
            if raw.endswith("\r"):
                self.lines.append(raw[:-1])
                self._eols.append("\r\n")
            else:
                self.lines.append(raw)
                self._eols.append("\n")
        if tail:
            self.lines.append(tail)
            self._eols.append("")
        # Determine line ending from original file
        self.eol = "\r\n" if self._eols[:1] == ["\r\n"] else "\n"

    def get_source_text(self) -> list[str]:
        return list(self.lines)

    def set_source_text(self, line_range: LineRange, new_lines: Sequence[str]) -> None:
        start, end = line_range
        old_eols = self._eols[start - 1:end]
        self.lines[start - 1:end] = list(new_lines)
        self._eols[start - 1:end] = [
            old_eols[i] if i < len(old_eols) else self.eol for i in range(len(new_lines))
        ]
        self.dirty = True

    def render(self, view: View, lines: Sequence[str]) -> None:
        self.views[view] = list(lines)

    def notify(self, message: str) -> None:
        self.messages.append(message)
        if self._on_notify is not None:
            self._on_notify(message)

    def current_timestamp(self) -> str:
        return format_timestamp()

    def focus_line(self, line_number: int) -> None:
        self.cursor_line = line_number

    def is_markdown(self) -> bool:
        return self.path.suffix.lower() in MARKDOWN_SUFFIXES

    def source_path(self) -> Path | None:
        return self.path.resolve()

    def save(self) -> None:
        if not self.dirty:
            return
        last = len(self.lines) - 1
        # A line that lost its place at the end of the file needs an ending again
        text = "".join(
            line + (eol or (self.eol if i < last else ""))
            for i, (line, eol) in enumerate(zip(self.lines, self._eols))
        )
        self.path.write_text(text, encoding="utf-8", newline="")
        self.dirty = False
        logger.debug("Wrote %d lines to %s", len(self.lines), self.path)
