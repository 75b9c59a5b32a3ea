"""Data models for tasks parsed from a markdown document."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class View(str, Enum):
    """Where a toggle or jump request originates."""

    SOURCE = "source"
    INCOMPLETE = "incomplete"
    COMPLETE = "complete"

    @property
    def is_derived(self) -> bool:
        return self is not View.SOURCE


@dataclass(frozen=True)
class Task:
    """A single checkbox task parsed from a markdown document.

    ``line_number`` is 1-based and only valid until the next parse.
    """

    line_number: int
    content: str
    completed: bool

    @property
    def text(self) -> str:
        """The task text after the checkbox marker."""
        _, _, rest = self.content.partition("]")
        return rest.strip()


@dataclass(frozen=True)
class RenderModel:
    """The two derived views produced by a sync."""

    incomplete_lines: tuple[str, ...] = field(default_factory=tuple)
    complete_lines: tuple[str, ...] = field(default_factory=tuple)

    def lines_for(self, view: View) -> tuple[str, ...]:
        if view is View.INCOMPLETE:
            return self.incomplete_lines
        if view is View.COMPLETE:
            return self.complete_lines
        raise ValueError(f"{view.value!r} is not a derived view")
