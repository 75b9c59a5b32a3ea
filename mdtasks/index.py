"""Position index over the most recently parsed task lists."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .models import RenderModel, Task, View
from .parser import parse_tasks

logger = logging.getLogger(__name__)


class TaskIndex:
    """Holds the last-parsed tasks and maps view rows back to source lines.

    Both sequences are replaced together on every rebuild; nothing is ever
    patched in place.
    """

    def __init__(self) -> None:
        self._tasks: tuple[tuple[Task, ...], tuple[Task, ...]] = ((), ())

    @property
    def incomplete(self) -> tuple[Task, ...]:
        return self._tasks[0]

    @property
    def complete(self) -> tuple[Task, ...]:
        return self._tasks[1]

    def tasks_for(self, view: View) -> tuple[Task, ...]:
        if view is View.INCOMPLETE:
            return self.incomplete
        if view is View.COMPLETE:
            return self.complete
        return ()

    def rebuild(self, lines: Sequence[str]) -> RenderModel:
        """Re-parse the source and replace the stored task lists."""
        incomplete, complete = parse_tasks(lines)
        self._tasks = (tuple(incomplete), tuple(complete))
        logger.debug(
            "Rebuilt index: %d incomplete, %d complete", len(incomplete), len(complete)
        )
        return RenderModel(
            incomplete_lines=tuple(t.content for t in incomplete),
            complete_lines=tuple(t.content for t in complete),
        )

    def resolve_view_position(self, view: View, row: int) -> int | None:
        """Map a 1-based row in a derived view to its source line number.

        Rows past the end of the view are expected after an edit shrinks the
        task count, so they resolve to None instead of raising.
        """
        tasks = self.tasks_for(view)
        if row < 1 or row > len(tasks):
            logger.debug("Row %d is outside the %s view (%d rows)", row, view.value, len(tasks))
            return None
        return tasks[row - 1].line_number

    def clear(self) -> None:
        self._tasks = ((), ())
