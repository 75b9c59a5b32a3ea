"""Per-document sync sessions: keeps the task views in step with the source."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Hashable, Sequence
from enum import Enum
from pathlib import Path
from typing import Protocol

from .config import Config
from .index import TaskIndex
from .models import RenderModel, View
from .notes import plan_note
from .toggle import toggle_task
from .vcs import GitVersionControl, VersionControl, commit_before_note

logger = logging.getLogger(__name__)

LineRange = tuple[int, int]


class DocumentHost(Protocol):
    """The editor (or file) that owns the source document.

    ``set_source_text`` takes a 1-based inclusive ``(start, end)`` range;
    ``(n + 1, n)`` is the empty range right after line ``n``.
    """

    def get_source_text(self) -> list[str]: ...

    def set_source_text(self, line_range: LineRange, new_lines: Sequence[str]) -> None: ...

    def render(self, view: View, lines: Sequence[str]) -> None: ...

    def notify(self, message: str) -> None: ...

    def current_timestamp(self) -> str: ...

    def focus_line(self, line_number: int) -> None: ...

    def is_markdown(self) -> bool: ...

    def save(self) -> None: ...

    def source_path(self) -> Path | None: ...


class SessionState(str, Enum):
    INACTIVE = "inactive"
    ACTIVE = "active"


class PeriodicSync:
    """Calls ``callback`` every ``interval`` seconds on the host's event loop.

    The callback runs on the loop's own thread, between the host's other
    callbacks, so it never overlaps a host-driven operation. To stop it,
    call ``cancel()``.
    """

    def __init__(
        self,
        interval: float,
        callback: Callable[[], None],
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.interval = interval
        self.callback = callback
        self.loop = loop
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the loop. Raises RuntimeError without an event loop."""
        loop = self.loop or asyncio.get_running_loop()
        self._task = loop.create_task(self._run())

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                self.callback()
            except Exception:
                logger.exception("Periodic sync failed")

    def cancel(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None


TimerFactory = Callable[[float, Callable[[], None]], PeriodicSync]


class SyncController:
    """Keeps one document's incomplete/complete views in sync with its source.

    Toggle, jump and sync requests are ignored while the session is
    inactive. Every operation runs to completion without yielding, so a
    periodic tick can only run between them. With ``timer_factory=None``
    there is no periodic resync and the host calls ``sync()`` itself.
    """

    def __init__(
        self,
        host: DocumentHost,
        config: Config | None = None,
        vcs: VersionControl | None = None,
        timer_factory: TimerFactory | None = PeriodicSync,
    ) -> None:
        self.host = host
        self.config = config or Config()
        self.vcs = vcs if vcs is not None else GitVersionControl()
        self._timer_factory = timer_factory
        self._index: TaskIndex | None = None
        self._timer: PeriodicSync | None = None
        self._render_model = RenderModel()

    @property
    def state(self) -> SessionState:
        return SessionState.ACTIVE if self._index is not None else SessionState.INACTIVE

    @property
    def is_active(self) -> bool:
        return self._index is not None

    @property
    def index(self) -> TaskIndex | None:
        return self._index

    @property
    def render_model(self) -> RenderModel:
        """The views as last rendered."""
        return self._render_model

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def activate(self) -> bool:
        """Open the task views. Returns False if the document is not markdown."""
        if self.is_active:
            return True
        if not self.host.is_markdown():
            logger.info("Refusing to activate on a non-markdown document")
            self.host.notify("mdtasks: Current buffer is not a markdown file")
            return False

        self._index = TaskIndex()
        self._sync()
        self._start_timer()
        logger.info("Activated task views")
        return True

    def _start_timer(self) -> None:
        if self._timer_factory is None:
            return
        timer = self._timer_factory(self.config.update_interval_seconds, self._on_tick)
        try:
            timer.start()
        except RuntimeError:
            logger.warning("No running event loop; periodic task view sync is off")
            return
        self._timer = timer
        logger.debug("Syncing task views every %d ms", self.config.update_interval)

    def deactivate(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._index is not None:
            self._index.clear()
            logger.info("Deactivated task views")
        self._index = None
        self._render_model = RenderModel()

    def toggle_active(self) -> bool:
        """Open the views if closed, close them if open. Returns the new state."""
        if self.is_active:
            self.deactivate()
            return False
        return self.activate()

    def _on_tick(self) -> None:
        if not self.is_active:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            return
        self._sync()

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------

    def sync(self) -> RenderModel | None:
        """Re-parse the source and push both views to the host."""
        if not self.is_active:
            return None
        return self._sync()

    handle_source_edit = sync

    def _sync(self) -> RenderModel:
        model = self._index.rebuild(self.host.get_source_text())
        self._render_model = model
        self.host.render(View.INCOMPLETE, model.incomplete_lines)
        self.host.render(View.COMPLETE, model.complete_lines)
        return model

    def resolve(self, origin: View, position: int) -> int | None:
        """Translate a cursor position in ``origin`` into a source line number."""
        if not self.is_active:
            return None
        if origin is View.SOURCE:
            return position
        return self._index.resolve_view_position(origin, position)

    # ------------------------------------------------------------------
    # Requests from the host
    # ------------------------------------------------------------------

    def handle_toggle_request(self, origin: View, position: int) -> str | None:
        """Toggle the task under the cursor. Returns the rewritten line."""
        line_number = self.resolve(origin, position)
        if line_number is None:
            return None

        new_line = toggle_task(self.host.get_source_text(), line_number)
        if new_line is None:
            return None

        self.host.set_source_text((line_number, line_number), [new_line])
        logger.debug("Toggled line %d: %s", line_number, new_line)
        self._sync()
        return new_line

    def handle_jump_request(self, view: View, row: int) -> int | None:
        """Move the host's cursor to the source line behind ``row``."""
        if not view.is_derived:
            return None
        line_number = self.resolve(view, row)
        if line_number is None:
            return None
        self.host.focus_line(line_number)
        return line_number

    def create_note(self) -> int:
        """Insert a timestamped note section. Returns the cursor line."""
        timestamp = self.host.current_timestamp()

        if self.config.git_integration:
            commit_before_note(self.host, self.vcs, timestamp)

        edit = plan_note(self.host.get_source_text(), timestamp)
        self.host.set_source_text((edit.after_line + 1, edit.after_line), edit.lines)
        self.host.focus_line(edit.cursor_line)
        logger.debug("Inserted note %r after line %d", timestamp, edit.after_line)

        if self.is_active:
            self._sync()
        return edit.cursor_line

    # Host event callback names
    on_toggle_request = handle_toggle_request
    on_jump_request = handle_jump_request
    on_create_note_request = create_note


class SessionRegistry:
    """Independent sessions keyed by document."""

    def __init__(
        self,
        config: Config | None = None,
        vcs: VersionControl | None = None,
        timer_factory: TimerFactory | None = PeriodicSync,
    ) -> None:
        self.config = config or Config()
        self.vcs = vcs
        self.timer_factory = timer_factory
        self._sessions: dict[Hashable, SyncController] = {}

    def __contains__(self, key: Hashable) -> bool:
        return key in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, key: Hashable) -> SyncController | None:
        return self._sessions.get(key)

    def open(self, key: Hashable, host: DocumentHost) -> SyncController | None:
        """Activate a session for ``host``. Returns None if activation failed.

        Reopening ``key`` with the same host reuses its session; a different
        host replaces it, closing the old session first.
        """
        session = self._sessions.get(key)
        if session is not None and session.host is not host:
            logger.debug("Replacing session for %r with a new host", key)
            self.close(key)
            session = None
        if session is None:
            session = SyncController(
                host, self.config, vcs=self.vcs, timer_factory=self.timer_factory
            )
        if not session.activate():
            return None
        self._sessions[key] = session
        return session

    def close(self, key: Hashable) -> None:
        session = self._sessions.pop(key, None)
        if session is not None:
            session.deactivate()

    def close_all(self) -> None:
        for key in list(self._sessions):
            self.close(key)
