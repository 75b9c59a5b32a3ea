"""Tests for the view-row to source-line index."""

from mdtasks.index import TaskIndex
from mdtasks.models import RenderModel, View

SOURCE = [
    "# Today",
    "- [ ] first",
    "text",
    "- [X] shipped",
    "  - [ ] second",
]


def test_new_index_is_empty():
    index = TaskIndex()
    assert index.incomplete == ()
    assert index.complete == ()
    assert index.resolve_view_position(View.INCOMPLETE, 1) is None


def test_rebuild_returns_render_model():
    model = TaskIndex().rebuild(SOURCE)
    assert model == RenderModel(
        incomplete_lines=("- [ ] first", "- [ ] second"),
        complete_lines=("- [X] shipped",),
    )
    assert model.lines_for(View.COMPLETE) == ("- [X] shipped",)


def test_resolve_within_range():
    index = TaskIndex()
    index.rebuild(SOURCE)
    assert index.resolve_view_position(View.INCOMPLETE, 1) == 2
    assert index.resolve_view_position(View.INCOMPLETE, 2) == 5
    assert index.resolve_view_position(View.COMPLETE, 1) == 4


def test_resolve_out_of_range_is_none():
    index = TaskIndex()
    index.rebuild(SOURCE)
    assert index.resolve_view_position(View.INCOMPLETE, 3) is None
    assert index.resolve_view_position(View.COMPLETE, 2) is None
    assert index.resolve_view_position(View.COMPLETE, 0) is None
    assert index.resolve_view_position(View.COMPLETE, -1) is None


def test_resolve_source_view_is_none():
    index = TaskIndex()
    index.rebuild(SOURCE)
    assert index.resolve_view_position(View.SOURCE, 1) is None


def test_rebuild_replaces_previous_tasks():
    """Rows from an older parse must not survive an edit that removes tasks."""
    index = TaskIndex()
    index.rebuild(SOURCE)
    index.rebuild(["- [X] only one"])
    assert index.incomplete == ()
    assert index.resolve_view_position(View.INCOMPLETE, 1) is None
    assert index.resolve_view_position(View.COMPLETE, 1) == 1


def test_clear():
    index = TaskIndex()
    index.rebuild(SOURCE)
    index.clear()
    assert index.tasks_for(View.INCOMPLETE) == ()
    assert index.tasks_for(View.COMPLETE) == ()
