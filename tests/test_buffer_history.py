from __future__ import annotations

import pytest

from mdpane.buffer import Buffer, HistoryManager, Selection, SelectionValidationError
from mdpane.editing import EditResult


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms / 1000.0


def make_history(text: str = "", **kwargs: object) -> tuple[HistoryManager, FakeClock]:
    clock = FakeClock()
    return HistoryManager(text, clock=clock, **kwargs), clock


def test_typing_burst_coalesces_into_one_entry() -> None:
    history, clock = make_history("")
    for text in ("a", "ab", "abc"):
        history.record_edit(text)
        clock.advance(100)

    clock.advance(299)
    assert history.process_timeouts() is False
    clock.advance(2)
    assert history.process_timeouts() is True

    assert history.undo_entries() == ("",)
    assert history.last_committed == "abc"
    assert history.undo("abc") == ""
    assert history.redo() == "abc"


def test_undo_during_active_typing_restores_baseline() -> None:
    history, _clock = make_history("base")
    history.record_edit("base!")

    assert history.undo("base!") == "base"
    assert history.pending is None
    assert history.undo_depth == 0
    assert history.redo_entries() == ("base!",)
    assert history.redo() == "base!"


def test_commit_flushes_pending_burst_first() -> None:
    history, _clock = make_history("")
    history.record_edit("a")

    history.commit("**a**")

    assert history.undo_entries() == ("", "a")
    assert history.pending is None


def test_commit_clears_redo() -> None:
    history, _clock = make_history("")
    history.commit("a")
    history.commit("b")
    history.undo("b")
    assert history.can_redo()

    history.commit("c")

    assert not history.can_redo()


def test_first_keystroke_clears_redo() -> None:
    history, _clock = make_history("")
    history.commit("a")
    history.undo("a")

    history.record_edit("x")

    assert history.redo_depth == 0


def test_identical_snapshots_are_not_pushed_twice() -> None:
    history, _clock = make_history("x")
    history.commit("x")
    history.commit("x")

    assert history.undo_entries() == ("x",)


def test_depth_bound_evicts_oldest_entries() -> None:
    history, _clock = make_history("")
    for index in range(250):
        history.commit(f"s{index}")

    entries = history.undo_entries()
    assert len(entries) == 200
    assert entries[0] == "s49"
    assert entries[-1] == "s248"


def test_undo_and_redo_on_empty_stacks_are_noops() -> None:
    history, _clock = make_history("x")

    assert history.undo("x") is None
    assert history.redo() is None


def test_reset_drops_pending_and_stacks() -> None:
    history, _clock = make_history("")
    history.commit("a")
    history.record_edit("ab")

    history.reset("new")

    assert history.pending is None
    assert history.undo_depth == 0
    assert history.last_committed == "new"


def test_buffer_apply_defers_selection_and_marks_dirty() -> None:
    buffer = Buffer.from_text("hello", history=HistoryManager())
    buffer.state.set_selection(Selection(0, 5))

    delta = buffer.apply(EditResult("**hello**", Selection(2, 7)), label="bold")

    assert buffer.text == "**hello**"
    assert delta.selection == Selection(2, 7)
    assert buffer.selection == Selection(0, 5)
    assert buffer.state.dirty
    assert buffer.history.undo_entries() == ("hello",)


def test_buffer_apply_rejects_selection_outside_result() -> None:
    buffer = Buffer.from_text("hi")

    with pytest.raises(SelectionValidationError):
        buffer.apply(EditResult("hi", Selection(0, 5)), label="bad")


def test_buffer_undo_clamps_selection() -> None:
    buffer = Buffer.from_text("")
    buffer.apply(EditResult("long text", Selection.caret(9)), label="insert")
    buffer.state.set_selection(Selection.caret(9))

    delta = buffer.undo()

    assert delta is not None
    assert buffer.text == ""
    assert buffer.selection == Selection.caret(0)
    assert buffer.undo() is None
