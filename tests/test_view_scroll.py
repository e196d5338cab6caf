from typing import List

from mdpane.view import EDITOR, PREVIEW, RedrawQueue, ScrollSurface, ScrollSynchronizer


def make_sync() -> tuple[ScrollSynchronizer, RedrawQueue, List[ScrollSurface]]:
    redraw = RedrawQueue()
    applied: List[ScrollSurface] = []
    sync = ScrollSynchronizer(redraw, apply_scroll=applied.append)
    sync.update_metrics(EDITOR, scroll_height=1000, viewport_height=200)
    sync.update_metrics(PREVIEW, scroll_height=2000, viewport_height=400)
    return sync, redraw, applied


def test_scroll_maps_proportionally() -> None:
    sync, _redraw, applied = make_sync()

    assert sync.report_scroll(EDITOR, 400) is True

    assert applied[-1].name == PREVIEW
    assert applied[-1].scroll_top == 800


def test_echo_from_other_surface_is_ignored_until_redraw() -> None:
    sync, redraw, applied = make_sync()
    sync.report_scroll(EDITOR, 400)

    assert sync.report_scroll(PREVIEW, 800) is False
    assert sync.sync_count == 1
    assert len(applied) == 1

    redraw.flush()

    assert sync.active is None
    assert sync.report_scroll(PREVIEW, 1600) is True
    assert sync.surface(EDITOR).scroll_top == 800


def test_guard_release_is_scheduled_once() -> None:
    sync, redraw, _applied = make_sync()
    sync.report_scroll(EDITOR, 100)
    sync.report_scroll(EDITOR, 200)

    assert len(redraw) == 1


def test_surface_without_scroll_range_maps_to_top() -> None:
    sync, _redraw, applied = make_sync()
    sync.update_metrics(EDITOR, scroll_height=100, viewport_height=200)

    sync.report_scroll(EDITOR, 0)

    assert applied[-1].scroll_top == 0


def test_redraw_flush_runs_only_callbacks_queued_before_it() -> None:
    redraw = RedrawQueue()
    calls: List[str] = []

    def first() -> None:
        calls.append("first")
        redraw.defer(lambda: calls.append("second"))

    redraw.defer(first)

    assert redraw.flush() == 1
    assert calls == ["first"]
    assert redraw.flush() == 1
    assert calls == ["first", "second"]
