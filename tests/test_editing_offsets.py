import pytest

from mdpane.buffer import SelectionValidationError
from mdpane.editing.offsets import line_start_offset, locate_line, replace_line, split_lines


def test_split_lines_always_returns_one_line() -> None:
    assert split_lines("") == [""]
    assert split_lines("a\n") == ["a", ""]


def test_locate_line_caret_at_line_end_belongs_to_that_line() -> None:
    text = "ab\ncd"

    assert locate_line(text, 2).index == 0
    location = locate_line(text, 3)
    assert (location.index, location.start, location.text) == (1, 3, "cd")
    assert locate_line(text, 5).index == 1


def test_locate_line_rejects_offsets_outside_text() -> None:
    with pytest.raises(SelectionValidationError):
        locate_line("abc", 4)


def test_line_start_offset_and_replace_line() -> None:
    text = "one\ntwo\nthree"

    assert line_start_offset(text, 2) == 8
    assert replace_line(text, 1, "2") == "one\n2\nthree"
    with pytest.raises(IndexError):
        line_start_offset(text, 3)
