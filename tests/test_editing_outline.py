from mdpane.editing import OutlineIndex, extract_outline, navigation_target


def test_extract_outline_in_document_order() -> None:
    text = "# A\ntext\n## B\n#nospace\n####### seven\n### C"

    headings = extract_outline(text)

    assert [(h.level, h.text, h.line_index) for h in headings] == [
        (1, "A", 0),
        (2, "B", 2),
        (3, "C", 5),
    ]


def test_extract_outline_basic_example() -> None:
    headings = extract_outline("# A\ntext\n## B\n### C")

    assert [(h.level, h.text, h.line_index) for h in headings] == [
        (1, "A", 0),
        (2, "B", 2),
        (3, "C", 3),
    ]


def test_outline_index_recomputes_only_on_change() -> None:
    index = OutlineIndex()

    index.headings("# A")
    index.headings("# A")
    assert index.recomputations == 1

    assert [h.text for h in index.headings("# A\n# B")] == ["A", "B"]
    assert index.recomputations == 2


def test_navigation_target_offsets_and_scroll() -> None:
    text = "\n".join(["line"] * 10 + ["## Deep"])
    heading = extract_outline(text)[0]

    target = navigation_target(text, heading, line_height=20, viewport_height=90)

    assert target.offset == 50
    assert target.scroll_top == 170


def test_navigation_target_never_scrolls_above_top() -> None:
    heading = extract_outline("# Top")[0]

    target = navigation_target("# Top", heading, line_height=22.4, viewport_height=300)

    assert target.offset == 0
    assert target.scroll_top == 0
