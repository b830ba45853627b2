"""Tests for mapping selection rectangles to character ranges."""

import pytest

from markview.text.geometry import Bounds, Point, Size
from markview.text.selection import (
    Selection,
    compute_selection,
    point_in_text_selection,
    selection_quads,
)

LINE_HEIGHT = 20.0
CHAR_WIDTH = 10.0
BOUNDS = Bounds(Point(50.0, 50.0), Size(100.0, 100.0))


@pytest.mark.parametrize(
    "x,y,expected",
    [
        # First row: selected from the left edge onwards.
        (50, 40, True),
        (50, 50, True),
        (40, 50, False),
        (160, 50, True),
        # Middle rows: everything.
        (100, 70, True),
        (40, 70, True),
        (160, 70, True),
        # Last row: selected up to the right edge.
        (100, 140, True),
        (40, 140, True),
        (160, 140, False),
        # Outside vertically.
        (100, 20, False),
        (100, 160, False),
    ],
)
def test_point_in_multiline_selection(x, y, expected):
    """Test the first, middle and last row rules of a tall selection."""
    pos = Point(float(x), float(y))
    assert point_in_text_selection(pos, CHAR_WIDTH, BOUNDS, LINE_HEIGHT) is expected


def test_point_in_single_line_selection():
    """Test that a one-line selection compares character midpoints to both edges."""
    bounds = Bounds(Point(50.0, 50.0), Size(100.0, 20.0))

    assert point_in_text_selection(Point(50, 50), CHAR_WIDTH, bounds, LINE_HEIGHT)
    assert point_in_text_selection(Point(140, 50), CHAR_WIDTH, bounds, LINE_HEIGHT)
    # Midpoint 45 is left of the selection.
    assert not point_in_text_selection(Point(40, 50), CHAR_WIDTH, bounds, LINE_HEIGHT)
    # Midpoint 155 is right of the selection.
    assert not point_in_text_selection(Point(150, 50), CHAR_WIDTH, bounds, LINE_HEIGHT)


def _monospace(text: str, line_length: int, origin: Point = Point(0.0, 0.0)):
    """Lay out `text` on a fixed grid, wrapping every `line_length` characters."""

    def position_for_index(ix: int) -> Point | None:
        if ix > len(text):
            return None
        row, col = divmod(ix, line_length)
        return Point(origin.x + col * CHAR_WIDTH, origin.y + row * LINE_HEIGHT)

    return position_for_index


def test_compute_selection_single_line():
    """Test that bounds matching characters [2, 5) select exactly them."""
    text = "abcdefghij"
    layout = _monospace(text, 100)
    bounds = Bounds(Point(20.0, 0.0), Size(30.0, LINE_HEIGHT))

    selection = compute_selection(text, layout, bounds, LINE_HEIGHT)

    assert selection == Selection(2, 5)
    assert text[selection.start:selection.end] == "cde"


def test_compute_selection_multiline():
    """Test a selection spanning three wrapped lines."""
    text = "abcdefghij" * 3
    layout = _monospace(text, 10)
    bounds = Bounds(Point(30.0, 0.0), Size(40.0, 2 * LINE_HEIGHT + 1))

    selection = compute_selection(text, layout, bounds, LINE_HEIGHT)

    # First row from x=30 on, full middle row, last row up to x=70.
    assert selection == Selection(3, 27)


def test_compute_selection_nothing_selected():
    """Test that bounds below the text select nothing."""
    text = "abc"
    layout = _monospace(text, 100)
    bounds = Bounds(Point(0.0, 100.0), Size(50.0, LINE_HEIGHT))

    assert compute_selection(text, layout, bounds, LINE_HEIGHT) is None


def test_compute_selection_skips_unpositioned_characters():
    """Test that characters without a position are skipped, not errors."""
    text = "abcdef"
    grid = _monospace(text, 100)

    def layout(ix: int) -> Point | None:
        return None if ix in (0, 1) else grid(ix)

    bounds = Bounds(Point(0.0, 0.0), Size(60.0, LINE_HEIGHT))
    assert compute_selection(text, layout, bounds, LINE_HEIGHT) == Selection(2, 6)


def test_compute_selection_end_of_line_width():
    """Test that the last character on a line uses half the line height as width."""
    text = "ab"
    grid = _monospace(text, 100)

    def layout(ix: int) -> Point | None:
        return grid(ix) if ix < len(text) else None

    # Character "b" at x=10 gets width 10 (half of 20), midpoint 15.
    bounds = Bounds(Point(12.0, 0.0), Size(4.0, LINE_HEIGHT))
    assert compute_selection(text, layout, bounds, LINE_HEIGHT) == Selection(1, 2)


def test_selection_normalized():
    """Test that reversed selections are normalized."""
    assert Selection(5, 2).normalized() == Selection(2, 5)
    assert Selection(2, 5).normalized() == Selection(2, 5)
    assert Selection(3, 3).is_empty()


def test_selection_quads_single_line():
    """Test one rectangle for a selection on a single line."""
    layout = _monospace("abcdefghij", 100)
    bounds = Bounds(Point(0.0, 0.0), Size(100.0, LINE_HEIGHT))

    quads = selection_quads(Selection(2, 5), layout, bounds, LINE_HEIGHT)

    assert quads == [Bounds(Point(20.0, 0.0), Size(30.0, LINE_HEIGHT))]


def test_selection_quads_multiline():
    """Test first, middle and last rectangles for a selection over three lines."""
    layout = _monospace("x" * 30, 10)
    bounds = Bounds(Point(0.0, 0.0), Size(100.0, 3 * LINE_HEIGHT))

    quads = selection_quads(Selection(23, 3), layout, bounds, LINE_HEIGHT)

    assert quads == [
        Bounds(Point(30.0, 0.0), Size(70.0, LINE_HEIGHT)),
        Bounds(Point(0.0, LINE_HEIGHT), Size(100.0, LINE_HEIGHT)),
        Bounds(Point(0.0, 2 * LINE_HEIGHT), Size(30.0, LINE_HEIGHT)),
    ]


def test_selection_quads_missing_position():
    """Test that an unpositioned endpoint paints nothing."""
    quads = selection_quads(
        Selection(0, 3), lambda ix: None, BOUNDS, LINE_HEIGHT
    )
    assert quads == []
