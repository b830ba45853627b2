"""Map a pixel selection rectangle onto character offsets."""

from dataclasses import dataclass

from .geometry import Bounds, Point
from .quads import PositionForIndex, range_quads


@dataclass(frozen=True)
class Selection:
    start: int
    end: int

    def normalized(self) -> "Selection":
        if self.end < self.start:
            return Selection(self.end, self.start)
        return self

    def is_empty(self) -> bool:
        return self.start == self.end


def point_in_text_selection(
    pos: Point, char_width: float, bounds: Bounds, line_height: float
) -> bool:
    """
    Whether the character drawn at `pos` is inside the selection bounds.

    A selection taller than one line behaves like text selection: on the
    first row it extends right to the end of the line, on the last row it
    extends left to the start, and middle rows are fully selected.
    """
    top, bottom = bounds.top, bounds.bottom
    left, right = bounds.left, bounds.right
    mid_x = pos.x + char_width / 2

    if pos.y + line_height < top or pos.y >= bottom:
        return False

    if bottom - top <= line_height:
        return left <= mid_x <= right

    if pos.y <= top:
        return mid_x >= left
    if pos.y + line_height >= bottom:
        return mid_x <= right
    return True


def compute_selection(
    text: str,
    position_for_index: PositionForIndex,
    bounds: Bounds,
    line_height: float,
) -> Selection | None:
    """
    The range of characters whose glyphs fall inside `bounds`.

    Characters without a laid-out position are skipped. Width is the
    distance to the next character on the same line, or half the line
    height at the end of a line. Returns None when nothing is selected.
    """
    start: int | None = None
    end = 0
    for offset in range(len(text)):
        pos = position_for_index(offset)
        if pos is None:
            continue

        char_width = line_height / 2
        next_pos = position_for_index(offset + 1)
        if next_pos is not None and next_pos.y == pos.y:
            char_width = next_pos.x - pos.x

        if point_in_text_selection(pos, char_width, bounds, line_height):
            if start is None:
                start = offset
            end = offset + 1

    if start is None:
        return None
    return Selection(start, end)


def selection_quads(
    selection: Selection,
    position_for_index: PositionForIndex,
    bounds: Bounds,
    line_height: float,
) -> list[Bounds]:
    """Rectangles to paint behind the selected text."""
    selection = selection.normalized()
    start = position_for_index(selection.start)
    end = position_for_index(selection.end)
    if start is None or end is None:
        return []
    return range_quads(start, end, bounds, line_height)
