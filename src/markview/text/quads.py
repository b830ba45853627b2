"""Rectangles covering a range of laid-out text."""

from dataclasses import dataclass
from typing import Callable

from ..core.model import Range
from .geometry import Bounds, Point
from .style import InlineCodeStyle

# Maps a text offset to the top-left of its glyph, or None when not laid out.
PositionForIndex = Callable[[int], Point | None]


def range_quads(
    start: Point, end: Point, bounds: Bounds, line_height: float
) -> list[Bounds]:
    """
    Rectangles from `start` to `end`.

    On one visual line this is a single rectangle. Otherwise the first
    line runs to the right edge of `bounds`, the last line starts at its
    left edge, and a middle rectangle fills any full lines between them.
    """
    if start.y == end.y:
        return [Bounds.from_corners(start, Point(end.x, end.y + line_height))]

    quads = [Bounds.from_corners(start, Point(bounds.right, start.y + line_height))]
    if end.y > start.y + line_height:
        quads.append(
            Bounds.from_corners(
                Point(bounds.left, start.y + line_height), Point(bounds.right, end.y)
            )
        )
    quads.append(Bounds.from_corners(Point(bounds.left, end.y), Point(end.x, end.y + line_height)))
    return quads


@dataclass(frozen=True)
class CodeQuad:
    bounds: Bounds
    corner_radius: float


def inline_code_quads(
    ranges: list[Range],
    style: InlineCodeStyle,
    position_for_index: PositionForIndex,
    bounds: Bounds,
    line_height: float,
) -> list[CodeQuad]:
    """Padded background rectangles behind inline code ranges."""
    if not ranges or not style.is_enabled():
        return []

    out: list[CodeQuad] = []
    for r in ranges:
        if r.start >= r.end:
            continue
        start = position_for_index(r.start)
        end = position_for_index(r.end)
        if start is None or end is None:
            continue
        quads = range_quads(start, end, bounds, line_height)
        for i, quad in enumerate(quads):
            # Middle rectangles join the first and last lines; keep them square.
            middle = len(quads) == 3 and i == 1
            out.append(
                CodeQuad(
                    quad.dilate(style.padding_x, style.padding_y),
                    0.0 if middle else style.border_radius,
                )
            )
    return out
