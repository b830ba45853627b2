"""Split text into styled runs from independent layers of style ranges.

Highlights (e.g. syntax colors) and inline code ranges are defined
separately and may overlap each other. Every range boundary becomes a
breakpoint, so each resulting segment is either fully inside a range or
fully outside it.
"""

from dataclasses import dataclass

from ..core.model import Range
from .style import HighlightStyle, InlineCodeStyle, TextStyle


@dataclass(frozen=True)
class Segment:
    range: Range
    highlight: HighlightStyle | None = None
    code: bool = False


@dataclass(frozen=True)
class TextRun:
    range: Range
    style: TextStyle

    def __len__(self) -> int:
        return len(self.range)


def _breakpoints(length: int, ranges: list[Range]) -> list[int]:
    points = {0, length}
    for r in ranges:
        points.add(r.start)
        points.add(r.end)
    return sorted(p for p in points if 0 <= p <= length)


def segment_ranges(
    length: int,
    highlights: list[tuple[Range, HighlightStyle]],
    code_ranges: list[Range],
) -> list[Segment]:
    """
    Partition [0, length) at every range boundary.

    `highlights` must be sorted and non-overlapping, and so must
    `code_ranges`; the two sets may overlap each other. A segment takes a
    highlight or the code flag only when it lies entirely inside that
    range.
    """
    points = _breakpoints(length, [r for r, _ in highlights] + list(code_ranges))

    segments: list[Segment] = []
    hi = 0
    ci = 0
    for start, end in zip(points, points[1:]):
        while hi < len(highlights) and highlights[hi][0].end <= start:
            hi += 1
        highlight = None
        if hi < len(highlights):
            r, style = highlights[hi]
            if r.start <= start and r.end >= end:
                highlight = style

        while ci < len(code_ranges) and code_ranges[ci].end <= start:
            ci += 1
        code = (
            ci < len(code_ranges)
            and code_ranges[ci].start <= start
            and code_ranges[ci].end >= end
        )

        segments.append(Segment(Range(start, end), highlight, code))
    return segments


def build_text_runs(
    length: int,
    base: TextStyle,
    highlights: list[tuple[Range, HighlightStyle]],
    code_ranges: list[Range] | None = None,
    inline_code_style: InlineCodeStyle | None = None,
) -> list[TextRun]:
    """Styled runs covering [0, length); neighbours with equal style are merged."""
    if inline_code_style is None:
        code_ranges = []

    runs: list[TextRun] = []
    for segment in segment_ranges(length, highlights, code_ranges or []):
        style = base
        if segment.highlight is not None:
            style = style.highlight(segment.highlight)
        if segment.code and inline_code_style is not None:
            style = inline_code_style.apply(style)

        if runs and runs[-1].style == style:
            runs[-1] = TextRun(Range(runs[-1].range.start, segment.range.end), style)
        else:
            runs.append(TextRun(segment.range, style))
    return runs


def flatten_highlights(
    length: int, layers: list[tuple[Range, HighlightStyle]]
) -> list[tuple[Range, HighlightStyle]]:
    """
    Compose possibly overlapping highlights into sorted, non-overlapping ones.

    Where ranges overlap their styles are merged in input order, later
    ones winning on conflicting fields.
    """
    points = _breakpoints(length, [r for r, _ in layers])

    out: list[tuple[Range, HighlightStyle]] = []
    for start, end in zip(points, points[1:]):
        style = HighlightStyle()
        for r, layer in layers:
            if r.start <= start and r.end >= end:
                style = style.merge(layer)
        if style.is_empty():
            continue
        if out and out[-1][0].end == start and out[-1][1] == style:
            out[-1] = (Range(out[-1][0].start, end), style)
        else:
            out.append((Range(start, end), style))
    return out
