"""Flatten a paragraph into one string with offset-addressed styling."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..core.model import CodeBlock, LinkMark, Paragraph, ParsedDocument, Range, TextMark
from .geometry import Bounds
from .quads import CodeQuad, PositionForIndex, inline_code_quads
from .runs import TextRun, build_text_runs, flatten_highlights
from .selection import Selection, compute_selection
from .style import HighlightStyle, InlineCodeStyle, TextStyle, TextViewStyle


def _mark_style(mark: TextMark, link_color: str) -> HighlightStyle:
    style = HighlightStyle(
        bold=True if mark.bold else None,
        italic=True if mark.italic else None,
        strikethrough=True if mark.strikethrough else None,
    )
    if mark.link is not None and mark.link.decorate:
        style = style.merge(HighlightStyle(color=link_color, underline=True))
    return style


def _merge_ranges(ranges: list[Range]) -> list[Range]:
    out: list[Range] = []
    for r in sorted(ranges, key=lambda r: (r.start, r.end)):
        if r.start >= r.end:
            continue
        if out and r.start <= out[-1].end:
            out[-1] = Range(out[-1].start, max(out[-1].end, r.end))
        else:
            out.append(r)
    return out


@dataclass
class InlineText:
    """
    A paragraph projected onto a single string.

    Offsets in `links`, `highlights` and `code_ranges` index into `text`.
    Highlights are sorted and non-overlapping, as are code ranges. Links
    may nest (a token link inside a code span inside a link).
    """
    text: str = ""
    links: list[tuple[Range, LinkMark]] = field(default_factory=list)
    highlights: list[tuple[Range, HighlightStyle]] = field(default_factory=list)
    code_ranges: list[Range] = field(default_factory=list)

    @classmethod
    def from_paragraph(
        cls,
        paragraph: Paragraph,
        style: TextViewStyle | None = None,
        document: ParsedDocument | None = None,
    ) -> InlineText:
        style = style or TextViewStyle()
        parts: list[str] = []
        links: list[tuple[Range, LinkMark]] = []
        layers: list[tuple[Range, HighlightStyle]] = []
        code: list[Range] = []

        offset = 0
        for node in paragraph.children:
            parts.append(node.text)
            for r, mark in node.marks:
                r = r.shift(offset)
                if mark.link is not None:
                    link = mark.link
                    if document is not None:
                        link = document.resolve_link(link)
                    links.append((r, link))
                if mark.code:
                    code.append(r)
                layers.append((r, _mark_style(mark, style.link_color)))
            offset += len(node.text)

        text = "".join(parts)
        links.sort(key=lambda item: (item[0].start, -item[0].end))
        return cls(
            text=text,
            links=links,
            highlights=flatten_highlights(len(text), layers),
            code_ranges=_merge_ranges(code),
        )

    @classmethod
    def from_code_block(cls, block: CodeBlock) -> InlineText:
        return cls(text=block.code, highlights=list(block.highlights))

    def link_at(self, offset: int) -> LinkMark | None:
        """The innermost link covering `offset`."""
        found: tuple[Range, LinkMark] | None = None
        for r, link in self.links:
            if r.contains(offset) and (found is None or len(r) <= len(found[0])):
                found = (r, link)
        return found[1] if found is not None else None

    def click_target(self, offset: int, secondary: bool = False) -> str | None:
        """
        URL to open for a click at `offset`, if any.

        Internal links only respond while the secondary modifier is held.
        """
        link = self.link_at(offset)
        if link is None or not link.url:
            return None
        if link.requires_modifiers and not secondary:
            return None
        return link.url

    def runs(
        self, base: TextStyle, inline_code_style: InlineCodeStyle | None = None
    ) -> list[TextRun]:
        return build_text_runs(
            len(self.text), base, self.highlights, self.code_ranges, inline_code_style
        )

    def code_quads(
        self,
        style: InlineCodeStyle,
        position_for_index: PositionForIndex,
        bounds: Bounds,
        line_height: float,
    ) -> list[CodeQuad]:
        return inline_code_quads(
            self.code_ranges, style, position_for_index, bounds, line_height
        )

    def selection(
        self,
        position_for_index: PositionForIndex,
        bounds: Bounds,
        line_height: float,
    ) -> Selection | None:
        return compute_selection(self.text, position_for_index, bounds, line_height)

    def selected_text(self, selection: Selection) -> str:
        selection = selection.normalized()
        return self.text[selection.start:selection.end]
