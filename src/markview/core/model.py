from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Any, Iterator

from ..text.style import HighlightStyle

# URL prefix of links that ask the host to open a file.
OPEN_URL_PREFIX = "ctx://open?"


@dataclass(frozen=True)
class Span:
    start: int  # absolute offsets into the original source
    end: int


@dataclass(frozen=True)
class Range:
    start: int  # offsets relative to the owning text
    end: int

    def __len__(self) -> int:
        return max(self.end - self.start, 0)

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end

    def shift(self, delta: int) -> Range:
        return Range(self.start + delta, self.end + delta)


@dataclass(frozen=True)
class LinkMark:
    url: str = ""
    title: str | None = None
    identifier: str | None = None  # set for reference-style links
    requires_modifiers: bool = False  # activation needs the secondary modifier
    decorate: bool = True  # draw as a hyperlink

    @property
    def is_reference(self) -> bool:
        return self.identifier is not None and not self.url


@dataclass(frozen=True)
class TextMark:
    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    code: bool = False
    link: LinkMark | None = None

    def merge(self, other: TextMark) -> TextMark:
        return TextMark(
            bold=self.bold or other.bold,
            italic=self.italic or other.italic,
            strikethrough=self.strikethrough or other.strikethrough,
            code=self.code or other.code,
            link=other.link if other.link is not None else self.link,
        )


@dataclass
class ImageNode:
    url: str
    title: str | None = None
    alt: str | None = None
    link: LinkMark | None = None  # images carry at most one link


@dataclass
class InlineNode:
    text: str = ""
    marks: list[tuple[Range, TextMark]] = field(default_factory=list)
    image: ImageNode | None = None
    span: Span | None = None

    @classmethod
    def marked(cls, text: str, mark: TextMark) -> InlineNode:
        """A node with one mark covering all of its text."""
        return cls(text, [(Range(0, len(text)), mark)])

    @property
    def is_plain(self) -> bool:
        return not self.marks and self.image is None


class BlockNode:
    """Base class of the block-level document tree."""

    span: Span | None = None

    def is_break(self) -> bool:
        return False


@dataclass
class Paragraph(BlockNode):
    children: list[InlineNode] = field(default_factory=list)
    span: Span | None = None

    @classmethod
    def from_text(cls, text: str) -> Paragraph:
        paragraph = cls()
        paragraph.push_str(text)
        return paragraph

    @property
    def text(self) -> str:
        return "".join(child.text for child in self.children)

    def push(self, node: InlineNode) -> None:
        if node.is_plain and node.span is None:
            self.push_str(node.text)
        else:
            self.children.append(node)

    def push_str(self, text: str) -> None:
        if not text:
            return
        last = self.children[-1] if self.children else None
        if last is not None and last.is_plain and last.span is None:
            last.text += text
        else:
            self.children.append(InlineNode(text))

    def push_image(self, image: ImageNode) -> None:
        self.children.append(InlineNode(image=image))

    def merge(self, other: Paragraph) -> None:
        for child in other.children:
            self.push(child)

    def images(self) -> list[ImageNode]:
        return [c.image for c in self.children if c.image is not None]


@dataclass
class Heading(BlockNode):
    level: int
    children: Paragraph
    span: Span | None = None


@dataclass
class Blockquote(BlockNode):
    children: list[BlockNode] = field(default_factory=list)
    span: Span | None = None


@dataclass
class ListBlock(BlockNode):
    ordered: bool = False
    children: list[BlockNode] = field(default_factory=list)
    span: Span | None = None


@dataclass
class ListItem(BlockNode):
    children: list[BlockNode] = field(default_factory=list)
    spread: bool = False
    checked: bool | None = None  # None when the item is not a task
    span: Span | None = None


@dataclass
class CodeBlock(BlockNode):
    code: str
    lang: str | None = None
    highlights: list[tuple[Range, HighlightStyle]] = field(default_factory=list)
    span: Span | None = None


class ColumnAlign(enum.Enum):
    NONE = "none"
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass
class TableCell:
    children: Paragraph = field(default_factory=Paragraph)


@dataclass
class TableRow:
    cells: list[TableCell] = field(default_factory=list)


@dataclass
class Table(BlockNode):
    column_aligns: list[ColumnAlign] = field(default_factory=list)
    rows: list[TableRow] = field(default_factory=list)
    span: Span | None = None


@dataclass
class Definition(BlockNode):
    identifier: str
    url: str
    title: str | None = None
    span: Span | None = None


@dataclass
class Divider(BlockNode):
    span: Span | None = None


@dataclass
class Break(BlockNode):
    html: bool = False  # produced by an HTML <br>
    span: Span | None = None

    def is_break(self) -> bool:
        return True


@dataclass
class Root(BlockNode):
    """Blocks produced from an embedded HTML fragment."""
    children: list[BlockNode] = field(default_factory=list)
    span: Span | None = None


@dataclass
class Unknown(BlockNode):
    kind: str = ""
    span: Span | None = None


class ReferenceTable:
    """Link reference definitions seen during one parse, keyed by identifier."""

    def __init__(self) -> None:
        self._refs: dict[str, LinkMark] = {}

    def add(self, identifier: str, mark: LinkMark) -> None:
        # Later definitions replace earlier ones.
        self._refs[identifier] = mark

    def get(self, identifier: str) -> LinkMark | None:
        return self._refs.get(identifier)

    def resolve(self, identifier: str) -> LinkMark:
        mark = self._refs.get(identifier)
        if mark is None:
            return LinkMark(url="", identifier=identifier)
        return mark

    def items(self) -> list[tuple[str, LinkMark]]:
        return list(self._refs.items())

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._refs

    def __len__(self) -> int:
        return len(self._refs)


@dataclass
class ParsedDocument:
    source: str
    blocks: list[BlockNode] = field(default_factory=list)
    references: ReferenceTable = field(default_factory=ReferenceTable)
    meta: dict[str, Any] = field(default_factory=dict)

    def resolve_link(self, mark: LinkMark) -> LinkMark:
        """Resolve a reference-style link against the document's definitions."""
        if not mark.is_reference:
            return mark
        assert mark.identifier is not None
        resolved = self.references.resolve(mark.identifier)
        return replace(resolved, identifier=mark.identifier)

    def iter_paragraphs(self) -> Iterator[Paragraph]:
        """Every paragraph in document order, including headings and table cells."""
        yield from _iter_paragraphs(self.blocks)


def _iter_paragraphs(blocks: list[BlockNode]) -> Iterator[Paragraph]:
    for block in blocks:
        if isinstance(block, Paragraph):
            yield block
        elif isinstance(block, Heading):
            yield block.children
        elif isinstance(block, Table):
            for row in block.rows:
                for cell in row.cells:
                    yield cell.children
        elif isinstance(block, (Blockquote, ListBlock, ListItem, Root)):
            yield from _iter_paragraphs(block.children)
