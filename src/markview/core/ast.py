"""Markdown syntax tree consumed by the document builder.

One dataclass per supported node kind; anything else a grammar parser
produces is represented as `Unknown`. Positions are offsets into the
parsed source and are absent when the parser does not report them.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Position:
    start: int
    end: int


@dataclass
class Node:
    position: Position | None = field(default=None, kw_only=True)


@dataclass
class Root(Node):
    children: list[Node] = field(default_factory=list)


# Blocks

@dataclass
class Paragraph(Node):
    children: list[Node] = field(default_factory=list)


@dataclass
class Heading(Node):
    depth: int = 1
    children: list[Node] = field(default_factory=list)


@dataclass
class Blockquote(Node):
    children: list[Node] = field(default_factory=list)


@dataclass
class List(Node):
    ordered: bool = False
    start: int | None = None
    children: list[Node] = field(default_factory=list)


@dataclass
class ListItem(Node):
    spread: bool = False
    checked: bool | None = None
    children: list[Node] = field(default_factory=list)


@dataclass
class Code(Node):
    value: str = ""
    lang: str | None = None


@dataclass
class Math(Node):
    value: str = ""


@dataclass
class Html(Node):
    value: str = ""


@dataclass
class ThematicBreak(Node):
    pass


@dataclass
class Table(Node):
    align: list[str | None] = field(default_factory=list)  # "left" | "center" | "right" | None
    children: list[Node] = field(default_factory=list)


@dataclass
class TableRow(Node):
    children: list[Node] = field(default_factory=list)


@dataclass
class TableCell(Node):
    children: list[Node] = field(default_factory=list)


@dataclass
class Definition(Node):
    identifier: str = ""
    label: str | None = None
    url: str = ""
    title: str | None = None


@dataclass
class FootnoteDefinition(Node):
    identifier: str = ""
    children: list[Node] = field(default_factory=list)


@dataclass
class Yaml(Node):
    value: str = ""


@dataclass
class Toml(Node):
    value: str = ""


@dataclass
class MdxFlowExpression(Node):
    value: str = ""


# Inlines

@dataclass
class Text(Node):
    value: str = ""


@dataclass
class Emphasis(Node):
    children: list[Node] = field(default_factory=list)


@dataclass
class Strong(Node):
    children: list[Node] = field(default_factory=list)


@dataclass
class Delete(Node):
    children: list[Node] = field(default_factory=list)


@dataclass
class InlineCode(Node):
    value: str = ""


@dataclass
class InlineMath(Node):
    value: str = ""


@dataclass
class MdxTextExpression(Node):
    value: str = ""


@dataclass
class Break(Node):
    pass


@dataclass
class Link(Node):
    url: str = ""
    title: str | None = None
    children: list[Node] = field(default_factory=list)


@dataclass
class LinkReference(Node):
    identifier: str = ""
    label: str | None = None
    children: list[Node] = field(default_factory=list)


@dataclass
class Image(Node):
    url: str = ""
    title: str | None = None
    alt: str = ""


@dataclass
class FootnoteReference(Node):
    identifier: str = ""


@dataclass
class Unknown(Node):
    kind: str = ""
    children: list[Node] = field(default_factory=list)
