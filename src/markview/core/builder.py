"""Build the document model from a Markdown syntax tree."""

import logging
from dataclasses import dataclass, field
from typing import Any

from ..text.style import CodeTokenLinks, HighlightTheme
from . import ast
from .errors import HtmlParseError
from .model import (
    OPEN_URL_PREFIX,
    BlockNode,
    Blockquote,
    Break,
    CodeBlock,
    ColumnAlign,
    Definition,
    Divider,
    Heading,
    ImageNode,
    InlineNode,
    LinkMark,
    ListBlock,
    ListItem,
    Paragraph,
    ParsedDocument,
    Range,
    ReferenceTable,
    Root,
    Span,
    Table,
    TableCell,
    TableRow,
    TextMark,
    Unknown,
)
from .ports import FrontmatterCodec, GrammarParser, Highlighter, HtmlFragmentParser
from .tokens import link_url_for_token, split_whitespace_token_ranges

logger = logging.getLogger(__name__)

_ALIGNS = {
    "left": ColumnAlign.LEFT,
    "center": ColumnAlign.CENTER,
    "right": ColumnAlign.RIGHT,
}


@dataclass
class _BuildState:
    """State owned by a single build; never shared between documents."""
    offset: int
    references: ReferenceTable = field(default_factory=ReferenceTable)
    meta: dict[str, Any] = field(default_factory=dict)


def _link_mark(url: str, title: str | None = None, identifier: str | None = None) -> LinkMark:
    # Links that open files need a modifier to activate and look like plain text.
    internal = url.startswith(OPEN_URL_PREFIX)
    return LinkMark(
        url=url,
        title=title,
        identifier=identifier,
        requires_modifiers=internal,
        decorate=not internal,
    )


def _wrap(nodes: list[InlineNode], mark: TextMark, span: Span | None) -> list[InlineNode]:
    """Join rendered children into one node covered by `mark`.

    Marks of the children are kept, shifted to their place in the joined
    text. Images cannot be wrapped and are dropped.
    """
    text = ""
    marks: list[tuple[Range, TextMark]] = []
    for node in nodes:
        if node.image is not None:
            continue
        marks.extend((r.shift(len(text)), m) for r, m in node.marks)
        text += node.text
    if not text:
        return []
    return [InlineNode(text, [(Range(0, len(text)), mark)] + marks, span=span)]


class DocumentBuilder:
    """
    Turn a syntax tree into a ParsedDocument.

    Collaborators are optional: without a highlighter code blocks carry
    no highlights, without an HTML parser embedded HTML is kept as text,
    and without a front matter codec `meta` stays empty.
    """

    def __init__(
        self,
        links: CodeTokenLinks | None = None,
        theme: HighlightTheme | None = None,
        highlighter: Highlighter | None = None,
        html: HtmlFragmentParser | None = None,
        frontmatter: FrontmatterCodec | None = None,
    ):
        self.links = links or CodeTokenLinks()
        self.theme = theme or HighlightTheme.default_light()
        self.highlighter = highlighter
        self.html = html
        self.frontmatter = frontmatter

    def build(self, root: ast.Root, source: str, offset: int = 0) -> ParsedDocument:
        """
        Build a document from `root`.

        `offset` is added to every position, for sources that are part of
        a larger concatenated text.
        """
        state = _BuildState(offset=offset)
        blocks = [self.block(child, state) for child in root.children]
        return ParsedDocument(
            source=source,
            blocks=blocks,
            references=state.references,
            meta=state.meta,
        )

    def _span(self, node: ast.Node, state: _BuildState) -> Span | None:
        if node.position is None:
            return None
        return Span(state.offset + node.position.start, state.offset + node.position.end)

    # Blocks

    def block(self, node: ast.Node, state: _BuildState) -> BlockNode:
        span = self._span(node, state)

        if isinstance(node, ast.Paragraph):
            paragraph = self.paragraph(node.children, state)
            paragraph.span = span
            return paragraph

        if isinstance(node, ast.Heading):
            return Heading(
                level=node.depth,
                children=self.paragraph(node.children, state),
                span=span,
            )

        if isinstance(node, ast.Blockquote):
            return Blockquote(
                children=[self.block(c, state) for c in node.children], span=span
            )

        if isinstance(node, ast.List):
            return ListBlock(
                ordered=node.ordered,
                children=[self.block(c, state) for c in node.children],
                span=span,
            )

        if isinstance(node, ast.ListItem):
            return ListItem(
                children=[self.block(c, state) for c in node.children],
                spread=node.spread,
                checked=node.checked,
                span=span,
            )

        if isinstance(node, ast.Break):
            return Break(html=False, span=span)

        if isinstance(node, ast.Code):
            return self.code_block(node.value, node.lang, span)

        if isinstance(node, ast.Math):
            return self.code_block(node.value, None, span)

        if isinstance(node, ast.MdxFlowExpression):
            return self.code_block(node.value, "mdx", span)

        if isinstance(node, ast.Yaml):
            if self.frontmatter is not None and not state.meta:
                state.meta.update(self.frontmatter.decode(node.value))
            return self.code_block(node.value, "yml", span)

        if isinstance(node, ast.Toml):
            return self.code_block(node.value, "toml", span)

        if isinstance(node, ast.Html):
            return self.html_block(node.value, span)

        if isinstance(node, ast.ThematicBreak):
            return Divider(span=span)

        if isinstance(node, ast.Table):
            return self.table(node, state, span)

        if isinstance(node, ast.FootnoteDefinition):
            prefix = f"[{node.identifier}]: "
            paragraph = Paragraph(span=span)
            paragraph.push(InlineNode.marked(prefix, TextMark(italic=True)))
            for child in node.children:
                for inline in self.inline(child, state):
                    paragraph.push(inline)
            return paragraph

        if isinstance(node, ast.Definition):
            state.references.add(
                node.identifier, _link_mark(node.url, node.title, node.identifier)
            )
            return Definition(
                identifier=node.identifier, url=node.url, title=node.title, span=span
            )

        kind = node.kind if isinstance(node, ast.Unknown) else type(node).__name__
        logger.debug("unsupported block node: %s", kind)
        return Unknown(kind=kind, span=span)

    def code_block(self, code: str, lang: str | None, span: Span | None) -> CodeBlock:
        highlights = []
        if self.highlighter is not None:
            try:
                highlights = self.highlighter.highlight(code, lang, self.theme)
            except Exception as e:
                logger.debug("failed highlighting %s code: %s", lang, e)
                highlights = []
        return CodeBlock(code=code, lang=lang, highlights=highlights, span=span)

    def html_block(self, value: str, span: Span | None) -> BlockNode:
        if self.html is not None:
            try:
                fragment = self.html.parse(value)
            except HtmlParseError as e:
                logger.debug("error parsing html: %s", e)
            else:
                return Root(children=fragment.blocks, span=span)
        paragraph = Paragraph.from_text(value)
        paragraph.span = span
        return paragraph

    def table(self, node: ast.Table, state: _BuildState, span: Span | None) -> Table:
        table = Table(
            column_aligns=[_ALIGNS.get(a or "", ColumnAlign.NONE) for a in node.align],
            span=span,
        )
        for row_node in node.children:
            if not isinstance(row_node, ast.TableRow):
                continue
            row = TableRow()
            for cell_node in row_node.children:
                if isinstance(cell_node, ast.TableCell):
                    row.cells.append(TableCell(self.paragraph(cell_node.children, state)))
            table.rows.append(row)
        return table

    # Inlines

    def paragraph(self, children: list[ast.Node], state: _BuildState) -> Paragraph:
        paragraph = Paragraph()
        for child in children:
            for inline in self.inline(child, state):
                paragraph.push(inline)
        return paragraph

    def inline_children(self, children: list[ast.Node], state: _BuildState) -> list[InlineNode]:
        nodes: list[InlineNode] = []
        for child in children:
            nodes.extend(self.inline(child, state))
        return nodes

    def inline(self, node: ast.Node, state: _BuildState) -> list[InlineNode]:
        """Render one inline node into the inline nodes it contributes."""
        span = self._span(node, state)

        if isinstance(node, ast.Text):
            return [InlineNode(node.value, span=span)] if node.value else []

        if isinstance(node, ast.Paragraph):
            return self.inline_children(node.children, state)

        if isinstance(node, ast.Emphasis):
            return _wrap(self.inline_children(node.children, state), TextMark(italic=True), span)

        if isinstance(node, ast.Strong):
            return _wrap(self.inline_children(node.children, state), TextMark(bold=True), span)

        if isinstance(node, ast.Delete):
            return _wrap(
                self.inline_children(node.children, state), TextMark(strikethrough=True), span
            )

        if isinstance(node, ast.InlineCode):
            return [InlineNode(node.value, self.inline_code_marks(node.value), span=span)]

        if isinstance(node, ast.InlineMath):
            return [InlineNode(node.value, [(Range(0, len(node.value)), TextMark(code=True))], span=span)]

        if isinstance(node, ast.MdxTextExpression):
            return [InlineNode(node.value, span=span)]

        if isinstance(node, ast.Break):
            return [InlineNode("\n", span=span)]

        if isinstance(node, ast.Link):
            mark = _link_mark(node.url, node.title)
            children = self.inline_children(node.children, state)
            for child in children:
                if child.image is not None:
                    child.image.link = mark
                if child.text:
                    child.marks.append((Range(0, len(child.text)), TextMark(link=mark)))
            return children

        if isinstance(node, ast.Image):
            return [
                InlineNode(
                    image=ImageNode(url=node.url, title=node.title, alt=node.alt),
                    span=span,
                )
            ]

        if isinstance(node, ast.LinkReference):
            # Resolved against the reference table when rendered.
            text = "".join(c.text for c in self.inline_children(node.children, state))
            if not text:
                return []
            mark = LinkMark(url="", identifier=node.identifier)
            return [InlineNode(text, [(Range(0, len(text)), TextMark(link=mark))], span=span)]

        if isinstance(node, ast.FootnoteReference):
            label = f"[{node.identifier}]"
            return [InlineNode(label, [(Range(0, len(label)), TextMark(italic=True))], span=span)]

        if isinstance(node, ast.Html):
            return self.inline_html(node.value, span)

        kind = node.kind if isinstance(node, ast.Unknown) else type(node).__name__
        logger.debug("unsupported inline node: %s", kind)
        return []

    def inline_html(self, value: str, span: Span | None) -> list[InlineNode]:
        if self.html is None:
            return [InlineNode(value, span=span)]
        try:
            fragment = self.html.parse(value)
        except HtmlParseError as e:
            logger.debug("failed parsing html: %s", e)
            return [InlineNode(value, span=span)]
        if len(fragment.blocks) == 1 and fragment.blocks[0].is_break():
            return [InlineNode("\n", span=span)]
        logger.debug("unsupported inline html: %r", value)
        return []

    def inline_code_marks(self, text: str) -> list[tuple[Range, TextMark]]:
        """The code mark plus link marks for URL and file tokens inside it."""
        marks = [(Range(0, len(text)), TextMark(code=True))]
        if not self.links.enabled or not text:
            return marks

        for token_range in split_whitespace_token_ranges(text):
            token = text[token_range.start:token_range.end]
            url = link_url_for_token(token, self.links.workspace_id)
            if url is None:
                continue
            link = LinkMark(url=url, requires_modifiers=True, decorate=False)
            marks.append((token_range, TextMark(link=link)))
        return marks


def parse_markdown(
    source: str,
    parser: GrammarParser,
    builder: DocumentBuilder | None = None,
    offset: int = 0,
) -> ParsedDocument:
    """Parse `source` and build its document. Raises MarkdownParseError."""
    root = parser.parse(source)
    return (builder or DocumentBuilder()).build(root, source, offset=offset)
