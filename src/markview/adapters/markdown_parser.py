import re

from markdown_it import MarkdownIt
from markdown_it.common.utils import normalizeReference
from markdown_it.tree import SyntaxTreeNode
from mdit_py_plugins.dollarmath import dollarmath_plugin
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.front_matter import front_matter_plugin

from ..core import ast
from ..core.errors import MarkdownParseError
from ..core.ports import GrammarParser

TASK_MARKER_RE = re.compile(r"^\[([ xX])\](?:[ \t]+|$)")
ALIGN_RE = re.compile(r"text-align:\s*(left|center|right)")


def create_markdown_it() -> MarkdownIt:
    """CommonMark plus tables, strikethrough, front matter, footnotes and math."""
    md = MarkdownIt(
        "commonmark",
        # Emit definitions in the token stream and keep reference labels on links.
        {"inline_definitions": True, "store_labels": True},
    )
    md.enable(["table", "strikethrough"])
    md.use(front_matter_plugin).use(footnote_plugin).use(dollarmath_plugin)
    return md


def _line_starts(source: str) -> list[int]:
    starts = [0]
    for i, ch in enumerate(source):
        if ch == "\n":
            starts.append(i + 1)
    return starts


def _strip_newline(text: str) -> str:
    return text[:-1] if text.endswith("\n") else text


def _identifier(label: str) -> str:
    return normalizeReference(label).lower()


class _Converter:
    """Convert one markdown-it syntax tree into `core.ast` nodes."""

    def __init__(self, source: str):
        self.source = source
        self.line_starts = _line_starts(source)

    def position(self, node: SyntaxTreeNode) -> ast.Position | None:
        # Block tokens only carry line ranges; map them to offsets.
        if not node.map:
            return None
        first, last = node.map
        if first >= len(self.line_starts):
            return None
        start = self.line_starts[first]
        end = self.line_starts[last] if last < len(self.line_starts) else len(self.source)
        while end > start and self.source[end - 1] in "\r\n":
            end -= 1
        return ast.Position(start, end)

    def blocks(self, nodes: list[SyntaxTreeNode]) -> list[ast.Node]:
        out: list[ast.Node] = []
        for node in nodes:
            if node.type == "footnote_block":
                # markdown-it gathers footnotes at the end; lift them to this level.
                out.extend(self.block(child) for child in node.children)
            else:
                out.append(self.block(node))
        return out

    def inlines(self, node: SyntaxTreeNode) -> list[ast.Node]:
        out: list[ast.Node] = []
        for child in node.children:
            if child.type != "inline":
                continue
            for inline in child.children:
                converted = self.inline(inline)
                if converted is not None:
                    out.append(converted)
        return out

    def block(self, node: SyntaxTreeNode) -> ast.Node:
        t = node.type
        pos = self.position(node)

        if t == "paragraph":
            return ast.Paragraph(children=self.inlines(node), position=pos)
        if t == "heading":
            return ast.Heading(depth=int(node.tag[1:]), children=self.inlines(node), position=pos)
        if t == "blockquote":
            return ast.Blockquote(children=self.blocks(node.children), position=pos)
        if t in ("bullet_list", "ordered_list"):
            ordered = t == "ordered_list"
            start = int(node.attrs.get("start", 1)) if ordered else None
            return ast.List(
                ordered=ordered,
                start=start,
                children=[self.list_item(c) for c in node.children],
                position=pos,
            )
        if t == "list_item":
            return self.list_item(node)
        if t in ("fence", "code_block"):
            info = node.info.strip() if t == "fence" else ""
            lang = info.split()[0] if info else None
            return ast.Code(value=_strip_newline(node.content), lang=lang, position=pos)
        if t.startswith("math_block"):
            return ast.Math(value=_strip_newline(node.content.removeprefix("\n")), position=pos)
        if t == "html_block":
            return ast.Html(value=node.content.rstrip("\n"), position=pos)
        if t == "hr":
            return ast.ThematicBreak(position=pos)
        if t == "table":
            return self.table(node, pos)
        if t == "definition":
            meta = node.meta or {}
            label = meta.get("label")
            return ast.Definition(
                identifier=_identifier(meta.get("id") or label or ""),
                label=label,
                url=meta.get("url", ""),
                title=meta.get("title") or None,
                position=pos,
            )
        if t == "footnote":
            meta = node.meta or {}
            return ast.FootnoteDefinition(
                identifier=str(meta.get("label") or meta.get("id", 0) + 1),
                children=self.blocks(node.children),
                position=pos,
            )
        if t == "front_matter":
            return ast.Yaml(value=_strip_newline(node.content), position=pos)
        return ast.Unknown(kind=t, position=pos)

    def list_item(self, node: SyntaxTreeNode) -> ast.ListItem:
        children = self.blocks(node.children)
        # Tight lists hide their paragraphs.
        spread = any(c.type == "paragraph" and not c.hidden for c in node.children)
        item = ast.ListItem(spread=spread, children=children, position=self.position(node))

        first = children[0] if children else None
        if isinstance(first, ast.Paragraph) and first.children:
            text = first.children[0]
            if isinstance(text, ast.Text):
                m = TASK_MARKER_RE.match(text.value)
                if m:
                    item.checked = m.group(1) in "xX"
                    text.value = text.value[m.end():]
        return item

    def table(self, node: SyntaxTreeNode, pos: ast.Position | None) -> ast.Table:
        table = ast.Table(position=pos)
        for section in node.children:
            for tr in section.children:
                row = ast.TableRow(position=self.position(tr))
                for cell in tr.children:
                    row.children.append(ast.TableCell(children=self.inlines(cell)))
                    if section.type == "thead":
                        m = ALIGN_RE.search(str(cell.attrs.get("style", "")))
                        table.align.append(m.group(1) if m else None)
                table.children.append(row)
        return table

    def inline(self, node: SyntaxTreeNode) -> ast.Node | None:
        t = node.type

        if t == "text":
            return ast.Text(value=node.content)
        if t == "softbreak":
            return ast.Text(value="\n")
        if t == "hardbreak":
            return ast.Break()
        if t == "code_inline":
            return ast.InlineCode(value=node.content)
        if t in ("em", "strong", "s"):
            children = self.inline_children(node)
            if t == "em":
                return ast.Emphasis(children=children)
            if t == "strong":
                return ast.Strong(children=children)
            return ast.Delete(children=children)
        if t == "link":
            children = self.inline_children(node)
            label = (node.meta or {}).get("label")
            if label:
                return ast.LinkReference(
                    identifier=_identifier(label), label=label, children=children
                )
            return ast.Link(
                url=str(node.attrs.get("href", "")),
                title=node.attrs.get("title") or None,
                children=children,
            )
        if t == "image":
            return ast.Image(
                url=str(node.attrs.get("src", "")),
                title=node.attrs.get("title") or None,
                alt=node.content,
            )
        if t == "html_inline":
            return ast.Html(value=node.content)
        if t.startswith("math_inline"):
            return ast.InlineMath(value=node.content)
        if t == "footnote_ref":
            meta = node.meta or {}
            return ast.FootnoteReference(
                identifier=str(meta.get("label") or meta.get("id", 0) + 1)
            )
        if t == "footnote_anchor":
            return None
        return ast.Unknown(kind=t)

    def inline_children(self, node: SyntaxTreeNode) -> list[ast.Node]:
        out = []
        for child in node.children:
            converted = self.inline(child)
            if converted is not None:
                out.append(converted)
        return out


class MarkdownItParser(GrammarParser):
    """Grammar parser backed by markdown-it-py."""

    def __init__(self, md: MarkdownIt | None = None):
        self.md = md or create_markdown_it()

    def parse(self, source: str) -> ast.Root:
        try:
            tokens = self.md.parse(source, {})
        except Exception as e:
            raise MarkdownParseError(f"failed to parse markdown: {e}") from e
        tree = SyntaxTreeNode(tokens)
        converter = _Converter(source)
        return ast.Root(
            children=converter.blocks(tree.children),
            position=ast.Position(0, len(source)),
        )
