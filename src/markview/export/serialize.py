"""Serialize parsed documents to plain data and to a readable outline."""

from typing import Any

from ..core.model import (
    Blockquote,
    BlockNode,
    Break,
    CodeBlock,
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
    Root,
    Span,
    Table,
    TextMark,
    Unknown,
)
from ..text.style import HighlightStyle


def _span(span: Span | None) -> list[int] | None:
    return None if span is None else [span.start, span.end]


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


def link_to_dict(link: LinkMark) -> dict[str, Any]:
    return _drop_none({
        "url": link.url,
        "title": link.title,
        "identifier": link.identifier,
        "requires_modifiers": link.requires_modifiers,
        "decorate": link.decorate,
    })


def mark_to_dict(mark: TextMark) -> dict[str, Any]:
    data: dict[str, Any] = {}
    for name in ("bold", "italic", "strikethrough", "code"):
        if getattr(mark, name):
            data[name] = True
    if mark.link is not None:
        data["link"] = link_to_dict(mark.link)
    return data


def image_to_dict(image: ImageNode) -> dict[str, Any]:
    return _drop_none({
        "url": image.url,
        "title": image.title,
        "alt": image.alt,
        "link": link_to_dict(image.link) if image.link else None,
    })


def highlight_to_dict(style: HighlightStyle) -> dict[str, Any]:
    return _drop_none({
        "color": style.color,
        "background_color": style.background_color,
        "bold": style.bold,
        "italic": style.italic,
        "underline": style.underline,
        "strikethrough": style.strikethrough,
    })


def inline_to_dict(node: InlineNode) -> dict[str, Any]:
    data: dict[str, Any] = {"text": node.text}
    if node.marks:
        data["marks"] = [
            {"range": [r.start, r.end], **mark_to_dict(m)} for r, m in node.marks
        ]
    if node.image is not None:
        data["image"] = image_to_dict(node.image)
    if node.span is not None:
        data["span"] = _span(node.span)
    return data


def paragraph_children(paragraph: Paragraph) -> list[dict[str, Any]]:
    return [inline_to_dict(c) for c in paragraph.children]


def block_to_dict(block: BlockNode) -> dict[str, Any]:
    """A JSON-ready dict with a `type` tag for one block."""
    data: dict[str, Any]
    if isinstance(block, Paragraph):
        data = {"type": "paragraph", "children": paragraph_children(block)}
    elif isinstance(block, Heading):
        data = {
            "type": "heading",
            "level": block.level,
            "children": paragraph_children(block.children),
        }
    elif isinstance(block, Blockquote):
        data = {"type": "blockquote", "children": [block_to_dict(b) for b in block.children]}
    elif isinstance(block, ListBlock):
        data = {
            "type": "list",
            "ordered": block.ordered,
            "children": [block_to_dict(b) for b in block.children],
        }
    elif isinstance(block, ListItem):
        data = {
            "type": "list_item",
            "spread": block.spread,
            "children": [block_to_dict(b) for b in block.children],
        }
        if block.checked is not None:
            data["checked"] = block.checked
    elif isinstance(block, CodeBlock):
        data = {
            "type": "code",
            "lang": block.lang,
            "code": block.code,
            "highlights": [
                {"range": [r.start, r.end], **highlight_to_dict(s)}
                for r, s in block.highlights
            ],
        }
    elif isinstance(block, Table):
        data = {
            "type": "table",
            "column_aligns": [a.value for a in block.column_aligns],
            "rows": [
                [paragraph_children(cell.children) for cell in row.cells]
                for row in block.rows
            ],
        }
    elif isinstance(block, Definition):
        data = _drop_none({
            "type": "definition",
            "identifier": block.identifier,
            "url": block.url,
            "title": block.title,
        })
    elif isinstance(block, Divider):
        data = {"type": "divider"}
    elif isinstance(block, Break):
        data = {"type": "break", "html": block.html}
    elif isinstance(block, Root):
        data = {"type": "root", "children": [block_to_dict(b) for b in block.children]}
    elif isinstance(block, Unknown):
        data = {"type": "unknown", "kind": block.kind}
    else:
        data = {"type": type(block).__name__.lower()}

    if block.span is not None:
        data["span"] = _span(block.span)
    return data


def document_to_dict(doc: ParsedDocument) -> dict[str, Any]:
    """Serialize a document to plain data for JSON or YAML output."""
    return {
        "blocks": [block_to_dict(b) for b in doc.blocks],
        "references": {
            identifier: link_to_dict(link) for identifier, link in doc.references.items()
        },
        "meta": doc.meta,
    }


def _describe_inline(node: InlineNode) -> str:
    if node.image is not None:
        return f"image {node.image.url!r}"
    flags = []
    for _, mark in node.marks:
        for name in ("bold", "italic", "strikethrough", "code"):
            if getattr(mark, name) and name not in flags:
                flags.append(name)
        if mark.link is not None:
            target = mark.link.url or f"[{mark.link.identifier}]"
            flags.append(f"link={target}")
    suffix = f" ({', '.join(flags)})" if flags else ""
    return f"{node.text!r}{suffix}"


def _tree_lines(block: BlockNode, depth: int, lines: list[str]) -> None:
    pad = "  " * depth
    if isinstance(block, Paragraph):
        lines.append(f"{pad}paragraph")
        lines.extend(f"{pad}  {_describe_inline(c)}" for c in block.children)
    elif isinstance(block, Heading):
        lines.append(f"{pad}heading {block.level}")
        lines.extend(f"{pad}  {_describe_inline(c)}" for c in block.children.children)
    elif isinstance(block, (Blockquote, ListBlock, ListItem, Root)):
        label = {
            Blockquote: "blockquote",
            ListBlock: "list",
            ListItem: "item",
            Root: "html",
        }[type(block)]
        if isinstance(block, ListBlock):
            label += " ordered" if block.ordered else " bullet"
        if isinstance(block, ListItem) and block.checked is not None:
            label += " [x]" if block.checked else " [ ]"
        lines.append(f"{pad}{label}")
        for child in block.children:
            _tree_lines(child, depth + 1, lines)
    elif isinstance(block, CodeBlock):
        lines.append(f"{pad}code {block.lang or '-'} ({len(block.highlights)} highlights)")
        lines.extend(f"{pad}  | {line}" for line in block.code.split("\n"))
    elif isinstance(block, Table):
        aligns = " ".join(a.value for a in block.column_aligns)
        lines.append(f"{pad}table [{aligns}]")
        for row in block.rows:
            cells = " | ".join(cell.children.text for cell in row.cells)
            lines.append(f"{pad}  | {cells} |")
    elif isinstance(block, Definition):
        lines.append(f"{pad}definition [{block.identifier}]: {block.url}")
    elif isinstance(block, Unknown):
        lines.append(f"{pad}unknown {block.kind}")
    else:
        lines.append(f"{pad}{type(block).__name__.lower()}")


def render_tree(doc: ParsedDocument) -> str:
    """An indented outline of the document, one node per line."""
    lines: list[str] = []
    for block in doc.blocks:
        _tree_lines(block, 0, lines)
    return "\n".join(lines)
