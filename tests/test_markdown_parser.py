"""End-to-end tests from Markdown source to documents."""

import pytest

from markview.adapters.markdown_parser import MarkdownItParser
from markview.core import ast
from markview.core.builder import DocumentBuilder, parse_markdown
from markview.core.errors import MarkdownParseError
from markview.core.model import (
    Blockquote,
    CodeBlock,
    ColumnAlign,
    Definition,
    Divider,
    Heading,
    InlineNode,
    LinkMark,
    ListBlock,
    Paragraph,
    Range,
    Span,
    Table,
    TextMark,
)
from markview.runtime import build_runtime
from markview.text.style import CodeTokenLinks


def parse(source, **kwargs):
    builder = DocumentBuilder(**kwargs)
    return parse_markdown(source, MarkdownItParser(), builder)


def test_bold_and_linkified_code():
    """Test bold text followed by a URL in inline code."""
    doc = parse("**bold** and `http://x.com`", links=CodeTokenLinks.enable())

    paragraph = doc.blocks[0]
    assert paragraph.children == [
        InlineNode("bold", [(Range(0, 4), TextMark(bold=True))]),
        InlineNode(" and "),
        InlineNode(
            "http://x.com",
            [
                (Range(0, 12), TextMark(code=True)),
                (
                    Range(0, 12),
                    TextMark(
                        link=LinkMark(url="http://x.com", requires_modifiers=True, decorate=False)
                    ),
                ),
            ],
        ),
    ]


def test_reference_link_resolution():
    """Test that a reference link resolves to its definition."""
    doc = parse('[ref]: http://y.com "T"\n\n[text][ref]')

    assert isinstance(doc.blocks[0], Definition)
    assert doc.blocks[0].url == "http://y.com"
    assert doc.blocks[0].title == "T"

    node = doc.blocks[1].children[0]
    assert node.text == "text"
    link = node.marks[0][1].link
    assert link.url == ""

    resolved = doc.resolve_link(link)
    assert resolved.url == "http://y.com"
    assert resolved.title == "T"


def test_reference_defined_after_use():
    """Test that a definition later in the document still resolves."""
    doc = parse("[Text][Ref]\n\n[ref]: http://later.example")

    link = doc.blocks[0].children[0].marks[0][1].link
    assert doc.resolve_link(link).url == "http://later.example"
    assert link.identifier == "ref"
    assert doc.blocks[1].identifier == "ref"
    assert "ref" in doc.references


def test_block_count_matches_tree():
    """Test that the document has one block per top-level syntax node."""
    source = "# Title\n\ntext\n\n- a\n- b\n\n---\n\n> quote\n"
    root = MarkdownItParser().parse(source)
    doc = parse(source)

    assert len(doc.blocks) == len(root.children) == 5
    assert isinstance(doc.blocks[0], Heading)
    assert isinstance(doc.blocks[1], Paragraph)
    assert isinstance(doc.blocks[2], ListBlock)
    assert isinstance(doc.blocks[3], Divider)
    assert isinstance(doc.blocks[4], Blockquote)


def test_block_spans():
    """Test that block spans cover their source lines."""
    source = "# Title\n\nsome text\nmore\n"
    doc = parse(source)

    assert doc.blocks[0].span == Span(0, 7)
    assert source[doc.blocks[1].span.start:doc.blocks[1].span.end] == "some text\nmore"


def test_offset_added_to_spans():
    """Test that an offset shifts every span."""
    doc = parse_markdown("hello", MarkdownItParser(), offset=10)
    assert doc.blocks[0].span == Span(10, 15)


def test_soft_and_hard_breaks():
    """Test that both break kinds become newlines."""
    doc = parse("a\nb  \nc")
    assert doc.blocks[0].text == "a\nb\nc"


def test_fenced_code():
    """Test fenced code blocks and their language."""
    doc = parse("```python\nx = 1\n```\n")

    block = doc.blocks[0]
    assert isinstance(block, CodeBlock)
    assert block.code == "x = 1"
    assert block.lang == "python"


def test_task_list():
    """Test that task markers set the checked state and are removed."""
    doc = parse("- [x] done\n- [ ] todo\n- plain\n")

    items = doc.blocks[0].children
    assert [item.checked for item in items] == [True, False, None]
    assert items[0].children[0].text == "done"
    assert items[1].children[0].text == "todo"
    assert all(item.spread is False for item in items)


def test_loose_list_is_spread():
    """Test that blank lines between items make a list spread."""
    doc = parse("- a\n\n- b\n")
    assert all(item.spread for item in doc.blocks[0].children)


def test_table():
    """Test GFM tables with alignment."""
    doc = parse("| a | b | c |\n|:--|:-:|--:|\n| 1 | **2** | 3 |\n")

    table = doc.blocks[0]
    assert isinstance(table, Table)
    assert table.column_aligns == [ColumnAlign.LEFT, ColumnAlign.CENTER, ColumnAlign.RIGHT]
    assert [[c.children.text for c in row.cells] for row in table.rows] == [
        ["a", "b", "c"],
        ["1", "2", "3"],
    ]


def test_strikethrough_and_nested_emphasis():
    """Test strikethrough and emphasis nested in strong text."""
    doc = parse("~~gone~~ **a *b***")

    children = doc.blocks[0].children
    assert children[0].marks == [(Range(0, 4), TextMark(strikethrough=True))]
    strong = children[2]
    assert strong.text == "a b"
    assert strong.marks == [
        (Range(0, 3), TextMark(bold=True)),
        (Range(2, 3), TextMark(italic=True)),
    ]


def test_links_and_images():
    """Test inline links and linked images."""
    doc = parse('[site](https://e.x "E") [![alt](i.png)](https://img.x)')

    paragraph = doc.blocks[0]
    site = paragraph.children[0]
    assert site.text == "site"
    assert site.marks[0][1].link == LinkMark(url="https://e.x", title="E")

    image = paragraph.images()[0]
    assert image.url == "i.png"
    assert image.alt == "alt"
    assert image.link.url == "https://img.x"


def test_footnotes():
    """Test footnote markers and definitions at the end."""
    doc = parse("see[^n]\n\n[^n]: the note\n")

    ref = doc.blocks[0].children[-1]
    assert ref.text.startswith("[")
    assert ref.marks[0][1] == TextMark(italic=True)

    footnote = doc.blocks[-1]
    assert isinstance(footnote, Paragraph)
    assert footnote.text.endswith("the note")
    assert footnote.children[0].marks[0][1] == TextMark(italic=True)


def test_math():
    """Test display and inline math."""
    doc = parse("$$\na^2\n$$\n\ninline $x$ math\n")

    assert isinstance(doc.blocks[0], CodeBlock)
    assert doc.blocks[0].code == "a^2"
    code = [c for c in doc.blocks[1].children if c.marks]
    assert code[0].text == "x"
    assert code[0].marks == [(Range(0, 1), TextMark(code=True))]


def test_front_matter_with_runtime():
    """Test that front matter is decoded into meta and kept as a code block."""
    rt = build_runtime()
    doc = rt.parse("---\ntitle: Hello\ntags: [a, b]\n---\n\n# Body\n")

    assert doc.meta == {"title": "Hello", "tags": ["a", "b"]}
    assert isinstance(doc.blocks[0], CodeBlock)
    assert doc.blocks[0].lang == "yml"
    assert doc.blocks[0].highlights


def test_html_with_runtime():
    """Test inline and block HTML through the runtime."""
    rt = build_runtime()
    doc = rt.parse("a<br>b\n\n<div>\n<b>hi</b>\n</div>\n")

    assert doc.blocks[0].text == "a\nb"
    assert doc.blocks[1].children[0].text.strip() == "hi"


def test_unknown_inline_html_stays_literal():
    """Test that both tags of an unknown inline element stay as text."""
    doc = build_runtime().parse("x <foo>y</foo>\n")

    assert doc.blocks[0].text == "x <foo>y</foo>"


def test_yaml_code_block_with_runtime():
    """Test that a YAML fence is highlighted without failing the parse."""
    doc = build_runtime().parse("```yaml\nkey: value\nlist: [1, 2]\n```\n")

    block = doc.blocks[0]
    assert isinstance(block, CodeBlock)
    assert block.code == "key: value\nlist: [1, 2]"
    assert block.highlights


def test_parser_failure_is_fatal():
    """Test that a failing grammar parser surfaces one descriptive error."""

    class Broken:
        def parse(self, source, env):
            raise RuntimeError("boom")

    with pytest.raises(MarkdownParseError, match="boom"):
        MarkdownItParser(md=Broken()).parse("x")


def test_root_position():
    """Test that the root covers the whole source."""
    root = MarkdownItParser().parse("abc")
    assert root.position == ast.Position(0, 3)
