"""Tests for converting embedded HTML into blocks."""

import pytest

from markview.adapters.html_parser import HtmlBlockParser
from markview.core.errors import HtmlParseError
from markview.core.model import (
    Blockquote,
    Break,
    CodeBlock,
    Divider,
    Heading,
    LinkMark,
    ListBlock,
    ListItem,
    Paragraph,
    Range,
    TextMark,
)


def parse(fragment):
    return HtmlBlockParser().parse(fragment).blocks


def test_single_br_is_a_break():
    """Test that a lone <br> is one break block."""
    for fragment in ("<br>", "<br/>", "<br />"):
        blocks = parse(fragment)
        assert len(blocks) == 1
        assert blocks[0] == Break(html=True)
        assert blocks[0].is_break()


def test_paragraph_with_marks():
    """Test inline formatting inside a paragraph."""
    blocks = parse("<p>plain <b>bold</b> and <em>it</em></p>")

    assert len(blocks) == 1
    paragraph = blocks[0]
    assert isinstance(paragraph, Paragraph)
    assert paragraph.text == "plain bold and it"
    assert paragraph.children[1].marks == [(Range(0, 4), TextMark(bold=True))]
    assert paragraph.children[3].marks == [(Range(0, 2), TextMark(italic=True))]


def test_br_inside_paragraph():
    """Test that <br> inside text is a newline."""
    blocks = parse("<p>a<br>b</p>")
    assert blocks[0].text == "a\nb"


def test_link_and_image():
    """Test that anchors mark text and images carry the link."""
    blocks = parse('<a href="https://e.x" title="E">go <img src="i.png" alt="i"></a>')

    paragraph = blocks[0]
    link = LinkMark(url="https://e.x", title="E")
    assert paragraph.children[0].marks == [(Range(0, 3), TextMark(link=link))]
    image = paragraph.images()[0]
    assert image.url == "i.png"
    assert image.alt == "i"
    assert image.link == link


def test_headings_and_divider():
    """Test headings and horizontal rules."""
    blocks = parse("<h2>Title</h2><hr><p>body</p>")

    assert isinstance(blocks[0], Heading)
    assert blocks[0].level == 2
    assert blocks[0].children.text == "Title"
    assert isinstance(blocks[1], Divider)
    assert blocks[2].text == "body"


def test_pre_is_code():
    """Test that preformatted text becomes a code block."""
    blocks = parse("<pre>x  = 1\n  y</pre>")
    assert blocks == [CodeBlock(code="x  = 1\n  y")]


def test_lists_and_quotes():
    """Test container elements."""
    blocks = parse("<blockquote><p>q</p></blockquote><ul><li>one</li><li>two</li></ul>")

    quote = blocks[0]
    assert isinstance(quote, Blockquote)
    assert quote.children[0].text == "q"

    lst = blocks[1]
    assert isinstance(lst, ListBlock)
    assert lst.ordered is False
    assert [type(c) for c in lst.children] == [ListItem, ListItem]
    assert [c.children[0].text for c in lst.children] == ["one", "two"]


def test_unclosed_and_stray_tags():
    """Test that unclosed tags close at the end and stray end tags are ignored."""
    blocks = parse("</span><ol><li>open")

    lst = blocks[0]
    assert isinstance(lst, ListBlock)
    assert lst.ordered is True
    assert lst.children[0].children[0].text == "open"


def test_whitespace_collapsed():
    """Test that runs of whitespace collapse to one space."""
    blocks = parse("<p>  a \n\n  b  </p>")
    assert blocks[0].text.strip() == "a b"


def test_unsupported_tag_raises():
    """Test that unknown elements are reported as errors."""
    with pytest.raises(HtmlParseError):
        parse("<blink>x</blink>")


def test_comment_ignored():
    """Test that comments produce nothing."""
    assert parse("<!-- note -->") == []


def test_unsupported_end_tag_raises():
    """Test that an unknown closing tag is an error like its opening tag."""
    with pytest.raises(HtmlParseError):
        parse("</foo>")
    with pytest.raises(HtmlParseError):
        parse("<p>a</foo></p>")
