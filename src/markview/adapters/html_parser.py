"""Convert embedded HTML fragments into document blocks."""

import re
from html.parser import HTMLParser

from ..core.errors import HtmlParseError
from ..core.model import (
    BlockNode,
    Blockquote,
    Break,
    CodeBlock,
    Divider,
    Heading,
    ImageNode,
    InlineNode,
    LinkMark,
    ListBlock,
    ListItem,
    Paragraph,
    Range,
    TextMark,
)
from ..core.ports import HtmlFragment, HtmlFragmentParser

WHITESPACE_RE = re.compile(r"\s+")

INLINE_MARKS = {
    "b": TextMark(bold=True),
    "strong": TextMark(bold=True),
    "i": TextMark(italic=True),
    "em": TextMark(italic=True),
    "s": TextMark(strikethrough=True),
    "del": TextMark(strikethrough=True),
    "strike": TextMark(strikethrough=True),
    "code": TextMark(code=True),
    "kbd": TextMark(code=True),
    "u": TextMark(),
    "span": TextMark(),
    "sup": TextMark(),
    "sub": TextMark(),
}
HEADINGS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}
CONTAINERS = {"blockquote", "ul", "ol", "li"}
PARAGRAPHS = {"p", "div"}
VOID = {"br", "hr", "img"}
SUPPORTED = set(INLINE_MARKS) | set(HEADINGS) | CONTAINERS | PARAGRAPHS | VOID | {"a", "pre"}


class _FragmentBuilder(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.root: list[BlockNode] = []
        # (tag, blocks) for each open container, innermost last
        self.containers: list[tuple[str, list[BlockNode]]] = []
        self.marks: list[tuple[str, TextMark]] = []
        self.paragraph: Paragraph | None = None
        self.heading: int | None = None
        self.pre: list[str] | None = None

    @property
    def blocks(self) -> list[BlockNode]:
        return self.containers[-1][1] if self.containers else self.root

    def flush(self) -> None:
        paragraph, self.paragraph = self.paragraph, None
        if paragraph is None or not paragraph.children:
            self.heading = None
            return
        if self.heading is not None:
            self.blocks.append(Heading(level=self.heading, children=paragraph))
        else:
            self.blocks.append(paragraph)
        self.heading = None

    def current_mark(self) -> TextMark | None:
        if not self.marks:
            return None
        mark = TextMark()
        for _tag, m in self.marks:
            mark = mark.merge(m)
        return None if mark == TextMark() else mark

    def current_link(self) -> LinkMark | None:
        mark = self.current_mark()
        return mark.link if mark else None

    def ensure_paragraph(self) -> Paragraph:
        if self.paragraph is None:
            self.paragraph = Paragraph()
        return self.paragraph

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag not in SUPPORTED:
            raise HtmlParseError(f"unsupported tag <{tag}>")
        attr = {k: v or "" for k, v in attrs}

        if tag == "br":
            if self.paragraph is not None and self.paragraph.children:
                self.paragraph.push_str("\n")
            else:
                self.flush()
                self.blocks.append(Break(html=True))
        elif tag == "hr":
            self.flush()
            self.blocks.append(Divider())
        elif tag == "img":
            self.ensure_paragraph().push_image(
                ImageNode(
                    url=attr.get("src", ""),
                    title=attr.get("title") or None,
                    alt=attr.get("alt") or None,
                    link=self.current_link(),
                )
            )
        elif tag == "a":
            link = LinkMark(url=attr.get("href", ""), title=attr.get("title") or None)
            self.marks.append((tag, TextMark(link=link)))
        elif tag in INLINE_MARKS:
            self.marks.append((tag, INLINE_MARKS[tag]))
        elif tag in HEADINGS:
            self.flush()
            self.heading = HEADINGS[tag]
        elif tag in PARAGRAPHS:
            self.flush()
        elif tag == "pre":
            self.flush()
            self.pre = []
        elif tag in CONTAINERS:
            self.flush()
            self.containers.append((tag, []))

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self.handle_starttag(tag, attrs)
        if tag not in VOID:
            self.handle_endtag(tag)

    def handle_endtag(self, tag: str) -> None:
        if tag not in SUPPORTED:
            raise HtmlParseError(f"unsupported tag </{tag}>")
        if tag in VOID:
            return
        if tag in INLINE_MARKS or tag == "a":
            for i in range(len(self.marks) - 1, -1, -1):
                if self.marks[i][0] == tag:
                    del self.marks[i:]
                    break
        elif tag in HEADINGS or tag in PARAGRAPHS:
            self.flush()
        elif tag == "pre":
            if self.pre is not None:
                code = "".join(self.pre).strip("\n")
                self.pre = None
                self.blocks.append(CodeBlock(code=code))
        elif tag in CONTAINERS:
            if any(t == tag for t, _ in self.containers):
                self.flush()
                while self.containers:
                    open_tag, _ = self.containers[-1]
                    self.close_container()
                    if open_tag == tag:
                        break
        # Stray supported end tags are ignored.

    def close_container(self) -> None:
        tag, children = self.containers.pop()
        if tag == "blockquote":
            block: BlockNode = Blockquote(children=children)
        elif tag == "li":
            block = ListItem(children=children)
        else:
            block = ListBlock(ordered=tag == "ol", children=children)
        self.blocks.append(block)

    def handle_data(self, data: str) -> None:
        if self.pre is not None:
            self.pre.append(data)
            return
        text = WHITESPACE_RE.sub(" ", data)
        if not text.strip() and (self.paragraph is None or not self.paragraph.children):
            return
        paragraph = self.ensure_paragraph()
        if not paragraph.children:
            text = text.lstrip()
        mark = self.current_mark()
        if mark is None:
            paragraph.push_str(text)
        else:
            paragraph.push(InlineNode(text, [(Range(0, len(text)), mark)]))

    def finish(self) -> list[BlockNode]:
        self.close()
        if self.pre is not None:
            self.handle_endtag("pre")
        self.flush()
        while self.containers:
            self.close_container()
        return self.root


class HtmlBlockParser(HtmlFragmentParser):
    """HTML fragment collaborator built on the standard library parser."""

    def parse(self, fragment: str) -> HtmlFragment:
        builder = _FragmentBuilder()
        builder.feed(fragment)
        return HtmlFragment(blocks=builder.finish())
