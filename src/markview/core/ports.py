from dataclasses import dataclass, field
from typing import Any, Protocol

from ..text.style import HighlightStyle, HighlightTheme
from .ast import Root
from .model import BlockNode, Range


class GrammarParser(Protocol):
    """
    Parse Markdown source into a syntax tree. Raises MarkdownParseError on failure.
    """

    def parse(self, source: str) -> Root:
        pass


@dataclass
class HtmlFragment:
    blocks: list[BlockNode] = field(default_factory=list)


class HtmlFragmentParser(Protocol):
    """
    Convert an embedded HTML fragment into blocks. Raises HtmlParseError on failure.
    """

    def parse(self, fragment: str) -> HtmlFragment:
        pass


class Highlighter(Protocol):
    """
    Produce sorted, non-overlapping style ranges for a piece of code.
    """

    def highlight(
        self, code: str, language: str | None, theme: HighlightTheme
    ) -> list[tuple[Range, HighlightStyle]]:
        pass


class FrontmatterCodec(Protocol):
    """
    Decode the body of a front matter block into a mapping.
    """

    def decode(self, text: str) -> dict[str, Any]:
        pass
