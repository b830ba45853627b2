"""Concrete parsers, highlighter and front-matter codec."""

from .highlighter import PygmentsHighlighter
from .html_parser import HtmlBlockParser
from .markdown_parser import MarkdownItParser
from .yaml_codec import YamlFrontmatter

__all__ = [
    "MarkdownItParser",
    "HtmlBlockParser",
    "PygmentsHighlighter",
    "YamlFrontmatter",
]
