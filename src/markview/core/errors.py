"""Exceptions raised by markview."""


class MarkviewError(Exception):
    """Base class for markview errors."""


class MarkdownParseError(MarkviewError):
    """The grammar parser failed; no document is produced."""


class HtmlParseError(MarkviewError):
    """An embedded HTML fragment could not be converted into blocks."""
