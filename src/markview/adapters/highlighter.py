import logging

from pygments import lex
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.style import StyleMeta
from pygments.styles import get_style_by_name
from pygments.token import _TokenType
from pygments.util import ClassNotFound

from ..core.model import Range
from ..core.ports import Highlighter
from ..text.style import HighlightStyle, HighlightTheme

logger = logging.getLogger(__name__)

# Languages that have no lexer of their own name.
LANGUAGE_ALIASES = {"yml": "yaml", "mdx": "javascript"}


class PygmentsHighlighter(Highlighter):
    """Highlight code with Pygments lexers and styles."""

    def __init__(self) -> None:
        self._lexers: dict[str, Lexer] = {}
        self._styles: dict[str, StyleMeta] = {}
        self._formats: dict[tuple[str, _TokenType], HighlightStyle] = {}

    def lexer_for(self, language: str | None) -> Lexer:
        key = (language or "").strip().lower()
        key = LANGUAGE_ALIASES.get(key, key)
        lexer = self._lexers.get(key)
        if lexer is not None:
            return lexer
        try:
            if not key:
                raise ClassNotFound("no language")
            lexer = get_lexer_by_name(key, stripnl=False, ensurenl=False)
        except ClassNotFound:
            if key:
                logger.debug("no lexer for %s, using plain text", key)
            lexer = TextLexer(stripnl=False, ensurenl=False)
        self._lexers[key] = lexer
        return lexer

    def style_for(self, theme: HighlightTheme) -> StyleMeta:
        style = self._styles.get(theme.name)
        if style is None:
            try:
                style = get_style_by_name(theme.name)
            except ClassNotFound:
                logger.debug("unknown pygments style %s, using default", theme.name)
                style = get_style_by_name("default")
            self._styles[theme.name] = style
        return style

    def format_for(self, theme: HighlightTheme, token_type: _TokenType) -> HighlightStyle:
        key = (theme.name, token_type)
        fmt = self._formats.get(key)
        if fmt is not None:
            return fmt
        style = self.style_for(theme)
        # Lexers emit subtypes the style has no entry for.
        while not style.styles_token(token_type) and token_type.parent is not None:
            token_type = token_type.parent
        token_style = style.style_for_token(token_type)
        fmt = HighlightStyle(
            color=f"#{token_style['color']}" if token_style.get("color") else None,
            background_color=f"#{token_style['bgcolor']}" if token_style.get("bgcolor") else None,
            bold=True if token_style.get("bold") else None,
            italic=True if token_style.get("italic") else None,
            underline=True if token_style.get("underline") else None,
        )
        self._formats[key] = fmt
        return fmt

    def highlight(
        self, code: str, language: str | None, theme: HighlightTheme
    ) -> list[tuple[Range, HighlightStyle]]:
        if not code:
            return []
        lexer = self.lexer_for(language)
        if isinstance(lexer, TextLexer):
            return []

        out: list[tuple[Range, HighlightStyle]] = []
        offset = 0
        for token_type, value in lex(code, lexer):
            start, end = offset, min(offset + len(value), len(code))
            offset += len(value)
            if start >= end:
                continue
            fmt = self.format_for(theme, token_type)
            if fmt.is_empty():
                continue
            if out and out[-1][0].end == start and out[-1][1] == fmt:
                out[-1] = (Range(out[-1][0].start, end), fmt)
            else:
                out.append((Range(start, end), fmt))
        return out
