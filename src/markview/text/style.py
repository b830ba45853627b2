"""Style values used when painting rendered text."""

from dataclasses import dataclass, field, fields, replace
from typing import Callable

# Heading size multipliers relative to the base font size, by level.
HEADING_SCALE = {1: 2.0, 2: 1.5, 3: 1.25, 4: 1.0, 5: 0.875, 6: 0.85}


@dataclass(frozen=True)
class HighlightStyle:
    """A partial style layered on top of a base text style.

    Unset fields (None) leave the underlying value alone.
    """
    color: str | None = None
    background_color: str | None = None
    bold: bool | None = None
    italic: bool | None = None
    underline: bool | None = None
    strikethrough: bool | None = None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def merge(self, other: "HighlightStyle") -> "HighlightStyle":
        """Compose two highlights; fields set on `other` win."""
        changes = {
            f.name: getattr(other, f.name)
            for f in fields(other)
            if getattr(other, f.name) is not None
        }
        return replace(self, **changes)


@dataclass(frozen=True)
class TextStyle:
    """Fully resolved style of a run of text."""
    font_family: str = "sans-serif"
    font_size: float = 14.0
    color: str = "#1f2328"
    background_color: str | None = None
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False

    def highlight(self, style: HighlightStyle) -> "TextStyle":
        changes = {
            f.name: getattr(style, f.name)
            for f in fields(style)
            if getattr(style, f.name) is not None
        }
        return replace(self, **changes)


@dataclass(frozen=True)
class HighlightTheme:
    """Syntax highlight theme, named after a Pygments style."""
    name: str = "default"
    is_dark: bool = False

    @classmethod
    def default_light(cls) -> "HighlightTheme":
        return cls("default", is_dark=False)

    @classmethod
    def default_dark(cls) -> "HighlightTheme":
        return cls("monokai", is_dark=True)


@dataclass(frozen=True)
class InlineCodeStyle:
    """Overrides applied to inline code spans."""
    font_family: str | None = None
    font_size: float | None = None
    text_color: str | None = None
    background_color: str | None = None
    border_color: str | None = None
    border_width: float = 0.0
    border_radius: float = 0.0
    padding_x: float = 0.0
    padding_y: float = 0.0

    def is_enabled(self) -> bool:
        return (
            self.font_family is not None
            or self.font_size is not None
            or self.text_color is not None
            or self.background_color is not None
            or self.border_color is not None
            or self.border_width != 0
            or self.border_radius != 0
            or self.padding_x != 0
            or self.padding_y != 0
        )

    def apply(self, style: TextStyle) -> TextStyle:
        """Apply the font and color overrides to a run style."""
        changes: dict = {}
        if self.font_family is not None:
            changes["font_family"] = self.font_family
        if self.font_size is not None:
            changes["font_size"] = self.font_size
        if self.text_color is not None:
            changes["color"] = self.text_color
        return replace(style, **changes) if changes else style


@dataclass(frozen=True)
class CodeTokenLinks:
    """Linkification settings for tokens inside inline code."""
    enabled: bool = False
    workspace_id: str | None = None

    @classmethod
    def enable(cls, workspace_id: str | None = None) -> "CodeTokenLinks":
        return cls(enabled=True, workspace_id=workspace_id)


@dataclass
class TextViewStyle:
    """Style options for rendering a parsed document."""
    # Gap between paragraphs, in rem.
    paragraph_gap: float = 1.0
    heading_base_font_size: float = 14.0
    # (level, base size) -> size
    heading_font_size: Callable[[int, float], float] | None = None
    highlight_theme: HighlightTheme = field(default_factory=HighlightTheme.default_light)
    inline_code: InlineCodeStyle = field(default_factory=InlineCodeStyle)
    code_token_links: CodeTokenLinks = field(default_factory=CodeTokenLinks)
    link_color: str = "#0969da"
    is_dark: bool = False

    def heading_size(self, level: int) -> float:
        level = min(max(level, 1), 6)
        if self.heading_font_size is not None:
            return self.heading_font_size(level, self.heading_base_font_size)
        return self.heading_base_font_size * HEADING_SCALE[level]
