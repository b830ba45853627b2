"""Configuration loader for markview.toml."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .text.style import (
    CodeTokenLinks,
    HighlightTheme,
    InlineCodeStyle,
    TextViewStyle,
)

CONFIG_FILENAME = "markview.toml"


@dataclass
class LinksConfig:
    """Linkification of tokens inside inline code."""
    enabled: bool = True
    workspace_id: str | None = None


@dataclass
class HighlightConfig:
    """Syntax highlighting themes (Pygments style names)."""
    theme: str = "default"
    dark_theme: str = "monokai"
    dark: bool = False

    def active_theme(self) -> HighlightTheme:
        if self.dark:
            return HighlightTheme(self.dark_theme, is_dark=True)
        return HighlightTheme(self.theme, is_dark=False)


@dataclass
class InlineCodeConfig:
    """Inline code span appearance."""
    font_family: str | None = None
    font_size: float | None = None
    text_color: str | None = None
    background_color: str | None = None
    border_color: str | None = None
    border_width: float = 0.0
    border_radius: float = 0.0
    padding_x: float = 0.0
    padding_y: float = 0.0


@dataclass
class TextConfig:
    """Paragraph layout."""
    paragraph_gap: float = 1.0
    heading_base_font_size: float = 14.0


@dataclass
class MarkviewConfig:
    """Complete markview configuration."""
    links: LinksConfig = field(default_factory=LinksConfig)
    highlight: HighlightConfig = field(default_factory=HighlightConfig)
    inline_code: InlineCodeConfig = field(default_factory=InlineCodeConfig)
    text: TextConfig = field(default_factory=TextConfig)
    path: Path | None = None  # file the settings were read from

    def code_token_links(self) -> CodeTokenLinks:
        if not self.links.enabled:
            return CodeTokenLinks()
        return CodeTokenLinks.enable(self.links.workspace_id)

    def to_style(self) -> TextViewStyle:
        """Build the text view style described by this configuration."""
        ic = self.inline_code
        return TextViewStyle(
            paragraph_gap=self.text.paragraph_gap,
            heading_base_font_size=self.text.heading_base_font_size,
            highlight_theme=self.highlight.active_theme(),
            inline_code=InlineCodeStyle(
                font_family=ic.font_family,
                font_size=ic.font_size,
                text_color=ic.text_color,
                background_color=ic.background_color,
                border_color=ic.border_color,
                border_width=ic.border_width,
                border_radius=ic.border_radius,
                padding_x=ic.padding_x,
                padding_y=ic.padding_y,
            ),
            code_token_links=self.code_token_links(),
            is_dark=self.highlight.dark,
        )


def _float(value: Any) -> float | None:
    return None if value is None else float(value)


def load_config(config_path: Path | None = None, root_path: Path | None = None) -> MarkviewConfig:
    """
    Load configuration from markview.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/markview.toml
    3. root_path/markview.toml

    Args:
        config_path: Explicit path to config file
        root_path: Project root for fallback search

    Returns:
        MarkviewConfig with resolved settings
    """
    toml_data: dict[str, Any] = {}
    found: Path | None = None

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_FILENAME)
    if root_path:
        search_paths.append(root_path / CONFIG_FILENAME)

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            found = path
            break

    links_data = toml_data.get("links", {})
    links_config = LinksConfig(
        enabled=links_data.get("enabled", True),
        workspace_id=links_data.get("workspace_id") or None,
    )

    highlight_data = toml_data.get("highlight", {})
    highlight_config = HighlightConfig(
        theme=highlight_data.get("theme", "default"),
        dark_theme=highlight_data.get("dark_theme", "monokai"),
        dark=highlight_data.get("dark", False),
    )

    ic_data = toml_data.get("inline_code", {})
    inline_code_config = InlineCodeConfig(
        font_family=ic_data.get("font_family"),
        font_size=_float(ic_data.get("font_size")),
        text_color=ic_data.get("text_color"),
        background_color=ic_data.get("background_color"),
        border_color=ic_data.get("border_color"),
        border_width=float(ic_data.get("border_width", 0.0)),
        border_radius=float(ic_data.get("border_radius", 0.0)),
        padding_x=float(ic_data.get("padding_x", 0.0)),
        padding_y=float(ic_data.get("padding_y", 0.0)),
    )

    text_data = toml_data.get("text", {})
    text_config = TextConfig(
        paragraph_gap=float(text_data.get("paragraph_gap", 1.0)),
        heading_base_font_size=float(text_data.get("heading_base_font_size", 14.0)),
    )

    return MarkviewConfig(
        links=links_config,
        highlight=highlight_config,
        inline_code=inline_code_config,
        text=text_config,
        path=found,
    )
