"""Runtime wiring helper for CLI and API applications."""

from dataclasses import dataclass, replace
from pathlib import Path

from .adapters.highlighter import PygmentsHighlighter
from .adapters.html_parser import HtmlBlockParser
from .adapters.markdown_parser import MarkdownItParser
from .adapters.yaml_codec import YamlFrontmatter
from .config import MarkviewConfig, load_config
from .core.builder import DocumentBuilder, parse_markdown
from .core.model import ParsedDocument
from .core.ports import GrammarParser
from .text.style import TextViewStyle


@dataclass
class Runtime:
    """Container for all wired components."""
    parser: GrammarParser
    builder: DocumentBuilder
    style: TextViewStyle
    config: MarkviewConfig

    def parse(self, source: str, offset: int = 0) -> ParsedDocument:
        return parse_markdown(source, self.parser, self.builder, offset=offset)


def build_runtime(
    config_path: Path | None = None,
    root_path: Path | None = None,
    workspace_id: str | None = None,
    links_enabled: bool | None = None,
) -> Runtime:
    """Build and wire all components, CLI overrides taking precedence."""
    config = load_config(config_path=config_path, root_path=root_path)

    if workspace_id is not None:
        config.links = replace(config.links, workspace_id=workspace_id)
    if links_enabled is not None:
        config.links = replace(config.links, enabled=links_enabled)

    style = config.to_style()
    builder = DocumentBuilder(
        links=style.code_token_links,
        theme=style.highlight_theme,
        highlighter=PygmentsHighlighter(),
        html=HtmlBlockParser(),
        frontmatter=YamlFrontmatter(),
    )

    return Runtime(
        parser=MarkdownItParser(),
        builder=builder,
        style=style,
        config=config,
    )
