"""File discovery and the DFM-enabled MarkdownIt factory"""

from pathlib import Path

from markdown_it import MarkdownIt

from dfmark.core.render import DfmRenderer
from dfmark.core.syntax.plugin import dfm_plugin


MD_EXTENSIONS = {'.md', '.markdown'}


def make_parser(preset: str = 'gfm-like', lang_prefix: str = 'lang-') -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset with DFM rules and renderer."""
    md = MarkdownIt(
        preset,
        options_update={"linkify": False, "langPrefix": lang_prefix},
        renderer_cls=DfmRenderer,
    )
    return md.use(dfm_plugin)


def discover_files(path: Path) -> list[Path]:
    """Return sorted markdown files under path, or [path] if a single markdown file."""
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.suffix in MD_EXTENSIONS and p.is_file())
