"""Pipeline step functions: render documents and write HTML output"""

from pathlib import Path

from loguru import logger
from markdown_it import MarkdownIt

from dfmark.core.context import RenderContext, make_env
from dfmark.core.models import RenderedDoc
from dfmark.core.parse import discover_files, make_parser


def _relative_to(path: Path, root: Path) -> str:
    """Return path relative to root in POSIX form; raise ValueError if outside root."""
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        raise ValueError(f"{path} is not under the root folder {root}") from None


def render_text(text: str, path: str, root: Path, md: MarkdownIt, encoding: str = 'utf-8') -> RenderedDoc:
    """Render DFM text that lives at path (relative to root)."""
    context = RenderContext.for_file(root, path, encoding)
    env = make_env(context)
    html = md.render(text, env)
    return RenderedDoc(path=context.current_file, html=html, dependencies=sorted(context.dependencies))


def render_file(path: Path, root: Path, md: MarkdownIt, encoding: str = 'utf-8') -> RenderedDoc:
    """Read and render a single markdown file under root."""
    rel = _relative_to(path, root)
    text = path.read_text(encoding=encoding)
    return render_text(text, rel, root, md, encoding)


def run_render(
    path: str,
    root: Path,
    output_dir: Path,
    parser_config: str = 'gfm-like',
    lang_prefix: str = 'lang-',
    encoding: str = 'utf-8',
    ) -> tuple[list[tuple[Path, Path]], list[tuple[Path, str]]]:
    """Render every markdown file under path into output_dir.

    Returns (rendered, failed): (source, html_file) pairs, and (source, reason)
    pairs for documents that raised. A failed document does not stop the run.

    Output mirrors the source layout relative to root:
      output_dir / <relative path>.html
    """
    md = make_parser(parser_config, lang_prefix)
    results = []
    failures = []
    for p in discover_files(Path(path)):
        try:
            doc = render_file(p, root, md, encoding)
            out_file = output_dir / Path(doc.path).with_suffix('.html')
            out_file.parent.mkdir(parents=True, exist_ok=True)
            out_file.write_text(doc.html, encoding=encoding)
            logger.debug(f"Rendered {doc.path} ({len(doc.dependencies)} dependencies)")
            results.append((p, out_file))
        except (OSError, ValueError) as e:
            logger.error(f"Failed to render {p}: {e}")
            failures.append((p, str(e)))
    return results, failures
