"""CLI command implementations"""

from pathlib import Path
from typing import Annotated, Optional

import typer

from dfmark.config import Settings, load_config
from dfmark.core.parse import make_parser
from dfmark.core.pipeline import render_file, run_render
from dfmark.log import configure_logging


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling and set up logging."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    configure_logging(settings.log_level)
    return settings


def render_cmd(
    path: Annotated[str, typer.Argument(help="File or directory to render")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    root: Annotated[Optional[str], typer.Option("--root", help="Root folder for include and code paths")] = None,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    log_level: Annotated[Optional[str], typer.Option("--log-level", help="Log level for stderr")] = None,
    ):
    """Render markdown files to HTML, resolving includes, code snippets, and xrefs."""
    settings = _settings(overrides={
        "output_dir": out, "root_dir": root, "parser_config": parser, "log_level": log_level,
    })
    output_dir = Path(settings.output_dir)
    results, failures = run_render(
        path, Path(settings.root_dir), output_dir,
        settings.parser_config, settings.lang_prefix, settings.encoding,
    )
    for src, out_file in results:
        typer.echo(f"  {src} -> {out_file}")
    typer.echo(f"Rendered {len(results)} document(s) to {output_dir}/")
    if failures:
        for src, reason in failures:
            typer.echo(f"Error: Failed to render {src}: {reason}", err=True)
        raise typer.Exit(1)


def deps_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file to inspect")],
    root: Annotated[Optional[str], typer.Option("--root", help="Root folder for include and code paths")] = None,
    ):
    """List every file a document includes or pulls code from."""
    settings = _settings(overrides={"root_dir": root})
    md = make_parser(settings.parser_config, settings.lang_prefix)
    try:
        doc = render_file(Path(path), Path(settings.root_dir), md, settings.encoding)
    except (OSError, ValueError) as e:
        _fail(f"Could not render {path}", e)
    if not doc.dependencies:
        typer.echo(f"{doc.path} has no dependencies.")
        return
    for dep in doc.dependencies:
        typer.echo(dep)
