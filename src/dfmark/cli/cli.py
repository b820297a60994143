"""CLI entrypoint: Typer app definition and command registration"""

import typer

from dfmark.cli.commands import deps_cmd, render_cmd


app = typer.Typer(name="dfmark", no_args_is_help=True, help="Render DocFX flavored markdown to HTML")

app.command(name="render")(render_cmd)
app.command(name="deps")(deps_cmd)
