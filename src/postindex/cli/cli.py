"""CLI entrypoint: Typer app definition and command registration"""

import typer

from postindex.cli.commands import build_cmd, check_cmd, init_cmd, list_cmd, publish_cmd, tags_cmd


app = typer.Typer(name="postindex", no_args_is_help=True, help="Markdown blog post ingestion and indexing pipeline")

app.command(name="build")(build_cmd)
app.command(name="check")(check_cmd)
app.command(name="publish")(publish_cmd)
app.command(name="list")(list_cmd)
app.command(name="tags")(tags_cmd)
app.command(name="init")(init_cmd)
