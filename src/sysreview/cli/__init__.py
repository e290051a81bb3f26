"""sysreview CLI — Typer application."""
from __future__ import annotations

import typer

from sysreview.cli.answer_cmd import answer_app
from sysreview.cli.duplicate_cmd import duplicate_app
from sysreview.cli.export_cmd import export_app
from sysreview.cli.import_cmd import import_app
from sysreview.cli.list_cmd import list_app
from sysreview.cli.sessions_cmd import sessions_app
from sysreview.cli.status_cmd import status_app

app = typer.Typer(
    name="sysreview",
    help="sysreview: systematic literature review study management.",
    add_completion=False,
    no_args_is_help=True,
)

app.add_typer(import_app, name="import")
app.add_typer(list_app, name="list")
app.add_typer(sessions_app, name="sessions")
app.add_typer(status_app, name="status")
app.add_typer(duplicate_app, name="duplicate")
app.add_typer(answer_app, name="answer")
app.add_typer(export_app, name="export")


@app.command()
def version() -> None:
    """Print the installed sysreview version."""
    from sysreview import __version__  # noqa: PLC0415

    typer.echo(f"sysreview {__version__}")
