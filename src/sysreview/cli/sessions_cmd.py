"""sysreview sessions — Show the search sessions of a systematic study."""
from __future__ import annotations

from pathlib import Path
from uuid import UUID

import typer
from rich.console import Console
from rich.table import Table

from sysreview.cli._common import load_cli_config, open_repository, open_session_repository
from sysreview.review.services import SearchSessionService, StudyReviewService

console = Console()

sessions_app = typer.Typer(help="List the search sessions of a systematic study.")


@sessions_app.callback(invoke_without_command=True)
def list_sessions(
    ctx: typer.Context,  # noqa: ARG001
    review: UUID = typer.Option(..., "--review", "-r", help="Systematic study id"),  # noqa: B008
    store: Path | None = typer.Option(None, "--store", help="Study store directory"),  # noqa: B008
    config: Path | None = typer.Option(None, "--config", help="sysreview.yaml config file"),  # noqa: B008
) -> None:
    """Print every search session with the number of studies it imported."""
    cfg = load_cli_config(config)
    sessions = SearchSessionService(open_session_repository(cfg, store)).find_all(review)
    if not sessions:
        console.print("[yellow]No search sessions found.[/yellow]")
        return

    studies = StudyReviewService(open_repository(cfg, store))
    table = Table(title=f"Search sessions of {review}", border_style="cyan")
    table.add_column("Session", style="bold yellow", no_wrap=True)
    table.add_column("Source", style="green")
    table.add_column("Search string", style="white")
    table.add_column("Created")
    table.add_column("Studies", justify="right")
    for session in sessions:
        table.add_row(
            str(session.session_id),
            session.source,
            session.search_string,
            session.timestamp.strftime("%Y-%m-%d %H:%M"),
            str(len(studies.find_all_by_session(review, session.session_id))),
        )
    console.print(table)
    console.print(f"[dim]{len(sessions)} sessions[/dim]")
