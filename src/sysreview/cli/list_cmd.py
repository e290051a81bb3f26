"""sysreview list — Show the study reviews of a systematic study."""
from __future__ import annotations

from pathlib import Path
from uuid import UUID

import typer
from rich.console import Console
from rich.table import Table

from sysreview.cli._common import load_cli_config, open_repository
from sysreview.review.services import StudyReviewService

console = Console()

list_app = typer.Typer(help="List the studies of a systematic study.")


@list_app.callback(invoke_without_command=True)
def list_studies(
    ctx: typer.Context,  # noqa: ARG001
    review: UUID = typer.Option(..., "--review", "-r", help="Systematic study id"),  # noqa: B008
    source: str | None = typer.Option(None, "--source", "-s", help="Only this search source"),  # noqa: B008
    session: UUID | None = typer.Option(  # noqa: B008
        None, "--session", help="Only studies imported through this search session",
    ),
    store: Path | None = typer.Option(None, "--store", help="Study store directory"),  # noqa: B008
    config: Path | None = typer.Option(None, "--config", help="sysreview.yaml config file"),  # noqa: B008
) -> None:
    """Print a table of study reviews ordered by study id."""
    cfg = load_cli_config(config)
    service = StudyReviewService(open_repository(cfg, store))
    if session is not None:
        studies = service.find_all_by_session(review, session)
    elif source is not None:
        studies = service.find_all_by_source(review, source)
    else:
        studies = service.find_all(review)
    if not studies:
        console.print("[yellow]No studies found.[/yellow]")
        return

    table = Table(title=f"Studies of {review}", border_style="cyan")
    table.add_column("Id", style="bold yellow", justify="right")
    table.add_column("Type")
    table.add_column("Year", justify="right")
    table.add_column("Title", style="white")
    table.add_column("Selection", style="green")
    table.add_column("Extraction")
    table.add_column("Priority")
    table.add_column("Sources", style="dim")
    for study in studies:
        table.add_row(
            str(study.study_id),
            study.study_type.value,
            str(study.year),
            study.title,
            study.selection_status.value,
            study.extraction_status.value,
            study.reading_priority.value,
            ", ".join(sorted(study.search_sources)),
        )
    console.print(table)
    console.print(f"[dim]{len(studies)} studies[/dim]")
