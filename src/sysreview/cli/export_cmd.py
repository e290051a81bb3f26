"""sysreview export — Export study reviews in various formats."""
from __future__ import annotations

from pathlib import Path
from uuid import UUID

import typer

from sysreview.cli._common import fail, load_cli_config, open_repository
from sysreview.core.exceptions import UnsupportedFormatError
from sysreview.io.writers import write_studies
from sysreview.review.services import StudyReviewService

export_app = typer.Typer(help="Export study reviews as JSON, CSV or RIS.")


@export_app.callback(invoke_without_command=True)
def export(
    ctx: typer.Context,  # noqa: ARG001
    review: UUID = typer.Option(..., "--review", "-r", help="Systematic study id"),  # noqa: B008
    output: Path = typer.Option(..., "--output", "-o", help="Output file"),  # noqa: B008
    format_type: str | None = typer.Option(  # noqa: B008
        None, "--format", "-f", help="json, csv or ris (default: from extension)",
    ),
    source: str | None = typer.Option(None, "--source", "-s", help="Only this search source"),  # noqa: B008
    store: Path | None = typer.Option(None, "--store", help="Study store directory"),  # noqa: B008
    config: Path | None = typer.Option(None, "--config", help="sysreview.yaml config file"),  # noqa: B008
) -> None:
    """Write the study reviews of a systematic study to a file."""
    cfg = load_cli_config(config)
    service = StudyReviewService(open_repository(cfg, store))
    studies = (
        service.find_all_by_source(review, source)
        if source is not None
        else service.find_all(review)
    )
    try:
        path = write_studies(studies, output, format_type.lower() if format_type else None)
    except UnsupportedFormatError as exc:
        raise fail(exc) from exc
    typer.echo(f"[export] Wrote {len(studies)} studies to {path}")
