"""sysreview status — Update selection, extraction or reading priority."""
from __future__ import annotations

from pathlib import Path
from uuid import UUID

import typer

from sysreview.cli._common import fail, load_cli_config, open_repository
from sysreview.core.exceptions import SysReviewError
from sysreview.review.services import StudyReviewService

status_app = typer.Typer(help="Update the status of a study review.")


@status_app.callback(invoke_without_command=True)
def update_status(
    ctx: typer.Context,  # noqa: ARG001
    review: UUID = typer.Option(..., "--review", "-r", help="Systematic study id"),  # noqa: B008
    study: int = typer.Option(..., "--study", help="Study id"),  # noqa: B008
    selection: str | None = typer.Option(None, "--selection", help="Selection status"),  # noqa: B008
    extraction: str | None = typer.Option(None, "--extraction", help="Extraction status"),  # noqa: B008
    priority: str | None = typer.Option(None, "--priority", help="Reading priority"),  # noqa: B008
    store: Path | None = typer.Option(None, "--store", help="Study store directory"),  # noqa: B008
    config: Path | None = typer.Option(None, "--config", help="sysreview.yaml config file"),  # noqa: B008
) -> None:
    """Set any of the three statuses of one study review."""
    if selection is None and extraction is None and priority is None:
        raise typer.BadParameter("Give at least one of --selection, --extraction, --priority")

    cfg = load_cli_config(config)
    service = StudyReviewService(open_repository(cfg, store))
    try:
        if selection is not None:
            service.update_selection_status(review, study, selection)
        if extraction is not None:
            service.update_extraction_status(review, study, extraction)
        if priority is not None:
            updated = service.update_reading_priority(review, study, priority)
        else:
            updated = service.find(review, study)
    except SysReviewError as exc:
        raise fail(exc) from exc

    typer.echo(
        f"[status] Study {study}: selection={updated.selection_status.value} "
        f"extraction={updated.extraction_status.value} "
        f"priority={updated.reading_priority.value}"
    )
