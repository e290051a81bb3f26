"""sysreview duplicate — Mark a study as duplicate of another."""
from __future__ import annotations

from pathlib import Path
from uuid import UUID

import typer

from sysreview.cli._common import fail, load_cli_config, open_repository
from sysreview.core.exceptions import SysReviewError
from sysreview.review.services import StudyReviewService

duplicate_app = typer.Typer(help="Mark a study as duplicate of another.")


@duplicate_app.callback(invoke_without_command=True)
def duplicate(
    ctx: typer.Context,  # noqa: ARG001
    review: UUID = typer.Option(..., "--review", "-r", help="Systematic study id"),  # noqa: B008
    target: int = typer.Option(..., "--target", "-t", help="Study id that is kept"),  # noqa: B008
    duplicate_of: int = typer.Option(  # noqa: B008
        ..., "--duplicate", "-d", help="Study id marked as duplicated",
    ),
    store: Path | None = typer.Option(None, "--store", help="Study store directory"),  # noqa: B008
    config: Path | None = typer.Option(None, "--config", help="sysreview.yaml config file"),  # noqa: B008
) -> None:
    """Mark ``--duplicate`` DUPLICATED and merge its search sources into ``--target``."""
    cfg = load_cli_config(config)
    service = StudyReviewService(open_repository(cfg, store))
    try:
        result = service.mark_as_duplicated(review, target, duplicate_of)
    except SysReviewError as exc:
        raise fail(exc) from exc

    typer.echo(
        f"[duplicate] Study {result.duplicated_study_id} marked as duplicate "
        f"of study {result.updated_study_id}"
    )
