"""sysreview import — Ingest a BibTeX or RIS file into a systematic study."""
from __future__ import annotations

from pathlib import Path
from uuid import UUID

import structlog
import typer

from sysreview.cli._common import (
    fail,
    load_cli_config,
    open_repository,
    open_session_repository,
)
from sysreview.core.exceptions import NotFoundError, UnsupportedFormatError
from sysreview.core.ids import IdAllocator
from sysreview.io.readers import read_text, splitter_for
from sysreview.review.services import SearchSessionService, StudyIngestionService

logger = structlog.get_logger(__name__)

import_app = typer.Typer(help="Import studies from a .bib or .ris file.")


@import_app.callback(invoke_without_command=True)
def import_studies(
    ctx: typer.Context,  # noqa: ARG001
    input: Path = typer.Option(..., "--input", "-i", help="Input file (BibTeX/RIS)"),  # noqa: A002, B008
    review: UUID = typer.Option(..., "--review", "-r", help="Systematic study id"),  # noqa: B008
    source: str | None = typer.Option(  # noqa: B008
        None, "--source", "-s", help="Search source label (default: file name)",
    ),
    search_string: str = typer.Option(  # noqa: B008
        "", "--search-string", "-q", help="Query that produced the file",
    ),
    info: str | None = typer.Option(None, "--info", help="Notes on the search session"),  # noqa: B008
    session_id: UUID | None = typer.Option(  # noqa: B008
        None, "--session", help="Existing search session to import into",
    ),
    store: Path | None = typer.Option(None, "--store", help="Study store directory"),  # noqa: B008
    config: Path | None = typer.Option(None, "--config", help="sysreview.yaml config file"),  # noqa: B008
) -> None:
    """Convert every entry of a file into a new study review, or none at all."""
    cfg = load_cli_config(config)
    try:
        splitter = splitter_for(input)
        text = read_text(input)
    except (UnsupportedFormatError, FileNotFoundError) as exc:
        raise fail(exc) from exc

    sessions = open_session_repository(cfg, store)
    session = None
    if session_id is not None:
        try:
            session = SearchSessionService(sessions).find(review, session_id)
        except NotFoundError as exc:
            raise fail(exc) from exc

    session_source = session.source if session is not None else None
    label = source or session_source or cfg.default_search_source or input.stem
    service = StudyIngestionService(open_repository(cfg, store), IdAllocator(), sessions)
    result = service.ingest(
        review,
        text,
        label,
        splitter=splitter,
        session=session,
        search_string=search_string,
        additional_info=info,
    )

    if not result.ok:
        for error in result.errors:
            key = f" [{error.citation_key}]" if error.citation_key else ""
            typer.echo(f"Error{key}: {error.message}", err=True)
        typer.echo("[import] No studies were imported.", err=True)
        raise typer.Exit(code=1)

    ids = [s.study_id for s in result.studies]
    typer.echo(f"[import] Imported {len(ids)} studies from {input} (source: {label})")
    if ids:
        typer.echo(f"  Study ids: {ids[0]}..{ids[-1]}")
    if result.search_session_id is not None:
        typer.echo(f"  Search session: {result.search_session_id}")
