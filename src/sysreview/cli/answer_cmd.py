"""sysreview answer — Apply a batch of answers to one study review."""
from __future__ import annotations

from pathlib import Path
from uuid import UUID

import structlog
import typer
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from sysreview.cli._common import fail, load_cli_config, open_repository
from sysreview.core.exceptions import SysReviewError
from sysreview.questions.form_schema import load_question_form
from sysreview.review.batch import AnswerDetail
from sysreview.review.repository import InMemoryQuestionRepository
from sysreview.review.services import StudyReviewService

logger = structlog.get_logger(__name__)

answer_app = typer.Typer(help="Answer extraction and risk-of-bias questions for a study.")

_DETAILS_ADAPTER = TypeAdapter(list[AnswerDetail])


@answer_app.callback(invoke_without_command=True)
def answer(
    ctx: typer.Context,  # noqa: ARG001
    review: UUID = typer.Option(..., "--review", "-r", help="Systematic study id"),  # noqa: B008
    study: int = typer.Option(..., "--study", help="Study id"),  # noqa: B008
    answers: Path = typer.Option(  # noqa: B008
        ..., "--answers", "-a", help="JSON list of {questionId, type, answer}",
    ),
    questions: Path | None = typer.Option(  # noqa: B008
        None, "--questions", "-q", help="YAML question form (default: from config)",
    ),
    store: Path | None = typer.Option(None, "--store", help="Study store directory"),  # noqa: B008
    config: Path | None = typer.Option(None, "--config", help="sysreview.yaml config file"),  # noqa: B008
) -> None:
    """Apply every answer it can; rejected answers are reported, not fatal."""
    cfg = load_cli_config(config)
    form_path = questions or cfg.questions_file
    if form_path is None:
        typer.echo("Error: --questions is required when no questions_file is configured.", err=True)
        raise typer.Exit(code=1)
    if not answers.exists():
        raise typer.BadParameter(f"Answers file not found: {answers}")

    try:
        details = _DETAILS_ADAPTER.validate_json(answers.read_text(encoding="utf-8"))
    except PydanticValidationError as exc:
        typer.echo(f"Error: invalid answers file {answers}: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    try:
        form = load_question_form(form_path, review)
        service = StudyReviewService(
            open_repository(cfg, store), InMemoryQuestionRepository(form.questions),
        )
        result = service.batch_answer(review, study, details)
    except (SysReviewError, FileNotFoundError) as exc:
        raise fail(exc) from exc

    typer.echo(
        f"[answer] Study {study}: {result.total_answered} answered, "
        f"{len(result.failed_answers)} rejected"
    )
    for failed in result.failed_answers:
        typer.echo(f"  {failed.question_id}: {failed.reason}")
    if result.failed_answers:
        logger.warning(
            "answers_rejected",
            study_id=study,
            n_rejected=len(result.failed_answers),
        )
