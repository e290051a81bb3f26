"""Shared pytest fixtures for sysreview tests."""
from __future__ import annotations

import os

# Prevent Rich/Typer from emitting ANSI escape codes in CLI output.
os.environ["NO_COLOR"] = "1"

from collections.abc import Callable
from pathlib import Path
from uuid import UUID, uuid4

import pytest

from sysreview.core.enums import QuestionContext, StudyType
from sysreview.core.ids import IdAllocator
from sysreview.questions.models import (
    LabeledScaleQuestion,
    NumberScaleQuestion,
    PickListQuestion,
    TextualQuestion,
)
from sysreview.review.repository import InMemoryQuestionRepository, InMemoryStudyReviewRepository
from sysreview.review.study_review import StudyReview

FIXTURES_DIR = Path(__file__).parent / "fixtures"

NASH_BIBTEX = """
@article{nash1951,
  title = {Non-cooperative Games},
  author = {Nash, John},
  year = {1951},
  journal = {Annals of Mathematics}
}
"""


@pytest.fixture
def review_id() -> UUID:
    """A fresh systematic study id."""
    return uuid4()


@pytest.fixture
def allocator() -> IdAllocator:
    """Id allocator starting at 1."""
    return IdAllocator()


@pytest.fixture
def all_types_bibtex() -> str:
    """One valid entry for each of the twelve reference types."""
    return (FIXTURES_DIR / "all_types.bib").read_text(encoding="utf-8")


def make_study(
    review_id: UUID,
    study_id: int = 1,
    sources: set[str] | None = None,
    **overrides: object,
) -> StudyReview:
    """Build a minimal StudyReview for aggregate and service tests."""
    data: dict[str, object] = {
        "systematic_study_id": review_id,
        "study_id": study_id,
        "study_type": StudyType.ARTICLE,
        "title": f"Study {study_id}",
        "authors": "Doe, Jane",
        "year": 2020,
        "venue": "Journal of Tests",
        "search_sources": sources if sources is not None else {"Scopus"},
    }
    data.update(overrides)
    return StudyReview(**data)  # type: ignore[arg-type]


@pytest.fixture
def study(review_id: UUID) -> StudyReview:
    """A freshly imported study review."""
    return make_study(review_id)


@pytest.fixture
def textual_question(review_id: UUID) -> TextualQuestion:
    return TextualQuestion(systematic_study_id=review_id, code="Q1", description="Main finding?")


@pytest.fixture
def pick_list_question(review_id: UUID) -> PickListQuestion:
    return PickListQuestion(
        systematic_study_id=review_id,
        code="Q2",
        description="Study design?",
        options=["RCT", "Cohort", "Case series"],
    )


@pytest.fixture
def number_scale_question(review_id: UUID) -> NumberScaleQuestion:
    return NumberScaleQuestion(
        systematic_study_id=review_id,
        code="Q3",
        description="Sample size, in hundreds?",
        lower=1,
        higher=10,
    )


@pytest.fixture
def labeled_scale_question(review_id: UUID) -> LabeledScaleQuestion:
    return LabeledScaleQuestion(
        systematic_study_id=review_id,
        code="RB1",
        description="Risk of bias from randomization",
        context=QuestionContext.ROB,
        scales={"Low": 1, "Some concerns": 2, "High": 3},
    )


@pytest.fixture
def question_repository(
    textual_question: TextualQuestion,
    pick_list_question: PickListQuestion,
    number_scale_question: NumberScaleQuestion,
    labeled_scale_question: LabeledScaleQuestion,
) -> InMemoryQuestionRepository:
    """Question store holding one question of each kind."""
    return InMemoryQuestionRepository(
        [textual_question, pick_list_question, number_scale_question, labeled_scale_question]
    )


@pytest.fixture
def study_repository() -> InMemoryStudyReviewRepository:
    return InMemoryStudyReviewRepository()


@pytest.fixture
def study_factory() -> Callable[..., StudyReview]:
    """Factory building extra study reviews: ``study_factory(review_id, study_id, sources)``."""
    return make_study


@pytest.fixture
def nash_bibtex() -> str:
    """A single valid @article entry."""
    return NASH_BIBTEX
