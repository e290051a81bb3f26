"""StudyReview aggregate: one study's screening and extraction state.

The three status axes (selection, extraction, reading priority) are
independent; any value may replace any other at any time because
screening decisions can be revised throughout the review.
"""
from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum
from typing import TypeVar
from uuid import UUID

from pydantic import Field

from sysreview.core.enums import (
    ExtractionStatus,
    QuestionContext,
    ReadingPriority,
    SelectionStatus,
)
from sysreview.core.exceptions import AnswerTypeMismatchError, InvalidStatusError
from sysreview.core.models import StudyRecord
from sysreview.questions.models import Answer, Question
from sysreview.questions.validation import validate_answer

_E = TypeVar("_E", bound=StrEnum)


class StudyReview(StudyRecord):
    """A study record plus everything reviewers decide about it.

    Attributes:
        selection_status: Screening-phase classification.
        extraction_status: Extraction-phase classification.
        reading_priority: How urgently the study should be read.
        criteria: Eligibility criteria descriptions behind the last decision.
        form_answers: Extraction form answers keyed by question id.
        rob_answers: Quality-assessment answers keyed by question id.
    """

    selection_status: SelectionStatus = SelectionStatus.UNCLASSIFIED
    extraction_status: ExtractionStatus = ExtractionStatus.UNCLASSIFIED
    reading_priority: ReadingPriority = ReadingPriority.LOW
    criteria: set[str] = Field(default_factory=set)
    form_answers: dict[UUID, Answer] = Field(default_factory=dict)
    rob_answers: dict[UUID, Answer] = Field(default_factory=dict)

    # --- Answers ---

    def answer_extraction_question(self, question: Question, answer: Answer) -> None:
        """Validate and store (or replace) an extraction form answer.

        Raises:
            AnswerTypeMismatchError: Kind mismatch, or ``question`` is a RoB question.
            AnswerValueError: Value outside the question's allowed domain.
        """
        self._check_context(question, QuestionContext.EXTRACTION)
        validate_answer(question, answer)
        self.form_answers[question.question_id] = answer

    def answer_quality_question(self, question: Question, answer: Answer) -> None:
        """Validate and store (or replace) a quality-assessment answer.

        Raises:
            AnswerTypeMismatchError: Kind mismatch, or ``question`` is an
                extraction question.
            AnswerValueError: Value outside the question's allowed domain.
        """
        self._check_context(question, QuestionContext.ROB)
        validate_answer(question, answer)
        self.rob_answers[question.question_id] = answer

    def answer(self, question: Question, answer: Answer) -> None:
        """Store an answer in the mapping matching the question's context."""
        if question.context == QuestionContext.ROB:
            self.answer_quality_question(question, answer)
        else:
            self.answer_extraction_question(question, answer)

    @staticmethod
    def _check_context(question: Question, expected: QuestionContext) -> None:
        if question.context != expected:
            raise AnswerTypeMismatchError(
                question.question_id,
                f"{question.kind} ({question.context} form)",
                f"{question.kind} ({expected} form)",
            )

    # --- Status axes ---

    def set_selection_status(self, status: SelectionStatus | str) -> None:
        """Replace the selection status."""
        self.selection_status = _coerce(SelectionStatus, status, "selection status")

    def set_extraction_status(self, status: ExtractionStatus | str) -> None:
        """Replace the extraction status."""
        self.extraction_status = _coerce(ExtractionStatus, status, "extraction status")

    def set_reading_priority(self, priority: ReadingPriority | str) -> None:
        """Replace the reading priority."""
        self.reading_priority = _coerce(ReadingPriority, priority, "reading priority")

    def include_by_criteria(self, criteria: Iterable[str]) -> None:
        """Mark the study INCLUDED and record the criteria that justified it."""
        self.set_selection_status(SelectionStatus.INCLUDED)
        self.criteria = set(criteria)

    def exclude_by_criteria(self, criteria: Iterable[str]) -> None:
        """Mark the study EXCLUDED and record the criteria that justified it."""
        self.set_selection_status(SelectionStatus.EXCLUDED)
        self.criteria = set(criteria)

    def remove_criteria(self, criteria: Iterable[str]) -> None:
        """Forget criteria; the selection status is left as it is."""
        self.criteria = self.criteria - set(criteria)

    # --- Provenance and notes ---

    def add_search_source(self, source: str) -> None:
        """Record one more search source the study was found in."""
        source = source.strip()
        if not source:
            raise ValueError("Search source label must not be blank")
        self.search_sources = self.search_sources | {source}

    def update_comments(self, comments: str) -> None:
        """Replace the reviewer comments."""
        self.comments = comments

    @property
    def is_duplicated(self) -> bool:
        """True once the study has been merged into another one."""
        return self.selection_status == SelectionStatus.DUPLICATED


def _coerce(enum_cls: type[_E], value: _E | str, kind: str) -> _E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().upper())
    except ValueError:
        raise InvalidStatusError(kind, str(value), [m.value for m in enum_cls]) from None
