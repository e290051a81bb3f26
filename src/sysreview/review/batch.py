"""Batch answering: many (question, answer) pairs applied to one study review.

Every item is attempted. A rejected item is recorded with its reason and
never blocks the rest of the batch; only errors from the question lookup
collaborator itself (anything that is not a SysReviewError) propagate.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from sysreview.core.exceptions import AnswerTypeMismatchError, NotFoundError, SysReviewError
from sysreview.questions.models import Question
from sysreview.questions.validation import build_answer
from sysreview.review.study_review import StudyReview


class QuestionLookup(Protocol):
    """Resolves a question definition within a systematic study."""

    def find_by_id(self, systematic_study_id: UUID, question_id: UUID) -> Question | None: ...


class AnswerDetail(BaseModel):
    """One item of a batch answer request.

    Accepts both the wire names (``questionId``) and the Python names.

    Attributes:
        question_id: Question being answered.
        type: Declared question kind; must equal the question's kind.
        answer: Raw payload (str, int, or ``{"name", "value"}`` mapping).
    """

    model_config = ConfigDict(populate_by_name=True)

    question_id: UUID = Field(alias="questionId")
    type: str
    answer: Any


class FailedAnswer(BaseModel):
    """A rejected batch item and the reason it was rejected."""

    question_id: UUID
    reason: str


class BatchAnswerResult(BaseModel):
    """Per-item outcome of a batch answer call.

    Attributes:
        succeeded_answers: Question ids whose answers were applied, in order.
        failed_answers: Rejected items with reasons, in order.
        total_answered: Number of applied answers.
    """

    succeeded_answers: list[UUID] = Field(default_factory=list)
    failed_answers: list[FailedAnswer] = Field(default_factory=list)
    total_answered: int = 0


class BatchAnswerProcessor:
    """Apply a list of answers to one StudyReview, continuing past failures.

    Args:
        questions: Question lookup for the review's systematic study.
    """

    def __init__(self, questions: QuestionLookup) -> None:
        self._questions = questions

    def process(
        self,
        review: StudyReview,
        details: Sequence[AnswerDetail],
    ) -> BatchAnswerResult:
        """Validate and apply every answer detail to ``review``.

        Args:
            review: Study review to mutate.
            details: Answers in request order.

        Returns:
            Succeeded ids, failures with reasons and the success count.
        """
        result = BatchAnswerResult()
        for detail in details:
            try:
                self._apply(review, detail)
            except SysReviewError as exc:
                result.failed_answers.append(
                    FailedAnswer(
                        question_id=detail.question_id,
                        reason=str(exc) or "An unknown error occurred!",
                    )
                )
            else:
                result.succeeded_answers.append(detail.question_id)
        result.total_answered = len(result.succeeded_answers)
        return result

    def _apply(self, review: StudyReview, detail: AnswerDetail) -> None:
        question = self._questions.find_by_id(review.systematic_study_id, detail.question_id)
        if question is None:
            raise NotFoundError("Question", detail.question_id, review.systematic_study_id)
        if detail.type != question.kind:
            raise AnswerTypeMismatchError(question.question_id, question.kind, detail.type)
        answer = build_answer(question, detail.answer)
        review.answer(question, answer)
