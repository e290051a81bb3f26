"""Answer validation and request payload conversion per question kind."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, assert_never

from sysreview.core.exceptions import AnswerTypeMismatchError, AnswerValueError
from sysreview.questions.models import (
    Answer,
    Label,
    LabeledScaleAnswer,
    LabeledScaleQuestion,
    NumberScaleAnswer,
    NumberScaleQuestion,
    PickListAnswer,
    PickListQuestion,
    Question,
    TextualAnswer,
    TextualQuestion,
)


def validate_answer(question: Question, answer: Answer) -> None:
    """Check an answer against its question definition.

    Kind compatibility is checked before anything else.

    Args:
        question: The question being answered.
        answer: The typed answer.

    Raises:
        AnswerTypeMismatchError: Answer kind differs from question kind.
        AnswerValueError: Answer targets another question or lies outside
            the question's allowed values.
    """
    if answer.kind != question.kind:
        raise AnswerTypeMismatchError(question.question_id, question.kind, answer.kind)
    if answer.question_id != question.question_id:
        raise AnswerValueError(
            f"Answer refers to question {answer.question_id}, "
            f"not to question {question.question_id}",
            question_id=question.question_id,
        )

    # Kinds are equal here, so each question pairs with its own answer class.
    if isinstance(question, PickListQuestion) and isinstance(answer, PickListAnswer):
        if answer.value not in question.options:
            raise AnswerValueError(
                f"Answer '{answer.value}' is not one of the options of question "
                f"{question.question_id}: {question.options}",
                question_id=question.question_id,
            )
    elif isinstance(question, NumberScaleQuestion) and isinstance(answer, NumberScaleAnswer):
        if not question.lower <= answer.value <= question.higher:
            raise AnswerValueError(
                f"Answer {answer.value} is out of bounds "
                f"[{question.lower}, {question.higher}] of question {question.question_id}",
                question_id=question.question_id,
            )
    elif isinstance(question, LabeledScaleQuestion) and isinstance(answer, LabeledScaleAnswer):
        registered = question.label(answer.value.name)
        if registered is None or registered.value != answer.value.value:
            raise AnswerValueError(
                f"Label ({answer.value.name}, {answer.value.value}) is not registered "
                f"in question {question.question_id}",
                question_id=question.question_id,
            )


def build_answer(question: Question, payload: Any) -> Answer:  # noqa: ANN401
    """Turn a raw request payload into a validated typed answer.

    Payload shapes: ``str`` for textual and pick-list questions, ``int`` for
    numbered scales, a ``Label`` or a ``{"name": str, "value": int}`` mapping
    for labeled scales.

    Args:
        question: The question being answered.
        payload: Raw answer value from the request.

    Returns:
        The typed answer, already validated with ``validate_answer``.

    Raises:
        AnswerTypeMismatchError: Payload shape incompatible with the kind.
        AnswerValueError: Payload value not allowed by the question.
    """
    qid = question.question_id
    answer: Answer
    if isinstance(question, TextualQuestion):
        _require(isinstance(payload, str), question, payload)
        answer = TextualAnswer(question_id=qid, value=payload)
    elif isinstance(question, PickListQuestion):
        _require(isinstance(payload, str), question, payload)
        answer = PickListAnswer(question_id=qid, value=payload)
    elif isinstance(question, NumberScaleQuestion):
        _require(isinstance(payload, int) and not isinstance(payload, bool), question, payload)
        answer = NumberScaleAnswer(question_id=qid, value=payload)
    elif isinstance(question, LabeledScaleQuestion):
        answer = LabeledScaleAnswer(question_id=qid, value=_to_label(question, payload))
    else:
        assert_never(question)

    validate_answer(question, answer)
    return answer


def _to_label(question: LabeledScaleQuestion, payload: Any) -> Label:  # noqa: ANN401
    if isinstance(payload, Label):
        return payload
    _require(isinstance(payload, Mapping), question, payload)
    name = payload.get("name")
    value = payload.get("value")
    if not isinstance(name, str) or not isinstance(value, int) or isinstance(value, bool):
        raise AnswerValueError(
            "Invalid labeled scale answer: missing 'name' or 'value'",
            question_id=question.question_id,
        )
    if not name:
        raise AnswerValueError(
            "Invalid labeled scale answer: blank 'name'",
            question_id=question.question_id,
        )
    return Label(name=name, value=value)


def _require(ok: bool, question: Question, payload: Any) -> None:  # noqa: ANN401
    if not ok:
        raise AnswerTypeMismatchError(
            question.question_id, question.kind, type(payload).__name__
        )
