"""Extraction and quality-assessment questions and their typed answers."""
from sysreview.questions.form_schema import QuestionForm, load_question_form
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
from sysreview.questions.validation import build_answer, validate_answer

__all__ = [
    "Answer",
    "Label",
    "LabeledScaleAnswer",
    "LabeledScaleQuestion",
    "NumberScaleAnswer",
    "NumberScaleQuestion",
    "PickListAnswer",
    "PickListQuestion",
    "Question",
    "QuestionForm",
    "TextualAnswer",
    "TextualQuestion",
    "build_answer",
    "load_question_form",
    "validate_answer",
]
