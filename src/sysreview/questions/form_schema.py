"""Question forms: YAML -> typed Question models.

A form lists the extraction and quality-assessment (RoB) questions of one
systematic study. Each entry names its ``type`` (TEXTUAL, PICK_LIST,
NUMBERED_SCALE or LABELED_SCALE) plus the kind-specific constraints.
Questions without an explicit ``question_id`` get a stable UUID derived
from the systematic study id and the question code, so answers keep
pointing at the same question across loads.
"""
from __future__ import annotations

import uuid
from pathlib import Path
from typing import Any
from uuid import UUID

import yaml
from pydantic import BaseModel, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from sysreview.core.enums import QuestionContext, QuestionKind
from sysreview.core.exceptions import ConfigError
from sysreview.questions.models import Question

_QUESTION_ADAPTER: TypeAdapter[Question] = TypeAdapter(Question)


class QuestionForm(BaseModel):
    """Extraction and RoB questions of one systematic study.

    Attributes:
        form_name: Human-readable name of the form.
        form_version: Version string for audit trail.
        systematic_study_id: Systematic study the questions belong to.
        questions: All questions, both contexts.
    """

    form_name: str
    form_version: str = "1.0"
    systematic_study_id: UUID
    questions: list[Question] = Field(default_factory=list)

    def find(self, question_id: UUID) -> Question | None:
        """Return the question with this id, if the form defines it."""
        for question in self.questions:
            if question.question_id == question_id:
                return question
        return None

    def by_context(self, context: QuestionContext) -> list[Question]:
        """Questions of one form context, in declaration order."""
        return [q for q in self.questions if q.context == context]


def question_id_for(systematic_study_id: UUID, code: str) -> UUID:
    """Stable question id for a question code within a systematic study."""
    return uuid.uuid5(systematic_study_id, code)


def parse_question(data: dict[str, Any], systematic_study_id: UUID) -> Question:
    """Validate one question mapping into its typed variant.

    Args:
        data: Mapping with ``code``, ``description``, ``type`` and constraints.
        systematic_study_id: Owning systematic study.

    Returns:
        The typed question.

    Raises:
        ConfigError: If the mapping is not a valid question.
    """
    payload = dict(data)
    if "type" in payload:
        token = str(payload.pop("type")).strip().upper()
        try:
            payload["kind"] = QuestionKind(token).value
        except ValueError:
            allowed = ", ".join(k.value for k in QuestionKind)
            msg = f"Invalid question type '{token}' for '{data.get('code', '?')}'. Allowed: {allowed}"
            raise ConfigError(msg) from None
    if "context" in payload:
        payload["context"] = str(payload["context"]).strip().upper()
    payload.setdefault("systematic_study_id", systematic_study_id)
    if "question_id" not in payload and payload.get("code"):
        payload["question_id"] = question_id_for(systematic_study_id, str(payload["code"]))
    try:
        return _QUESTION_ADAPTER.validate_python(payload)
    except PydanticValidationError as exc:
        raise ConfigError(f"Invalid question '{data.get('code', '?')}': {exc}") from exc


def load_question_form(path: Path, systematic_study_id: UUID | None = None) -> QuestionForm:
    """Load and validate a question form from a YAML file.

    Args:
        path: Path to the YAML question form.
        systematic_study_id: Overrides the id declared in the file.

    Returns:
        Validated QuestionForm instance.

    Raises:
        FileNotFoundError: If the YAML file does not exist.
        ConfigError: If the YAML content is invalid.
    """
    if not path.exists():
        msg = f"Question form not found: {path}"
        raise FileNotFoundError(msg)

    with open(path) as f:  # noqa: PTH123
        data: dict[str, Any] = yaml.safe_load(f) or {}

    review_id = systematic_study_id or data.get("systematic_study_id")
    if review_id is None:
        raise ConfigError(f"Question form {path} does not name a systematic_study_id")
    review_id = UUID(str(review_id))

    questions = [parse_question(q, review_id) for q in data.get("questions", [])]
    return QuestionForm(
        form_name=data.get("form_name", path.stem),
        form_version=str(data.get("form_version", "1.0")),
        systematic_study_id=review_id,
        questions=questions,
    )
