"""Question and answer variants.

Both hierarchies are closed discriminated unions keyed by ``kind``; the
kind tokens are the ``type`` strings used by batch answer requests.
"""
from __future__ import annotations

import uuid
from typing import Annotated, Literal
from uuid import UUID

from pydantic import BaseModel, Field, StrictInt, StrictStr, model_validator

from sysreview.core.enums import QuestionContext


class Label(BaseModel):
    """A named point on a labeled scale (e.g. "Good" -> 3)."""

    name: StrictStr = Field(min_length=1)
    value: StrictInt

    model_config = {"frozen": True}


class _QuestionBase(BaseModel):
    question_id: UUID = Field(default_factory=uuid.uuid4)
    systematic_study_id: UUID
    code: str = Field(min_length=1)
    description: str = Field(min_length=1)
    context: QuestionContext = QuestionContext.EXTRACTION


class TextualQuestion(_QuestionBase):
    """Free-text question; any string is a valid answer."""

    kind: Literal["TEXTUAL"] = "TEXTUAL"


class PickListQuestion(_QuestionBase):
    """Single choice from a fixed list of options."""

    kind: Literal["PICK_LIST"] = "PICK_LIST"
    options: list[str] = Field(min_length=1)


class NumberScaleQuestion(_QuestionBase):
    """Integer answer within inclusive bounds."""

    kind: Literal["NUMBERED_SCALE"] = "NUMBERED_SCALE"
    lower: int
    higher: int

    @model_validator(mode="after")
    def _check_bounds(self) -> NumberScaleQuestion:
        if self.lower > self.higher:
            msg = f"Lower bound {self.lower} is greater than higher bound {self.higher}"
            raise ValueError(msg)
        return self


class LabeledScaleQuestion(_QuestionBase):
    """Answer is one of the registered (label name, value) pairs."""

    kind: Literal["LABELED_SCALE"] = "LABELED_SCALE"
    scales: dict[str, int] = Field(min_length=1)

    def label(self, name: str) -> Label | None:
        """Return the registered label with this name, if any."""
        if name not in self.scales:
            return None
        return Label(name=name, value=self.scales[name])


Question = Annotated[
    TextualQuestion | PickListQuestion | NumberScaleQuestion | LabeledScaleQuestion,
    Field(discriminator="kind"),
]


class TextualAnswer(BaseModel):
    """Answer to a TextualQuestion."""

    kind: Literal["TEXTUAL"] = "TEXTUAL"
    question_id: UUID
    value: StrictStr


class PickListAnswer(BaseModel):
    """Answer to a PickListQuestion."""

    kind: Literal["PICK_LIST"] = "PICK_LIST"
    question_id: UUID
    value: StrictStr


class NumberScaleAnswer(BaseModel):
    """Answer to a NumberScaleQuestion."""

    kind: Literal["NUMBERED_SCALE"] = "NUMBERED_SCALE"
    question_id: UUID
    value: StrictInt


class LabeledScaleAnswer(BaseModel):
    """Answer to a LabeledScaleQuestion."""

    kind: Literal["LABELED_SCALE"] = "LABELED_SCALE"
    question_id: UUID
    value: Label


Answer = Annotated[
    TextualAnswer | PickListAnswer | NumberScaleAnswer | LabeledScaleAnswer,
    Field(discriminator="kind"),
]
