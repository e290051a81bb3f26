"""Review protocol: the plan a systematic study is conducted by."""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from sysreview.core.enums import CriterionType
from sysreview.core.exceptions import InvalidOperationError, NotFoundError, ProtocolError


class Picoc(BaseModel):
    """Population, Intervention, Control, Outcome and (optional) Context."""

    population: str
    intervention: str
    control: str
    outcome: str
    context: str | None = None

    model_config = {"frozen": True}

    @field_validator("population", "intervention", "control", "outcome")
    @classmethod
    def _not_blank(cls, value: str, info: ValidationInfo) -> str:
        if not value.strip():
            raise ProtocolError(f"The {info.field_name} described in the PICOC must not be blank!")
        return value

    @field_validator("context")
    @classmethod
    def _context_not_blank(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ProtocolError("The context, when provided, must not be blank!")
        return value


class Criterion(BaseModel):
    """An inclusion or exclusion criterion."""

    description: str
    type: CriterionType

    model_config = {"frozen": True}

    @field_validator("description")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ProtocolError("The criterion description must not be blank!")
        return value


# Free-text protocol sections and the message raised when set to a blank value.
_REQUIRED_TEXT: dict[str, str] = {
    "goal": "The goal cannot be an empty string",
    "justification": "The justification cannot be an empty string",
    "search_string": "The search string must not be blank!",
    "sources_selection_criteria": "The sources selection criteria description must not be blank",
    "search_method": "The search method description must not be blank",
    "study_type_definition": "The study type definition must not be blank",
    "selection_process": "The selection process description must not be blank",
    "data_collection_process": "The data collection process description must not be blank",
    "analysis_and_synthesis_process": (
        "The analysis and synthesis process description must not be blank"
    ),
}


class Protocol(BaseModel):
    """Protocol of one systematic study.

    Text sections may be left unset while the protocol is being drafted, but
    once given they must not be blank. Collection members are unique; adding
    an existing member is a no-op, removing one from an empty collection or
    removing an absent one raises.
    """

    systematic_study_id: UUID
    goal: str | None = None
    justification: str | None = None
    search_string: str | None = None
    sources_selection_criteria: str | None = None
    search_method: str | None = None
    study_type_definition: str | None = None
    selection_process: str | None = None
    data_collection_process: str | None = None
    analysis_and_synthesis_process: str | None = None
    research_questions: set[str] = Field(default_factory=set)
    keywords: set[str] = Field(default_factory=set)
    information_sources: set[str] = Field(default_factory=set)
    eligibility_criteria: set[Criterion] = Field(default_factory=set)
    extraction_questions: set[UUID] = Field(default_factory=set)
    rob_questions: set[UUID] = Field(default_factory=set)
    picoc: Picoc | None = None

    model_config = {"frozen": False, "validate_assignment": True}

    @field_validator(*_REQUIRED_TEXT)
    @classmethod
    def _text_not_blank(cls, value: str | None, info: ValidationInfo) -> str | None:
        if value is not None and not value.strip():
            raise ProtocolError(_REQUIRED_TEXT[info.field_name])
        return value

    # Research questions
    def add_research_question(self, question: str) -> None:
        self.research_questions.add(_non_blank(question, "research question"))

    def remove_research_question(self, question: str) -> None:
        _remove(self.research_questions, question, "Research question")

    def replace_research_questions(self, questions: Iterable[str]) -> None:
        self.research_questions = {_non_blank(q, "research question") for q in questions}

    # Keywords
    def add_keyword(self, keyword: str) -> None:
        self.keywords.add(_non_blank(keyword, "keyword"))

    def remove_keyword(self, keyword: str) -> None:
        _remove(self.keywords, keyword, "Keyword")

    def replace_keywords(self, keywords: Iterable[str]) -> None:
        self.keywords = {_non_blank(k, "keyword") for k in keywords}

    # Information sources
    def add_information_source(self, source: str) -> None:
        self.information_sources.add(_non_blank(source, "information source"))

    def remove_information_source(self, source: str) -> None:
        _remove(self.information_sources, source, "Information source")

    def replace_information_sources(self, sources: Iterable[str]) -> None:
        self.information_sources = {_non_blank(s, "information source") for s in sources}

    # Eligibility criteria
    def add_eligibility_criterion(self, criterion: Criterion) -> None:
        self.eligibility_criteria.add(criterion)

    def remove_eligibility_criterion(self, criterion: Criterion) -> None:
        _remove(self.eligibility_criteria, criterion, "Eligibility criterion")

    def replace_eligibility_criteria(self, criteria: Iterable[Criterion]) -> None:
        self.eligibility_criteria = set(criteria)

    def criteria_of(self, criterion_type: CriterionType) -> set[Criterion]:
        """Eligibility criteria of one type (inclusion or exclusion)."""
        return {c for c in self.eligibility_criteria if c.type == criterion_type}

    # Extraction and risk-of-bias questions
    def add_extraction_question(self, question_id: UUID) -> None:
        self.extraction_questions.add(question_id)

    def remove_extraction_question(self, question_id: UUID) -> None:
        _remove(self.extraction_questions, question_id, "Extraction question")

    def add_rob_question(self, question_id: UUID) -> None:
        self.rob_questions.add(question_id)

    def remove_rob_question(self, question_id: UUID) -> None:
        _remove(self.rob_questions, question_id, "Risk of bias question")


def _non_blank(value: str, what: str) -> str:
    if not value.strip():
        raise ProtocolError(f"The {what} must not be blank!")
    return value


def _remove(collection: set[Any], member: Any, entity: str) -> None:  # noqa: ANN401
    if not collection:
        raise InvalidOperationError(f"Unable to remove {entity.lower()}: the protocol has none!")
    if member not in collection:
        raise NotFoundError(entity, member)
    collection.remove(member)
