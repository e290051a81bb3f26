"""Core Pydantic data models for sysreview."""
from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field

from sysreview.core.enums import StudyType


class StudyRecord(BaseModel):
    """Bibliographic description of one candidate study.

    Identity is the pair (``systematic_study_id``, ``study_id``); study ids
    are sequential within one systematic study.

    Attributes:
        systematic_study_id: Systematic study (review) the record belongs to.
        study_id: Sequential integer id within the systematic study.
        study_type: Reference type the record was imported as.
        title: Title, verbatim from the source after trimming.
        authors: Author list as a single string, separators preserved.
        year: Four-digit publication year.
        venue: Journal, booktitle, publisher, school, ... depending on type.
        abstract: Abstract text (empty when the source has none).
        keywords: Author keywords.
        references: Citation keys of referenced studies, in source order.
        doi: Canonical ``https://doi.org/...`` URI, if known.
        search_sources: Labels of the search sources the study was found in.
        search_session_id: Search session (import) that created the record, if any.
        comments: Free-text reviewer comments.
    """

    systematic_study_id: UUID
    study_id: int = Field(ge=1)
    study_type: StudyType
    title: str = Field(min_length=1)
    authors: str = Field(min_length=1)
    year: int = Field(gt=0)
    venue: str = Field(min_length=1)
    abstract: str = ""
    keywords: set[str] = Field(default_factory=set)
    references: list[str] = Field(default_factory=list)
    doi: str | None = None
    search_sources: set[str] = Field(default_factory=set)
    search_session_id: UUID | None = None
    comments: str = ""

    model_config = {"frozen": False, "validate_assignment": True}
