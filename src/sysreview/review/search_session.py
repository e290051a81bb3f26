"""Search sessions: one execution of a search string against a search source.

Every ingestion made through a session stamps the session id on the study
reviews it creates, so the provenance of each study (which query, run where
and when) can be traced back after the fact.
"""
from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator


class SearchSession(BaseModel):
    """A search run whose results were imported into a systematic study.

    Attributes:
        session_id: Unique id of the session.
        systematic_study_id: Systematic study the results were imported into.
        source: Search source label (e.g. "Scopus").
        search_string: Query as it was run against the source.
        additional_info: Free-text notes (filters, date ranges, ...).
        timestamp: When the session was created (UTC).
    """

    session_id: UUID = Field(default_factory=uuid4)
    systematic_study_id: UUID
    source: str
    search_string: str = ""
    additional_info: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = {"frozen": False, "validate_assignment": True}

    @field_validator("source")
    @classmethod
    def _source_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Search source label must not be blank")
        return value

    def update(
        self,
        search_string: str | None = None,
        additional_info: str | None = None,
        source: str | None = None,
    ) -> None:
        """Replace the given attributes; ``None`` leaves an attribute as it is."""
        if search_string is not None:
            self.search_string = search_string
        if additional_info is not None:
            self.additional_info = additional_info
        if source is not None:
            self.source = source
