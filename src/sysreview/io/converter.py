"""Bibliographic text to StudyReview conversion.

Single-entry and batch conversion both fail fast. A batch is fully parsed
and validated before any identifier is allocated, so a rejected batch
leaves the review's id sequence untouched and produces no partial results.
"""
from __future__ import annotations

from collections.abc import Callable, Sequence
from uuid import UUID

from pydantic import BaseModel, Field

from sysreview.core.exceptions import InputFormatError
from sysreview.core.ids import IdAllocator
from sysreview.io.builder import StudyDraft, build_draft
from sysreview.io.lexer import RawEntry, split_entries
from sysreview.review.study_review import StudyReview

EntrySplitter = Callable[[str], list[RawEntry]]


class ConversionFailure(BaseModel):
    """One entry that could not be converted.

    Attributes:
        citation_key: Key of the failing entry (None if the blob itself failed).
        message: Human-readable reason.
    """

    citation_key: str | None = None
    message: str


class ConversionResult(BaseModel):
    """Outcome of an ingestion: converted studies and conversion failures.

    Under the abort-on-first-error policy ``errors`` is either empty or
    holds the single entry that stopped the batch, and ``studies`` is then
    empty. ``search_session_id`` names the session the studies were
    imported through, when there was one.
    """

    studies: list[StudyReview] = Field(default_factory=list)
    errors: list[ConversionFailure] = Field(default_factory=list)
    search_session_id: UUID | None = None

    @property
    def ok(self) -> bool:
        """True when nothing failed."""
        return not self.errors


class BibtexConverter:
    """Convert bibliographic text into new StudyReview aggregates.

    Args:
        allocator: Issues the sequential study ids of each systematic study.
        splitter: Turns a text blob into raw entries (BibTeX by default).
    """

    def __init__(
        self,
        allocator: IdAllocator,
        splitter: EntrySplitter = split_entries,
    ) -> None:
        self._allocator = allocator
        self._splitter = splitter

    def convert_one(
        self,
        systematic_study_id: UUID,
        blob: str,
        source: str | None = None,
    ) -> StudyReview:
        """Convert a blob holding exactly one entry.

        Args:
            systematic_study_id: Review the new study belongs to.
            blob: Bibliographic text.
            source: Search source label recorded on the study.

        Returns:
            The new StudyReview.

        Raises:
            InputFormatError: Blank input, malformed input, or not exactly one entry.
            ConversionError: Any type, field or format violation of the entry.
        """
        entries = self._splitter(blob)
        if len(entries) != 1:
            raise InputFormatError(
                f"Expected exactly one entry, found {len(entries)}",
                citation_key=entries[1].citation_key if len(entries) > 1 else None,
            )
        draft = build_draft(entries[0])
        return draft.to_study_review(
            systematic_study_id, self._allocator.next_id(systematic_study_id), source
        )

    def convert_many(
        self,
        systematic_study_id: UUID,
        blob: str,
        source: str | None = None,
    ) -> list[StudyReview]:
        """Convert every entry of a blob, aborting on the first bad entry.

        Raises:
            InputFormatError: Blank or malformed input.
            ConversionError: First entry violating type, field or format rules;
                ``citation_key`` names it.
        """
        return self.convert_entries(systematic_study_id, self._splitter(blob), source)

    def convert_entries(
        self,
        systematic_study_id: UUID,
        entries: Sequence[RawEntry],
        source: str | None = None,
    ) -> list[StudyReview]:
        """Convert already split raw entries, with the same abort policy."""
        if not entries:
            raise InputFormatError("No entry to convert")
        drafts: list[StudyDraft] = [build_draft(raw) for raw in entries]
        return [
            draft.to_study_review(
                systematic_study_id, self._allocator.next_id(systematic_study_id), source
            )
            for draft in drafts
        ]
