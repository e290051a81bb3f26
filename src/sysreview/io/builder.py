"""Study record builder -- validated raw entry to StudyReview.

Text fields are copied verbatim after trimming; only year, DOI, keywords
and references are parsed. Status and priority fields always start at
their defaults, whatever the source contains.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from uuid import UUID

from sysreview.core.enums import StudyType
from sysreview.core.exceptions import FieldFormatError
from sysreview.io.entry_types import VENUE_FIELD, validate_entry
from sysreview.io.lexer import RawEntry
from sysreview.review.study_review import StudyReview

DOI_PATTERN = re.compile(r"^https://doi\.org/10\.\d{4,9}(?:\.\d+)*/\S+$")
DOI_PREFIX = "https://doi.org/"

_DOI_PREFIX_RE = re.compile(r"^(?:doi:\s*|https?://(?:dx\.)?doi\.org/)", re.IGNORECASE)
_YEAR_RE = re.compile(r"^\d{4}$")
_LIST_SEP_RE = re.compile(r"[;,]")


@dataclass(frozen=True)
class StudyDraft:
    """Parsed and validated entry content, waiting for an id.

    Attributes:
        citation_key: Key of the source entry.
        study_type: Resolved reference type.
        title: Trimmed title.
        authors: Trimmed author string.
        year: Publication year.
        venue: Trimmed venue for the entry's type.
        abstract: Trimmed abstract, empty when absent.
        keywords: Keyword set.
        references: Referenced citation keys, in order.
        doi: Canonical DOI URI or None.
    """

    citation_key: str
    study_type: StudyType
    title: str
    authors: str
    year: int
    venue: str
    abstract: str = ""
    keywords: frozenset[str] = field(default_factory=frozenset)
    references: tuple[str, ...] = ()
    doi: str | None = None

    def to_study_review(
        self,
        systematic_study_id: UUID,
        study_id: int,
        source: str | None = None,
    ) -> StudyReview:
        """Materialise the draft as a new StudyReview with default statuses."""
        return StudyReview(
            systematic_study_id=systematic_study_id,
            study_id=study_id,
            study_type=self.study_type,
            title=self.title,
            authors=self.authors,
            year=self.year,
            venue=self.venue,
            abstract=self.abstract,
            keywords=set(self.keywords),
            references=list(self.references),
            doi=self.doi,
            search_sources={source} if source else set(),
        )


def build_draft(raw: RawEntry) -> StudyDraft:
    """Validate a raw entry and parse its fields.

    Args:
        raw: Entry produced by the lexer.

    Returns:
        The parsed draft.

    Raises:
        UnsupportedTypeError: Unknown type token.
        MissingFieldError: Required field absent.
        FieldFormatError: Blank text field, malformed year or DOI.
    """
    study_type = validate_entry(raw)
    key = raw.citation_key

    abstract = raw.get("abstract")
    doi = raw.get("doi")
    return StudyDraft(
        citation_key=key,
        study_type=study_type,
        title=_required_text(raw, "title"),
        authors=_required_text(raw, "author"),
        year=parse_year(raw.get("year") or "", key),
        venue=_required_text(raw, VENUE_FIELD[study_type]),
        abstract=_required_text(raw, "abstract") if abstract is not None else "",
        keywords=frozenset(split_keywords(raw.get("keywords"))),
        references=tuple(split_references(raw.get("references"))),
        doi=normalize_doi(doi, key) if doi is not None and doi.strip() else None,
    )


def parse_year(value: str, citation_key: str | None = None) -> int:
    """Parse a four-digit publication year.

    Raises:
        FieldFormatError: Value is not exactly four digits or is zero.
    """
    text = value.strip()
    if not _YEAR_RE.match(text) or int(text) == 0:
        raise FieldFormatError("year", value, "expected a four-digit year", citation_key)
    return int(text)


def normalize_doi(value: str, citation_key: str | None = None) -> str:
    """Rewrite a DOI into canonical ``https://doi.org/<suffix>`` form.

    Accepts bare ``10.xxxx/...`` suffixes and ``doi:``, ``http://doi.org/``
    or ``dx.doi.org`` prefixed forms.

    Raises:
        FieldFormatError: The result does not look like a DOI.
    """
    suffix = _DOI_PREFIX_RE.sub("", value.strip())
    canonical = DOI_PREFIX + suffix
    if not DOI_PATTERN.match(canonical):
        raise FieldFormatError("doi", value, "not a valid DOI", citation_key)
    return canonical


def split_keywords(value: str | None) -> set[str]:
    """Split a comma/semicolon separated keyword field into a set."""
    if value is None:
        return set()
    return {k.strip() for k in _LIST_SEP_RE.split(value) if k.strip()}


def split_references(value: str | None) -> list[str]:
    """Split a references field into citation keys, keeping first occurrences in order."""
    if value is None:
        return []
    keys = [k.strip() for k in _LIST_SEP_RE.split(value) if k.strip()]
    return list(dict.fromkeys(keys))


def _required_text(raw: RawEntry, field_name: str) -> str:
    value = raw.get(field_name) or ""
    text = value.strip()
    if not text:
        raise FieldFormatError(field_name, value, "must not be blank", raw.citation_key)
    return text
