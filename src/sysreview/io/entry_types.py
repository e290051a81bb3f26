"""Entry type validation -- declared type token to StudyType plus required fields."""
from __future__ import annotations

from sysreview.core.enums import StudyType
from sysreview.core.exceptions import MissingFieldError, UnsupportedTypeError
from sysreview.io.lexer import RawEntry

# Field holding the publication venue, per reference type.
VENUE_FIELD: dict[StudyType, str] = {
    StudyType.ARTICLE: "journal",
    StudyType.INPROCEEDINGS: "booktitle",
    StudyType.TECHREPORT: "institution",
    StudyType.BOOK: "publisher",
    StudyType.PROCEEDINGS: "publisher",
    StudyType.PHDTHESIS: "school",
    StudyType.MASTERSTHESIS: "school",
    StudyType.INBOOK: "booktitle",
    StudyType.BOOKLET: "howpublished",
    StudyType.MANUAL: "organization",
    StudyType.MISC: "howpublished",
    StudyType.UNPUBLISHED: "note",
}

_COMMON_REQUIRED = ("title", "author", "year")

REQUIRED_FIELDS: dict[StudyType, tuple[str, ...]] = {
    study_type: (*_COMMON_REQUIRED, venue) for study_type, venue in VENUE_FIELD.items()
}


def resolve_study_type(token: str, citation_key: str | None = None) -> StudyType:
    """Map a declared entry type token onto a StudyType, ignoring case.

    Args:
        token: Type token as written after ``@``.
        citation_key: Entry key, used only for error context.

    Returns:
        The matching StudyType.

    Raises:
        UnsupportedTypeError: If the token names no supported type.
    """
    normalized = token.strip().upper()
    try:
        return StudyType(normalized)
    except ValueError:
        raise UnsupportedTypeError(token, citation_key=citation_key) from None


def validate_entry(raw: RawEntry) -> StudyType:
    """Check a raw entry's type and required fields.

    The type is resolved first, so an unknown type is reported even when
    required fields are missing as well.

    Args:
        raw: Entry produced by the lexer.

    Returns:
        The entry's StudyType.

    Raises:
        UnsupportedTypeError: Unknown type token.
        MissingFieldError: First required field absent from the entry.
    """
    study_type = resolve_study_type(raw.entry_type, raw.citation_key)
    for field_name in REQUIRED_FIELDS[study_type]:
        if raw.get(field_name) is None:
            raise MissingFieldError(field_name, citation_key=raw.citation_key)
    return study_type
