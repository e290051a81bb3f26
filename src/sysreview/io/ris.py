"""RIS input -- rispy records mapped onto BibTeX-shaped raw entries.

RIS exports are translated into ``RawEntry`` objects so the same type
validator and record builder apply to both formats.
"""
from __future__ import annotations

import re
from typing import Any

import rispy  # type: ignore[import-untyped]

from sysreview.core.enums import StudyType
from sysreview.core.exceptions import InputFormatError
from sysreview.io.entry_types import VENUE_FIELD
from sysreview.io.lexer import RawEntry

# RIS reference type -> BibTeX entry type token.
RIS_TYPE_MAP: dict[str, str] = {
    "JOUR": "article",
    "JFULL": "article",
    "EJOUR": "article",
    "MGZN": "article",
    "CONF": "inproceedings",
    "CPAPER": "inproceedings",
    "RPRT": "techreport",
    "BOOK": "book",
    "EBOOK": "book",
    "EDBOOK": "proceedings",
    "THES": "phdthesis",
    "CHAP": "inbook",
    "ECHAP": "inbook",
    "PAMP": "booklet",
    "STAND": "manual",
    "COMP": "manual",
    "GEN": "misc",
    "ELEC": "misc",
    "UNPB": "unpublished",
    "MANSCPT": "unpublished",
}

# rispy keys tried in order for each venue field.
_VENUE_SOURCES: dict[str, tuple[str, ...]] = {
    "journal": ("journal_name", "secondary_title", "alternate_title3", "alternate_title2"),
    "booktitle": ("secondary_title", "tertiary_title"),
    "institution": ("publisher", "secondary_title"),
    "publisher": ("publisher",),
    "school": ("publisher", "secondary_title"),
    "howpublished": ("publisher", "urls"),
    "organization": ("publisher", "authors"),
    "note": ("notes", "secondary_title"),
}

_YEAR_RE = re.compile(r"\d{4}")


def ris_to_entries(text: str) -> list[RawEntry]:
    """Parse RIS text into raw entries.

    Unknown RIS types are passed through as-is so the type validator
    reports them.

    Args:
        text: RIS export content.

    Returns:
        Raw entries in source order.

    Raises:
        InputFormatError: Blank input, unparseable input or no record.
    """
    if text is None or not text.strip():
        raise InputFormatError("RIS input must not be blank")
    try:
        records: list[dict[str, Any]] = rispy.loads(text)
    except (OSError, ValueError, KeyError) as exc:
        raise InputFormatError(f"Malformed RIS input: {exc}") from exc
    if not records:
        raise InputFormatError("No RIS record found in input")
    return [_to_raw_entry(record, position) for position, record in enumerate(records)]


def _to_raw_entry(record: dict[str, Any], position: int) -> RawEntry:
    ris_type = str(record.get("type_of_reference", "")).strip().upper()
    entry_type = RIS_TYPE_MAP.get(ris_type, ris_type or "unknown")
    key = str(record.get("id") or f"ris{position + 1}")

    fields: dict[str, str] = {}
    _put(fields, "title", _first(record, "title", "primary_title"))
    authors = record.get("authors") or record.get("first_authors")
    if authors:
        fields["author"] = " and ".join(str(a).strip() for a in authors)
    year = _first(record, "year", "publication_year", "date")
    if year is not None:
        m = _YEAR_RE.search(year)
        fields["year"] = m.group(0) if m else year
    _put(fields, "abstract", _first(record, "abstract", "notes_abstract"))
    _put(fields, "doi", _first(record, "doi"))
    keywords = record.get("keywords")
    if keywords:
        fields["keywords"] = ", ".join(str(k) for k in keywords)

    try:
        venue_field = VENUE_FIELD[StudyType(entry_type.upper())]
    except ValueError:
        venue_field = None
    if venue_field is not None:
        _put(fields, venue_field, _first(record, *_VENUE_SOURCES[venue_field]))

    return RawEntry(entry_type=entry_type, citation_key=key, fields=fields, position=position)


def _first(record: dict[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = record.get(key)
        if isinstance(value, list):
            value = "; ".join(str(v) for v in value if str(v).strip())
        if value not in (None, ""):
            return str(value)
    return None


def _put(fields: dict[str, str], name: str, value: str | None) -> None:
    if value is not None:
        fields[name] = value
