"""Entry lexer -- split a BibTeX blob into raw, untyped entries.

Splitting is delegated to bibtexparser v2. The default parse stack resolves
``@string`` macros and removes exactly one enclosing layer of braces or
quotes from every field value; inner braces and TeX escapes are kept so that
titles like ``{Using SOA in Critical-Embedded Systems}`` survive verbatim.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import bibtexparser
from bibtexparser.model import Field

from sysreview.core.exceptions import InputFormatError


@dataclass(frozen=True)
class RawEntry:
    """One bibliographic entry before type validation.

    Attributes:
        entry_type: Declared type token as written (e.g. "Article").
        citation_key: Citation key following the opening brace.
        fields: Lower-cased field name -> raw field text.
        position: Zero-based index of the entry within its source blob.
    """

    entry_type: str
    citation_key: str
    fields: dict[str, str] = field(default_factory=dict)
    position: int = 0

    def get(self, name: str) -> str | None:
        """Return the raw text of a field, or None when absent."""
        return self.fields.get(name.lower())


def split_entries(blob: str) -> list[RawEntry]:
    """Split a bibliographic blob into raw entries, preserving order.

    ``@comment``, ``@string`` and ``@preamble`` blocks and free text between
    entries are ignored.

    Args:
        blob: Text holding zero or more ``@type{key, field = {value}}`` records.

    Returns:
        Raw entries in source order.

    Raises:
        InputFormatError: If the blob is blank, contains a malformed block,
            or contains no entry at all.
    """
    if blob is None or not blob.strip():
        raise InputFormatError("BibTeX input must not be blank")

    library = bibtexparser.parse_string(blob)

    if library.failed_blocks:
        failed = library.failed_blocks[0]
        raise InputFormatError(
            f"Malformed BibTeX block starting at line {failed.start_line}: {failed.error}"
        )

    entries = [
        RawEntry(
            entry_type=entry.entry_type,
            citation_key=entry.key,
            fields=_fold_fields(entry.key, entry.fields),
            position=position,
        )
        for position, entry in enumerate(library.entries)
    ]
    if not entries:
        raise InputFormatError("No BibTeX entry found in input")
    return entries


def _fold_fields(citation_key: str, fields: Iterable[Field]) -> dict[str, str]:
    # bibtexparser only rejects duplicates that match exactly; names that
    # collide once lower-cased are rejected here.
    folded: dict[str, str] = {}
    for f in fields:
        name = f.key.lower()
        if name in folded:
            raise InputFormatError(
                f"Duplicate field '{name}' in entry '{citation_key}' "
                "(field names are case-insensitive)",
                citation_key=citation_key,
            )
        folded[name] = str(f.value)
    return folded
