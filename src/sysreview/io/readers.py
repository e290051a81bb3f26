"""Unified bibliographic file reader -- auto-detects format by extension."""
from __future__ import annotations

from pathlib import Path
from uuid import UUID

import structlog

from sysreview.core.exceptions import UnsupportedFormatError
from sysreview.core.ids import IdAllocator
from sysreview.io.converter import BibtexConverter, EntrySplitter
from sysreview.io.lexer import split_entries
from sysreview.io.ris import ris_to_entries
from sysreview.review.study_review import StudyReview

logger = structlog.get_logger(__name__)

SPLITTERS: dict[str, EntrySplitter] = {
    ".bib": split_entries,
    ".bibtex": split_entries,
    ".ris": ris_to_entries,
}

SUPPORTED_EXTENSIONS = set(SPLITTERS)


def splitter_for(path: Path) -> EntrySplitter:
    """Return the entry splitter for a file, based on its extension.

    Raises:
        UnsupportedFormatError: If the extension is not recognized.
    """
    ext = Path(path).suffix.lower()
    if ext not in SPLITTERS:
        raise UnsupportedFormatError(ext, sorted(SUPPORTED_EXTENSIONS))
    return SPLITTERS[ext]


def read_text(path: Path) -> str:
    """Read a bibliographic export with encoding fallback (UTF-8 -> latin-1).

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    try:
        return path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError:
        return path.read_text(encoding="latin-1")


def read_studies(
    path: Path,
    systematic_study_id: UUID,
    allocator: IdAllocator,
    source: str | None = None,
) -> list[StudyReview]:
    """Read studies from a .bib or .ris file into new StudyReviews.

    Args:
        path: Path to the input file.
        systematic_study_id: Review the studies are imported into.
        allocator: Id allocator for the review.
        source: Search source label; defaults to the file stem.

    Returns:
        New StudyReview objects, in file order.

    Raises:
        UnsupportedFormatError: If the file extension is not recognized.
        FileNotFoundError: If the file does not exist.
        ConversionError: If any entry fails conversion (nothing is returned).
    """
    path = Path(path)
    splitter = splitter_for(path)
    text = read_text(path)

    converter = BibtexConverter(allocator, splitter=splitter)
    studies = converter.convert_many(systematic_study_id, text, source or path.stem)
    logger.info(
        "read_studies",
        path=str(path),
        format=path.suffix.lower().lstrip("."),
        n_studies=len(studies),
    )
    return studies
