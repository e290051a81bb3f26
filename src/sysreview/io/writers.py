"""Study review export -- write StudyReview lists to JSON, CSV or RIS."""
from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any

import structlog

from sysreview.core.enums import StudyType
from sysreview.core.exceptions import UnsupportedFormatError
from sysreview.review.study_review import StudyReview

logger = structlog.get_logger(__name__)

SUPPORTED_WRITE_FORMATS = {".ris", ".csv", ".json"}

_EXPORT_FIELDS = [
    "study_id",
    "study_type",
    "title",
    "authors",
    "year",
    "venue",
    "doi",
    "keywords",
    "search_sources",
    "search_session_id",
    "selection_status",
    "extraction_status",
    "reading_priority",
    "comments",
]

_RIS_TYPES: dict[StudyType, str] = {
    StudyType.ARTICLE: "JOUR",
    StudyType.INPROCEEDINGS: "CONF",
    StudyType.TECHREPORT: "RPRT",
    StudyType.BOOK: "BOOK",
    StudyType.PROCEEDINGS: "EDBOOK",
    StudyType.PHDTHESIS: "THES",
    StudyType.MASTERSTHESIS: "THES",
    StudyType.INBOOK: "CHAP",
    StudyType.BOOKLET: "PAMP",
    StudyType.MANUAL: "STAND",
    StudyType.MISC: "GEN",
    StudyType.UNPUBLISHED: "UNPB",
}


def write_studies(
    studies: list[StudyReview],
    path: Path,
    format_type: str | None = None,
) -> Path:
    """Write study reviews to file. Auto-detect format from extension if not given.

    Args:
        studies: Study reviews to write.
        path: Output file path.
        format_type: Optional format override ("ris", "csv", "json").

    Returns:
        Path to the written file.

    Raises:
        UnsupportedFormatError: If format is not recognized.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fmt = format_type or _detect_format(path)

    if fmt == "ris":
        _write_ris(studies, path)
    elif fmt == "csv":
        _write_csv(studies, path)
    elif fmt == "json":
        _write_json(studies, path)
    else:
        raise UnsupportedFormatError(fmt, ["ris", "csv", "json"])

    logger.info("write_studies", path=str(path), format=fmt, n_studies=len(studies))
    return path


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower()
    fmt_map = {".ris": "ris", ".csv": "csv", ".json": "json"}
    if ext not in fmt_map:
        raise UnsupportedFormatError(ext, sorted(SUPPORTED_WRITE_FORMATS))
    return fmt_map[ext]


def _study_to_flat_dict(study: StudyReview) -> dict[str, str]:
    """Flatten a study review into string columns for CSV."""
    return {
        "study_id": str(study.study_id),
        "study_type": study.study_type.value,
        "title": study.title,
        "authors": study.authors,
        "year": str(study.year),
        "venue": study.venue,
        "doi": study.doi or "",
        "keywords": "; ".join(sorted(study.keywords)),
        "search_sources": "; ".join(sorted(study.search_sources)),
        "search_session_id": str(study.search_session_id) if study.search_session_id else "",
        "selection_status": study.selection_status.value,
        "extraction_status": study.extraction_status.value,
        "reading_priority": study.reading_priority.value,
        "comments": study.comments,
    }


def _write_csv(studies: list[StudyReview], path: Path) -> None:
    """Write studies as CSV with UTF-8 BOM for Excel compatibility."""
    rows = [_study_to_flat_dict(s) for s in studies]
    with open(path, "w", encoding="utf-8-sig", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=_EXPORT_FIELDS)
        writer.writeheader()
        writer.writerows(rows)


def _write_json(studies: list[StudyReview], path: Path) -> None:
    """Write studies as pretty-printed JSON, answers included."""
    data = [s.model_dump(mode="json") for s in studies]
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False))


def _write_ris(studies: list[StudyReview], path: Path) -> None:
    """Write studies as RIS using rispy."""
    import rispy  # type: ignore[import-untyped]  # noqa: PLC0415

    entries: list[dict[str, Any]] = []
    for study in studies:
        entry: dict[str, Any] = {
            "type_of_reference": _RIS_TYPES[study.study_type],
            "id": str(study.study_id),
            "title": study.title,
            "authors": [a.strip() for a in study.authors.split(" and ") if a.strip()],
            "year": str(study.year),
            "secondary_title": study.venue,
        }
        if study.abstract:
            entry["abstract"] = study.abstract
        if study.doi:
            entry["doi"] = study.doi
        if study.keywords:
            entry["keywords"] = sorted(study.keywords)
        entries.append(entry)

    with open(path, "w", encoding="utf-8") as f:
        rispy.dump(entries, f)
