"""Tests for io/readers.py — file format readers."""
from __future__ import annotations

from pathlib import Path
from uuid import UUID

import pytest

from sysreview.core.exceptions import ConversionError, UnsupportedFormatError
from sysreview.core.ids import IdAllocator
from sysreview.io.readers import read_studies, read_text, splitter_for

FIXTURES = Path(__file__).parent.parent / "fixtures"


class TestReadBibTeX:
    """BibTeX reader tests."""

    def test_read_bibtex_returns_studies(self, review_id: UUID, allocator: IdAllocator) -> None:
        studies = read_studies(FIXTURES / "all_types.bib", review_id, allocator)
        assert len(studies) == 12

    def test_source_defaults_to_file_stem(self, review_id: UUID, allocator: IdAllocator) -> None:
        studies = read_studies(FIXTURES / "all_types.bib", review_id, allocator)
        assert studies[0].search_sources == {"all_types"}

    def test_explicit_source(self, review_id: UUID, allocator: IdAllocator) -> None:
        studies = read_studies(FIXTURES / "all_types.bib", review_id, allocator, source="ACM")
        assert studies[0].search_sources == {"ACM"}

    def test_invalid_file_raises(
        self, tmp_path: Path, review_id: UUID, allocator: IdAllocator,
    ) -> None:
        path = tmp_path / "bad.bib"
        path.write_text("@article{k1, title = {T}, author = {A}, year = {99}, journal = {J}}")
        with pytest.raises(ConversionError):
            read_studies(path, review_id, allocator)


class TestReadRIS:
    """RIS reader tests."""

    def test_read_ris_returns_studies(self, review_id: UUID, allocator: IdAllocator) -> None:
        studies = read_studies(FIXTURES / "sample.ris", review_id, allocator)
        assert len(studies) == 2
        assert studies[0].authors == "Smith, John and Doe, Jane"


class TestFormatDetection:

    def test_unsupported_extension(self, tmp_path: Path, review_id: UUID) -> None:
        path = tmp_path / "refs.xml"
        path.write_text("<xml/>")
        with pytest.raises(UnsupportedFormatError):
            read_studies(path, review_id, IdAllocator())

    def test_extension_case_insensitive(self) -> None:
        assert splitter_for(Path("REFS.BIB")) is splitter_for(Path("refs.bib"))

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            read_text(tmp_path / "missing.bib")

    def test_latin1_fallback(self, tmp_path: Path) -> None:
        path = tmp_path / "latin.bib"
        path.write_bytes("São Carlos".encode("latin-1"))
        assert read_text(path) == "São Carlos"
