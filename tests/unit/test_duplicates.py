"""Tests for review/duplicates.py — duplicate marking."""
from __future__ import annotations

from collections.abc import Callable
from uuid import UUID, uuid4

import pytest

from sysreview.core.enums import SelectionStatus
from sysreview.core.exceptions import InvalidOperationError
from sysreview.review.duplicates import mark_as_duplicate
from sysreview.review.study_review import StudyReview

StudyFactory = Callable[..., StudyReview]


class TestMarkAsDuplicate:

    def test_status_and_source_union(self, review_id: UUID, study_factory: StudyFactory) -> None:
        target = study_factory(review_id, 1, {"Scopus"})
        duplicate = study_factory(review_id, 2, {"IEEE", "ACM"})

        result = mark_as_duplicate(duplicate, target)

        assert duplicate.selection_status == SelectionStatus.DUPLICATED
        assert duplicate.is_duplicated
        assert target.search_sources == {"Scopus", "IEEE", "ACM"}
        assert target.selection_status == SelectionStatus.UNCLASSIFIED
        assert result.updated_study_id == 1
        assert result.duplicated_study_id == 2
        assert result.systematic_study_id == review_id

    def test_idempotent(self, review_id: UUID, study_factory: StudyFactory) -> None:
        target = study_factory(review_id, 1, {"Scopus"})
        duplicate = study_factory(review_id, 2, {"IEEE"})
        mark_as_duplicate(duplicate, target)
        mark_as_duplicate(duplicate, target)
        assert target.search_sources == {"Scopus", "IEEE"}
        assert duplicate.selection_status == SelectionStatus.DUPLICATED

    def test_same_study_rejected(self, review_id: UUID, study_factory: StudyFactory) -> None:
        study = study_factory(review_id, 1)
        with pytest.raises(InvalidOperationError, match="itself"):
            mark_as_duplicate(study, study_factory(review_id, 1))

    def test_different_reviews_rejected(self, review_id: UUID, study_factory: StudyFactory) -> None:
        target = study_factory(review_id, 1, {"Scopus"})
        duplicate = study_factory(uuid4(), 2, {"IEEE"})
        with pytest.raises(InvalidOperationError, match="different systematic studies"):
            mark_as_duplicate(duplicate, target)
        assert target.search_sources == {"Scopus"}
        assert duplicate.selection_status == SelectionStatus.UNCLASSIFIED
