"""Duplicate resolution between two study reviews of the same systematic study."""
from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel

from sysreview.core.enums import SelectionStatus
from sysreview.core.exceptions import InvalidOperationError
from sysreview.review.study_review import StudyReview


class DuplicateMarkingResult(BaseModel):
    """Ids of the two study reviews touched by a duplicate marking.

    Attributes:
        systematic_study_id: Systematic study both reviews belong to.
        updated_study_id: Study that absorbed the duplicate's search sources.
        duplicated_study_id: Study now marked DUPLICATED.
    """

    systematic_study_id: UUID
    updated_study_id: int
    duplicated_study_id: int


def mark_as_duplicate(duplicate: StudyReview, target: StudyReview) -> DuplicateMarkingResult:
    """Mark ``duplicate`` as a duplicate of ``target``.

    The duplicate's selection status becomes DUPLICATED and its search
    sources are merged into the target's, so provenance survives even
    though the duplicate itself becomes inert. Both aggregates are checked
    before either is touched. Repeating the call leaves the target's
    source set unchanged.

    Args:
        duplicate: Study review being marked as duplicate.
        target: Study review that is kept.

    Returns:
        Ids of both affected study reviews.

    Raises:
        InvalidOperationError: Same study twice, or studies from different
            systematic studies.
    """
    if duplicate.systematic_study_id != target.systematic_study_id:
        raise InvalidOperationError(
            f"Study {duplicate.study_id} and study {target.study_id} belong to "
            "different systematic studies"
        )
    if duplicate.study_id == target.study_id:
        raise InvalidOperationError(
            f"Study {duplicate.study_id} cannot be a duplicate of itself"
        )

    merged_sources = target.search_sources | duplicate.search_sources

    duplicate.selection_status = SelectionStatus.DUPLICATED
    target.search_sources = merged_sources

    return DuplicateMarkingResult(
        systematic_study_id=target.systematic_study_id,
        updated_study_id=target.study_id,
        duplicated_study_id=duplicate.study_id,
    )
