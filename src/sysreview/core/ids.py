"""Sequential per-review study identifiers."""
from __future__ import annotations

from uuid import UUID


class IdAllocator:
    """Issue sequential integer study ids, one sequence per systematic study.

    The allocator is plain mutable state. Callers serialize access to a
    review (one write transaction per request); no locking is done here.

    Args:
        start: First id issued for a fresh review scope.
    """

    def __init__(self, start: int = 1) -> None:
        if start < 1:
            raise ValueError("Identifiers start at 1 or above.")
        self._start = start
        self._last: dict[UUID, int] = {}

    def next_id(self, review_id: UUID) -> int:
        """Return the next unused id for a review and advance its sequence."""
        current = self._last.get(review_id, self._start - 1) + 1
        self._last[review_id] = current
        return current

    def peek(self, review_id: UUID) -> int:
        """Return the id ``next_id`` would issue, without consuming it."""
        return self._last.get(review_id, self._start - 1) + 1

    def seed(self, review_id: UUID, last_id: int) -> None:
        """Continue a review's sequence after ``last_id``.

        Used when re-importing into a review that already holds studies.
        """
        self._last[review_id] = max(last_id, self._start - 1)

    def reset(self, review_id: UUID | None = None) -> None:
        """Restart one review's sequence, or every sequence when no id is given."""
        if review_id is None:
            self._last.clear()
        else:
            self._last.pop(review_id, None)
