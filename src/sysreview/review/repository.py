"""Persistence collaborators for study reviews, search sessions and questions.

The core only depends on the ``StudyReviewRepository``,
``SearchSessionRepository`` and ``QuestionRepository`` protocols. Study
reviews and search sessions each come with an in-memory store for tests and
embedding, and a JSON-file store, one file per aggregate, used by the
command-line tool.
"""
from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Protocol
from uuid import UUID

import structlog

from sysreview.questions.models import Question
from sysreview.review.search_session import SearchSession
from sysreview.review.study_review import StudyReview

logger = structlog.get_logger(__name__)

DEFAULT_STORE_DIR = Path(".sysreview/studies")


class StudyReviewRepository(Protocol):
    """Lookup and save operations on study reviews."""

    def find_by_id(self, systematic_study_id: UUID, study_id: int) -> StudyReview | None: ...

    def find_all_from_review(self, systematic_study_id: UUID) -> list[StudyReview]: ...

    def find_all_by_source(self, systematic_study_id: UUID, source: str) -> list[StudyReview]: ...

    def find_all_by_session(
        self, systematic_study_id: UUID, session_id: UUID
    ) -> list[StudyReview]: ...

    def save_or_update(self, review: StudyReview) -> None: ...

    def save_or_update_batch(self, reviews: Iterable[StudyReview]) -> None: ...

    def max_study_id(self, systematic_study_id: UUID) -> int: ...


class QuestionRepository(Protocol):
    """Lookup of question definitions."""

    def find_by_id(self, systematic_study_id: UUID, question_id: UUID) -> Question | None: ...


class SearchSessionRepository(Protocol):
    """Lookup and save operations on search sessions."""

    def find_by_id(self, systematic_study_id: UUID, session_id: UUID) -> SearchSession | None: ...

    def find_all(self, systematic_study_id: UUID) -> list[SearchSession]: ...

    def save_or_update(self, session: SearchSession) -> None: ...


class InMemoryStudyReviewRepository:
    """Dict-backed study review store.

    Stored reviews are deep copies so callers cannot mutate persisted state
    without saving.
    """

    def __init__(self) -> None:
        self._reviews: dict[tuple[UUID, int], StudyReview] = {}

    def find_by_id(self, systematic_study_id: UUID, study_id: int) -> StudyReview | None:
        review = self._reviews.get((systematic_study_id, study_id))
        return review.model_copy(deep=True) if review is not None else None

    def find_all_from_review(self, systematic_study_id: UUID) -> list[StudyReview]:
        return [
            r.model_copy(deep=True)
            for (review_id, _), r in sorted(self._reviews.items(), key=lambda kv: kv[0][1])
            if review_id == systematic_study_id
        ]

    def find_all_by_source(self, systematic_study_id: UUID, source: str) -> list[StudyReview]:
        return [r for r in self.find_all_from_review(systematic_study_id) if source in r.search_sources]

    def find_all_by_session(self, systematic_study_id: UUID, session_id: UUID) -> list[StudyReview]:
        return [
            r for r in self.find_all_from_review(systematic_study_id)
            if r.search_session_id == session_id
        ]

    def save_or_update(self, review: StudyReview) -> None:
        self._reviews[(review.systematic_study_id, review.study_id)] = review.model_copy(deep=True)

    def save_or_update_batch(self, reviews: Iterable[StudyReview]) -> None:
        for review in reviews:
            self.save_or_update(review)

    def max_study_id(self, systematic_study_id: UUID) -> int:
        ids = [study_id for review_id, study_id in self._reviews if review_id == systematic_study_id]
        return max(ids, default=0)


class InMemoryQuestionRepository:
    """Dict-backed question store."""

    def __init__(self, questions: Iterable[Question] = ()) -> None:
        self._questions: dict[tuple[UUID, UUID], Question] = {}
        for question in questions:
            self.save(question)

    def save(self, question: Question) -> None:
        self._questions[(question.systematic_study_id, question.question_id)] = question

    def find_by_id(self, systematic_study_id: UUID, question_id: UUID) -> Question | None:
        return self._questions.get((systematic_study_id, question_id))


class JsonStudyReviewRepository:
    """Study reviews persisted as JSON files on disk.

    Layout: ``<store_dir>/<systematic_study_id>/<study_id>.json``.

    Args:
        store_dir: Root directory of the store.
    """

    def __init__(self, store_dir: Path = DEFAULT_STORE_DIR) -> None:
        self._dir = Path(store_dir)

    def _path(self, systematic_study_id: UUID, study_id: int) -> Path:
        return self._dir / str(systematic_study_id) / f"{study_id}.json"

    def find_by_id(self, systematic_study_id: UUID, study_id: int) -> StudyReview | None:
        path = self._path(systematic_study_id, study_id)
        if not path.exists():
            return None
        return StudyReview.model_validate_json(path.read_text(encoding="utf-8"))

    def find_all_from_review(self, systematic_study_id: UUID) -> list[StudyReview]:
        review_dir = self._dir / str(systematic_study_id)
        if not review_dir.exists():
            return []
        reviews = [
            StudyReview.model_validate_json(p.read_text(encoding="utf-8"))
            for p in review_dir.glob("*.json")
        ]
        return sorted(reviews, key=lambda r: r.study_id)

    def find_all_by_source(self, systematic_study_id: UUID, source: str) -> list[StudyReview]:
        return [r for r in self.find_all_from_review(systematic_study_id) if source in r.search_sources]

    def find_all_by_session(self, systematic_study_id: UUID, session_id: UUID) -> list[StudyReview]:
        return [
            r for r in self.find_all_from_review(systematic_study_id)
            if r.search_session_id == session_id
        ]

    def save_or_update(self, review: StudyReview) -> None:
        path = self._path(review.systematic_study_id, review.study_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(review.model_dump_json(indent=2), encoding="utf-8")
        logger.debug(
            "study_review_saved",
            systematic_study_id=str(review.systematic_study_id),
            study_id=review.study_id,
        )

    def save_or_update_batch(self, reviews: Iterable[StudyReview]) -> None:
        for review in reviews:
            self.save_or_update(review)

    def max_study_id(self, systematic_study_id: UUID) -> int:
        review_dir = self._dir / str(systematic_study_id)
        if not review_dir.exists():
            return 0
        ids = [int(p.stem) for p in review_dir.glob("*.json") if p.stem.isdigit()]
        return max(ids, default=0)


class InMemorySearchSessionRepository:
    """Dict-backed search session store."""

    def __init__(self) -> None:
        self._sessions: dict[tuple[UUID, UUID], SearchSession] = {}

    def find_by_id(self, systematic_study_id: UUID, session_id: UUID) -> SearchSession | None:
        session = self._sessions.get((systematic_study_id, session_id))
        return session.model_copy(deep=True) if session is not None else None

    def find_all(self, systematic_study_id: UUID) -> list[SearchSession]:
        sessions = [
            s.model_copy(deep=True)
            for (review_id, _), s in self._sessions.items()
            if review_id == systematic_study_id
        ]
        return sorted(sessions, key=lambda s: s.timestamp)

    def save_or_update(self, session: SearchSession) -> None:
        self._sessions[(session.systematic_study_id, session.session_id)] = session.model_copy(
            deep=True
        )


class JsonSearchSessionRepository:
    """Search sessions persisted next to the study reviews they produced.

    Layout: ``<store_dir>/<systematic_study_id>/sessions/<session_id>.json``.

    Args:
        store_dir: Root directory of the store, shared with the study reviews.
    """

    def __init__(self, store_dir: Path = DEFAULT_STORE_DIR) -> None:
        self._dir = Path(store_dir)

    def _session_dir(self, systematic_study_id: UUID) -> Path:
        return self._dir / str(systematic_study_id) / "sessions"

    def find_by_id(self, systematic_study_id: UUID, session_id: UUID) -> SearchSession | None:
        path = self._session_dir(systematic_study_id) / f"{session_id}.json"
        if not path.exists():
            return None
        return SearchSession.model_validate_json(path.read_text(encoding="utf-8"))

    def find_all(self, systematic_study_id: UUID) -> list[SearchSession]:
        session_dir = self._session_dir(systematic_study_id)
        if not session_dir.exists():
            return []
        sessions = [
            SearchSession.model_validate_json(p.read_text(encoding="utf-8"))
            for p in session_dir.glob("*.json")
        ]
        return sorted(sessions, key=lambda s: s.timestamp)

    def save_or_update(self, session: SearchSession) -> None:
        path = self._session_dir(session.systematic_study_id) / f"{session.session_id}.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(session.model_dump_json(indent=2), encoding="utf-8")
        logger.debug(
            "search_session_saved",
            systematic_study_id=str(session.systematic_study_id),
            session_id=str(session.session_id),
        )
