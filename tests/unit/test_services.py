"""Tests for review/services.py — ingestion and study review services."""
from __future__ import annotations

from collections.abc import Callable
from uuid import UUID, uuid4

import pytest

from sysreview.core.enums import ExtractionStatus, ReadingPriority, SelectionStatus
from sysreview.core.exceptions import InvalidOperationError, InvalidStatusError, NotFoundError
from sysreview.core.ids import IdAllocator
from sysreview.questions.models import PickListQuestion, TextualQuestion
from sysreview.review.batch import AnswerDetail
from sysreview.review.repository import (
    InMemoryQuestionRepository,
    InMemorySearchSessionRepository,
    InMemoryStudyReviewRepository,
)
from sysreview.review.search_session import SearchSession
from sysreview.review.services import SearchSessionService, StudyIngestionService, StudyReviewService
from sysreview.review.study_review import StudyReview

StudyFactory = Callable[..., StudyReview]


class TestStudyIngestionService:

    @pytest.fixture
    def service(self, study_repository: InMemoryStudyReviewRepository) -> StudyIngestionService:
        return StudyIngestionService(study_repository, IdAllocator())

    def test_ingest_saves_every_study(
        self,
        service: StudyIngestionService,
        study_repository: InMemoryStudyReviewRepository,
        review_id: UUID,
        all_types_bibtex: str,
    ) -> None:
        result = service.ingest(review_id, all_types_bibtex, "Scopus")
        assert result.ok
        assert len(result.studies) == 12
        assert len(study_repository.find_all_from_review(review_id)) == 12
        assert len(study_repository.find_all_by_source(review_id, "Scopus")) == 12

    def test_reimport_continues_sequence(
        self,
        study_repository: InMemoryStudyReviewRepository,
        review_id: UUID,
        nash_bibtex: str,
    ) -> None:
        StudyIngestionService(study_repository, IdAllocator()).ingest(review_id, nash_bibtex)
        # A fresh allocator, as in a new process, must not reuse stored ids.
        result = StudyIngestionService(study_repository, IdAllocator()).ingest(review_id, nash_bibtex)
        assert [s.study_id for s in result.studies] == [2]

    def test_failure_saves_nothing(
        self,
        service: StudyIngestionService,
        study_repository: InMemoryStudyReviewRepository,
        review_id: UUID,
        nash_bibtex: str,
    ) -> None:
        blob = nash_bibtex + "@patent{p1, title = {T}, author = {A}, year = {2000}}"
        result = service.ingest(review_id, blob)
        assert not result.ok
        assert result.studies == []
        assert len(result.errors) == 1
        assert result.errors[0].citation_key == "p1"
        assert "Unknown type of entry: 'patent'" in result.errors[0].message
        assert study_repository.find_all_from_review(review_id) == []

    def test_blank_input_reported(self, service: StudyIngestionService, review_id: UUID) -> None:
        result = service.ingest(review_id, "   ")
        assert not result.ok
        assert result.errors[0].citation_key is None


class TestIngestionSearchSessions:

    @pytest.fixture
    def sessions(self) -> InMemorySearchSessionRepository:
        return InMemorySearchSessionRepository()

    @pytest.fixture
    def service(
        self,
        study_repository: InMemoryStudyReviewRepository,
        sessions: InMemorySearchSessionRepository,
    ) -> StudyIngestionService:
        return StudyIngestionService(study_repository, IdAllocator(), sessions)

    def test_import_creates_session(
        self,
        service: StudyIngestionService,
        sessions: InMemorySearchSessionRepository,
        study_repository: InMemoryStudyReviewRepository,
        review_id: UUID,
        all_types_bibtex: str,
    ) -> None:
        result = service.ingest(
            review_id, all_types_bibtex, "Scopus", search_string="game theory", additional_info="n",
        )
        (session,) = sessions.find_all(review_id)
        assert result.search_session_id == session.session_id
        assert (session.source, session.search_string, session.additional_info) == (
            "Scopus", "game theory", "n",
        )
        assert all(s.search_session_id == session.session_id for s in result.studies)
        assert len(study_repository.find_all_by_session(review_id, session.session_id)) == 12

    def test_each_import_is_its_own_session(
        self,
        service: StudyIngestionService,
        sessions: InMemorySearchSessionRepository,
        study_repository: InMemoryStudyReviewRepository,
        review_id: UUID,
        nash_bibtex: str,
    ) -> None:
        first = service.ingest(review_id, nash_bibtex, "Scopus")
        second = service.ingest(review_id, nash_bibtex, "IEEE")
        assert first.search_session_id != second.search_session_id
        assert len(sessions.find_all(review_id)) == 2
        by_session = study_repository.find_all_by_session(review_id, second.search_session_id)
        assert [s.study_id for s in by_session] == [2]

    def test_import_into_existing_session(
        self,
        service: StudyIngestionService,
        sessions: InMemorySearchSessionRepository,
        review_id: UUID,
        nash_bibtex: str,
    ) -> None:
        session = SearchSessionService(sessions).create(review_id, "ACM", "nash")
        result = service.ingest(review_id, nash_bibtex, session=session)
        assert result.search_session_id == session.session_id
        assert result.studies[0].search_sources == {"ACM"}
        assert len(sessions.find_all(review_id)) == 1

    def test_session_from_other_review_rejected(
        self, service: StudyIngestionService, review_id: UUID, nash_bibtex: str,
    ) -> None:
        session = SearchSession(systematic_study_id=uuid4(), source="ACM")
        with pytest.raises(InvalidOperationError, match="does not belong"):
            service.ingest(review_id, nash_bibtex, session=session)

    def test_failed_import_records_no_session(
        self,
        service: StudyIngestionService,
        sessions: InMemorySearchSessionRepository,
        review_id: UUID,
    ) -> None:
        result = service.ingest(review_id, "@patent{p1, title = {T}}", "Scopus")
        assert not result.ok
        assert result.search_session_id is None
        assert sessions.find_all(review_id) == []

    def test_without_source_no_session(
        self,
        service: StudyIngestionService,
        sessions: InMemorySearchSessionRepository,
        review_id: UUID,
        nash_bibtex: str,
    ) -> None:
        result = service.ingest(review_id, nash_bibtex)
        assert result.search_session_id is None
        assert result.studies[0].search_session_id is None
        assert sessions.find_all(review_id) == []


class TestStudyReviewService:

    @pytest.fixture
    def service(
        self,
        study_repository: InMemoryStudyReviewRepository,
        question_repository: InMemoryQuestionRepository,
    ) -> StudyReviewService:
        return StudyReviewService(study_repository, question_repository)

    @pytest.fixture(autouse=True)
    def _stored(
        self,
        study_repository: InMemoryStudyReviewRepository,
        review_id: UUID,
        study_factory: StudyFactory,
    ) -> None:
        study_repository.save_or_update_batch([
            study_factory(review_id, 1, {"Scopus"}),
            study_factory(review_id, 2, {"IEEE"}),
        ])

    def test_find_missing(self, service: StudyReviewService, review_id: UUID) -> None:
        with pytest.raises(NotFoundError, match="Review with id 9 was not found"):
            service.find(review_id, 9)

    def test_status_updates_persisted(
        self,
        service: StudyReviewService,
        study_repository: InMemoryStudyReviewRepository,
        review_id: UUID,
    ) -> None:
        service.update_selection_status(review_id, 1, "INCLUDED")
        service.update_extraction_status(review_id, 1, ExtractionStatus.EXCLUDED)
        service.update_reading_priority(review_id, 1, "medium")
        stored = study_repository.find_by_id(review_id, 1)
        assert stored is not None
        assert stored.selection_status == SelectionStatus.INCLUDED
        assert stored.extraction_status == ExtractionStatus.EXCLUDED
        assert stored.reading_priority == ReadingPriority.MEDIUM

    def test_invalid_status_not_persisted(
        self,
        service: StudyReviewService,
        study_repository: InMemoryStudyReviewRepository,
        review_id: UUID,
    ) -> None:
        with pytest.raises(InvalidStatusError):
            service.update_extraction_status(review_id, 1, "DISPATCHED")
        stored = study_repository.find_by_id(review_id, 1)
        assert stored is not None
        assert stored.extraction_status == ExtractionStatus.UNCLASSIFIED

    def test_find_all_by_source(self, service: StudyReviewService, review_id: UUID) -> None:
        assert [s.study_id for s in service.find_all_by_source(review_id, "IEEE")] == [2]
        assert [s.study_id for s in service.find_all(review_id)] == [1, 2]

    def test_mark_as_duplicated_saves_both(
        self,
        service: StudyReviewService,
        study_repository: InMemoryStudyReviewRepository,
        review_id: UUID,
    ) -> None:
        result = service.mark_as_duplicated(review_id, 1, 2)
        assert (result.updated_study_id, result.duplicated_study_id) == (1, 2)
        target = study_repository.find_by_id(review_id, 1)
        duplicate = study_repository.find_by_id(review_id, 2)
        assert target is not None and duplicate is not None
        assert target.search_sources == {"Scopus", "IEEE"}
        assert duplicate.selection_status == SelectionStatus.DUPLICATED

    def test_mark_as_duplicated_missing_study(
        self,
        service: StudyReviewService,
        study_repository: InMemoryStudyReviewRepository,
        review_id: UUID,
    ) -> None:
        with pytest.raises(NotFoundError):
            service.mark_as_duplicated(review_id, 1, 42)
        target = study_repository.find_by_id(review_id, 1)
        assert target is not None
        assert target.search_sources == {"Scopus"}

    def test_mark_as_duplicated_self(self, service: StudyReviewService, review_id: UUID) -> None:
        with pytest.raises(InvalidOperationError):
            service.mark_as_duplicated(review_id, 1, 1)

    def test_batch_answer_persists_successes(
        self,
        service: StudyReviewService,
        study_repository: InMemoryStudyReviewRepository,
        review_id: UUID,
        textual_question: TextualQuestion,
        pick_list_question: PickListQuestion,
    ) -> None:
        details = [
            AnswerDetail(question_id=textual_question.question_id, type="TEXTUAL", answer="ok"),
            AnswerDetail(question_id=pick_list_question.question_id, type="PICK_LIST", answer="Survey"),
        ]
        result = service.batch_answer(review_id, 1, details)
        assert result.total_answered == 1
        stored = study_repository.find_by_id(review_id, 1)
        assert stored is not None
        assert set(stored.form_answers) == {textual_question.question_id}

    def test_batch_answer_missing_study(self, service: StudyReviewService) -> None:
        with pytest.raises(NotFoundError):
            service.batch_answer(uuid4(), 1, [])

    def test_batch_answer_needs_questions(
        self, study_repository: InMemoryStudyReviewRepository, review_id: UUID,
    ) -> None:
        with pytest.raises(ValueError, match="question repository"):
            StudyReviewService(study_repository).batch_answer(review_id, 1, [])
