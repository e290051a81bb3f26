"""Application services: load aggregates, run the core operation, save.

Each service call is one logical write against one systematic study;
callers serialize concurrent calls on the same review.
"""
from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

import structlog

from sysreview.core.enums import ExtractionStatus, ReadingPriority, SelectionStatus
from sysreview.core.exceptions import ConversionError, InvalidOperationError, NotFoundError
from sysreview.core.ids import IdAllocator
from sysreview.io.converter import BibtexConverter, ConversionFailure, ConversionResult, EntrySplitter
from sysreview.io.lexer import split_entries
from sysreview.review.batch import AnswerDetail, BatchAnswerProcessor, BatchAnswerResult
from sysreview.review.duplicates import DuplicateMarkingResult, mark_as_duplicate
from sysreview.review.repository import (
    QuestionRepository,
    SearchSessionRepository,
    StudyReviewRepository,
)
from sysreview.review.search_session import SearchSession
from sysreview.review.study_review import StudyReview

logger = structlog.get_logger(__name__)


class StudyIngestionService:
    """Convert bibliographic text into new study reviews and persist them.

    The id sequence of a review is seeded from the repository's highest
    stored id before converting, so re-imports continue the sequence. When
    a search session store is given, every successful import is recorded as
    a search session and its id is stamped on the new study reviews.

    Args:
        repository: Study review store.
        allocator: Id allocator shared by every ingestion into the same store.
        sessions: Search session store; without one, imports are not tracked
            unless an explicit session is passed to ``ingest``.
    """

    def __init__(
        self,
        repository: StudyReviewRepository,
        allocator: IdAllocator,
        sessions: SearchSessionRepository | None = None,
    ) -> None:
        self._repository = repository
        self._allocator = allocator
        self._sessions = sessions

    def ingest(
        self,
        systematic_study_id: UUID,
        blob: str,
        source: str | None = None,
        splitter: EntrySplitter = split_entries,
        session: SearchSession | None = None,
        search_string: str = "",
        additional_info: str | None = None,
    ) -> ConversionResult:
        """Convert and save every entry of ``blob``, or nothing at all.

        Args:
            systematic_study_id: Review the studies are imported into.
            blob: Bibliographic text.
            source: Search source label recorded on every study. Defaults to
                the session's source when a session is given.
            splitter: Entry splitter for the text's format.
            session: Existing search session the import belongs to.
            search_string: Query recorded on a newly created session.
            additional_info: Notes recorded on a newly created session.

        Returns:
            Converted studies, or the single failure that aborted the import.

        Raises:
            InvalidOperationError: If ``session`` belongs to another systematic study.
        """
        if session is not None:
            if session.systematic_study_id != systematic_study_id:
                raise InvalidOperationError(
                    f"Search session {session.session_id} does not belong to "
                    f"systematic study {systematic_study_id}"
                )
            source = source or session.source
        elif self._sessions is not None and source:
            session = SearchSession(
                systematic_study_id=systematic_study_id,
                source=source,
                search_string=search_string,
                additional_info=additional_info,
            )

        last_id = self._repository.max_study_id(systematic_study_id)
        if self._allocator.peek(systematic_study_id) <= last_id:
            self._allocator.seed(systematic_study_id, last_id)

        converter = BibtexConverter(self._allocator, splitter=splitter)
        try:
            studies = converter.convert_many(systematic_study_id, blob, source)
        except ConversionError as exc:
            logger.warning(
                "ingestion_aborted",
                systematic_study_id=str(systematic_study_id),
                citation_key=exc.citation_key,
                error=str(exc),
            )
            return ConversionResult(
                errors=[ConversionFailure(citation_key=exc.citation_key, message=str(exc))]
            )

        session_id = session.session_id if session is not None else None
        for study in studies:
            study.search_session_id = session_id
        if session is not None and self._sessions is not None:
            self._sessions.save_or_update(session)
        self._repository.save_or_update_batch(studies)
        logger.info(
            "studies_ingested",
            systematic_study_id=str(systematic_study_id),
            source=source,
            session_id=str(session_id) if session_id is not None else None,
            n_studies=len(studies),
        )
        return ConversionResult(studies=studies, search_session_id=session_id)


class SearchSessionService:
    """Create, look up and edit the search sessions of a systematic study.

    Args:
        sessions: Search session store.
    """

    def __init__(self, sessions: SearchSessionRepository) -> None:
        self._sessions = sessions

    def create(
        self,
        systematic_study_id: UUID,
        source: str,
        search_string: str = "",
        additional_info: str | None = None,
    ) -> SearchSession:
        """Create and persist a new search session."""
        session = SearchSession(
            systematic_study_id=systematic_study_id,
            source=source,
            search_string=search_string,
            additional_info=additional_info,
        )
        self._sessions.save_or_update(session)
        logger.info(
            "search_session_created",
            systematic_study_id=str(systematic_study_id),
            session_id=str(session.session_id),
            source=session.source,
        )
        return session

    def find(self, systematic_study_id: UUID, session_id: UUID) -> SearchSession:
        """Load one search session.

        Raises:
            NotFoundError: If the session does not exist in the systematic study.
        """
        session = self._sessions.find_by_id(systematic_study_id, session_id)
        if session is None:
            raise NotFoundError("Search session", session_id, systematic_study_id)
        return session

    def find_all(self, systematic_study_id: UUID) -> list[SearchSession]:
        """All search sessions of a systematic study, oldest first."""
        return self._sessions.find_all(systematic_study_id)

    def update(
        self,
        systematic_study_id: UUID,
        session_id: UUID,
        search_string: str | None = None,
        additional_info: str | None = None,
        source: str | None = None,
    ) -> SearchSession:
        """Edit a stored session; ``None`` arguments leave attributes unchanged.

        Raises:
            NotFoundError: If the session does not exist in the systematic study.
        """
        session = self.find(systematic_study_id, session_id)
        session.update(search_string=search_string, additional_info=additional_info, source=source)
        self._sessions.save_or_update(session)
        logger.info(
            "search_session_updated",
            systematic_study_id=str(systematic_study_id),
            session_id=str(session_id),
        )
        return session


class StudyReviewService:
    """Screening, duplicate and answering operations on stored study reviews.

    Args:
        repository: Study review store.
        questions: Question definitions, needed for answering.
    """

    def __init__(
        self,
        repository: StudyReviewRepository,
        questions: QuestionRepository | None = None,
    ) -> None:
        self._repository = repository
        self._questions = questions

    def find(self, systematic_study_id: UUID, study_id: int) -> StudyReview:
        """Load one study review.

        Raises:
            NotFoundError: If the study review does not exist.
        """
        review = self._repository.find_by_id(systematic_study_id, study_id)
        if review is None:
            raise NotFoundError("Review", study_id, systematic_study_id)
        return review

    def find_all(self, systematic_study_id: UUID) -> list[StudyReview]:
        """All study reviews of a systematic study, by study id."""
        return self._repository.find_all_from_review(systematic_study_id)

    def find_all_by_source(self, systematic_study_id: UUID, source: str) -> list[StudyReview]:
        """Study reviews found in a given search source."""
        return self._repository.find_all_by_source(systematic_study_id, source)

    def find_all_by_session(self, systematic_study_id: UUID, session_id: UUID) -> list[StudyReview]:
        """Study reviews imported through a given search session."""
        return self._repository.find_all_by_session(systematic_study_id, session_id)

    def update_selection_status(
        self, systematic_study_id: UUID, study_id: int, status: SelectionStatus | str
    ) -> StudyReview:
        """Set and persist a study's selection status."""
        review = self.find(systematic_study_id, study_id)
        review.set_selection_status(status)
        return self._save(review, "selection_status_updated", status=review.selection_status)

    def update_extraction_status(
        self, systematic_study_id: UUID, study_id: int, status: ExtractionStatus | str
    ) -> StudyReview:
        """Set and persist a study's extraction status."""
        review = self.find(systematic_study_id, study_id)
        review.set_extraction_status(status)
        return self._save(review, "extraction_status_updated", status=review.extraction_status)

    def update_reading_priority(
        self, systematic_study_id: UUID, study_id: int, priority: ReadingPriority | str
    ) -> StudyReview:
        """Set and persist a study's reading priority."""
        review = self.find(systematic_study_id, study_id)
        review.set_reading_priority(priority)
        return self._save(review, "reading_priority_updated", priority=review.reading_priority)

    def mark_as_duplicated(
        self,
        systematic_study_id: UUID,
        target_study_id: int,
        duplicate_study_id: int,
    ) -> DuplicateMarkingResult:
        """Mark one study as duplicate of another and persist both.

        Both studies are loaded before either is modified.

        Raises:
            NotFoundError: If either study review does not exist.
            InvalidOperationError: If both ids name the same study.
        """
        target = self.find(systematic_study_id, target_study_id)
        duplicate = self.find(systematic_study_id, duplicate_study_id)
        result = mark_as_duplicate(duplicate, target)
        self._repository.save_or_update_batch([target, duplicate])
        logger.info(
            "study_marked_duplicated",
            systematic_study_id=str(systematic_study_id),
            updated_study_id=result.updated_study_id,
            duplicated_study_id=result.duplicated_study_id,
        )
        return result

    def batch_answer(
        self,
        systematic_study_id: UUID,
        study_id: int,
        details: Sequence[AnswerDetail],
    ) -> BatchAnswerResult:
        """Apply a batch of answers and persist the study once.

        The study is saved even when some (or all) answers were rejected.

        Raises:
            NotFoundError: If the study review does not exist.
        """
        if self._questions is None:
            raise ValueError("A question repository is required for answering.")
        review = self.find(systematic_study_id, study_id)
        result = BatchAnswerProcessor(self._questions).process(review, details)
        self._repository.save_or_update(review)
        logger.info(
            "batch_answered",
            systematic_study_id=str(systematic_study_id),
            study_id=study_id,
            n_succeeded=result.total_answered,
            n_failed=len(result.failed_answers),
        )
        return result

    def _save(self, review: StudyReview, event: str, **context: object) -> StudyReview:
        self._repository.save_or_update(review)
        logger.info(
            event,
            systematic_study_id=str(review.systematic_study_id),
            study_id=review.study_id,
            **context,
        )
        return review
