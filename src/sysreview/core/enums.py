"""Core enumerations for sysreview."""
from enum import StrEnum


class StudyType(StrEnum):
    """Bibliographic reference type of a study record."""

    ARTICLE = "ARTICLE"
    INPROCEEDINGS = "INPROCEEDINGS"
    TECHREPORT = "TECHREPORT"
    BOOK = "BOOK"
    PROCEEDINGS = "PROCEEDINGS"
    PHDTHESIS = "PHDTHESIS"
    MASTERSTHESIS = "MASTERSTHESIS"
    INBOOK = "INBOOK"
    BOOKLET = "BOOKLET"
    MANUAL = "MANUAL"
    MISC = "MISC"
    UNPUBLISHED = "UNPUBLISHED"


class SelectionStatus(StrEnum):
    """Screening-phase classification of a study."""

    UNCLASSIFIED = "UNCLASSIFIED"
    INCLUDED = "INCLUDED"
    EXCLUDED = "EXCLUDED"
    DUPLICATED = "DUPLICATED"


class ExtractionStatus(StrEnum):
    """Extraction-phase classification of a study."""

    UNCLASSIFIED = "UNCLASSIFIED"
    INCLUDED = "INCLUDED"
    EXCLUDED = "EXCLUDED"


class ReadingPriority(StrEnum):
    """How urgently a study should be read."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class QuestionContext(StrEnum):
    """Form a question belongs to."""

    EXTRACTION = "EXTRACTION"
    ROB = "ROB"  # quality assessment / risk of bias


class QuestionKind(StrEnum):
    """Closed set of question kinds.

    Values match the ``type`` token used in batch answer requests.
    """

    TEXTUAL = "TEXTUAL"
    PICK_LIST = "PICK_LIST"
    NUMBERED_SCALE = "NUMBERED_SCALE"
    LABELED_SCALE = "LABELED_SCALE"


class CriterionType(StrEnum):
    """Eligibility criterion polarity."""

    INCLUSION = "INCLUSION"
    EXCLUSION = "EXCLUSION"
