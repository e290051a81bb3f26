"""Custom exception hierarchy for sysreview.

Never use bare except clauses. Always catch specific exceptions.
"""
from __future__ import annotations

from typing import Any


class SysReviewError(Exception):
    """Base exception for all sysreview errors."""


# Bibliographic conversion exceptions
class ConversionError(SysReviewError):
    """Base for failures converting bibliographic input into studies.

    Attributes:
        citation_key: Key of the offending entry, when known.
    """

    def __init__(self, message: str, citation_key: str | None = None) -> None:
        super().__init__(message)
        self.citation_key = citation_key


class InputFormatError(ConversionError):
    """Blank or unparseable bibliographic input."""


class UnsupportedTypeError(ConversionError):
    """Entry declares a reference type outside the supported set."""

    def __init__(self, token: str, citation_key: str | None = None) -> None:
        super().__init__(f"Unknown type of entry: '{token}'", citation_key=citation_key)
        self.token = token


class MissingFieldError(ConversionError):
    """A field required by the entry's type is absent."""

    def __init__(self, field_name: str, citation_key: str | None = None) -> None:
        super().__init__(
            f"Missing required field '{field_name}' in entry '{citation_key}'",
            citation_key=citation_key,
        )
        self.field_name = field_name


class FieldFormatError(ConversionError):
    """A present field has a malformed value (blank text, bad year, bad DOI)."""

    def __init__(
        self,
        field_name: str,
        value: str,
        reason: str,
        citation_key: str | None = None,
    ) -> None:
        super().__init__(
            f"Invalid {field_name} '{value}' in entry '{citation_key}': {reason}",
            citation_key=citation_key,
        )
        self.field_name = field_name
        self.value = value


class UnsupportedFormatError(SysReviewError):
    """Unsupported bibliographic or export file format."""

    def __init__(self, format: str, supported: list[str] | None = None) -> None:  # noqa: A002
        supported_str = ", ".join(supported) if supported else "unknown"
        super().__init__(f"Unsupported format '{format}'. Supported: {supported_str}")
        self.format = format
        self.supported = supported or []


# Question / answer exceptions
class AnswerError(SysReviewError):
    """Base for rejected answers.

    Attributes:
        question_id: Question the answer was given to.
    """

    def __init__(self, message: str, question_id: Any = None) -> None:  # noqa: ANN401
        super().__init__(message)
        self.question_id = question_id


class AnswerTypeMismatchError(AnswerError):
    """Answer kind differs from the question kind."""

    def __init__(self, question_id: Any, expected: str, actual: str) -> None:  # noqa: ANN401
        super().__init__(
            f"Type mismatch: answer is of type '{actual}', "
            f"but question {question_id} is of type '{expected}'",
            question_id=question_id,
        )
        self.expected = expected
        self.actual = actual


class AnswerValueError(AnswerError):
    """Answer value lies outside the question's allowed domain."""


# Lookup / state exceptions
class NotFoundError(SysReviewError):
    """A referenced question, study review or systematic study does not exist."""

    def __init__(self, entity: str, identifier: Any, scope: Any = None) -> None:  # noqa: ANN401
        message = f"{entity} with id {identifier} was not found"
        if scope is not None:
            message += f" in systematic study {scope}"
        super().__init__(message + "!")
        self.entity = entity
        self.identifier = identifier
        self.scope = scope


class InvalidStatusError(SysReviewError):
    """Unknown selection/extraction status or reading priority name."""

    def __init__(self, kind: str, value: str, allowed: list[str]) -> None:
        super().__init__(
            f"Invalid {kind} '{value}'. Allowed: {', '.join(allowed)}"
        )
        self.kind = kind
        self.value = value


class InvalidOperationError(SysReviewError):
    """Operation is not legal for the given aggregates."""


class ProtocolError(SysReviewError):
    """Invalid or incomplete review protocol."""


class ConfigError(SysReviewError):
    """Invalid configuration or question form file."""
