from __future__ import annotations

from typing import Any


class CollegeMatchError(Exception):
    """Base exception for the matching engine and its orchestration layer."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class PreconditionError(CollegeMatchError, ValueError):
    """A required input field is missing or out of range; callers must fix the input, not retry."""


class MissingIncomeBracketError(PreconditionError):
    def __init__(self, message: str = "Student must have incomeBracket set before scoring colleges") -> None:
        super().__init__(message, {"field": "income_bracket"})


class InvalidRecordError(PreconditionError):
    def __init__(self, record: str, field: str, value: object, expected: str) -> None:
        super().__init__(
            f"{record} field '{field}' must be {expected}; received {value!r}",
            {"record": record, "field": field, "value": value},
        )


class EmptyInputError(CollegeMatchError):
    """Nothing to do until an upstream step has run."""


class EmptyCollegeListError(EmptyInputError):
    def __init__(self, message: str = "No colleges on list. Run the Discovery Agent first.") -> None:
        super().__init__(message, {"upstream": "discovery"})


class NoActiveScholarshipsError(EmptyInputError):
    def __init__(
        self,
        message: str = "No scholarships in database. Seed the scholarship database first.",
    ) -> None:
        super().__init__(message, {"upstream": "scholarship_seed"})


class NoCandidateCollegesError(EmptyInputError):
    def __init__(self, message: str = "No colleges found. Refresh the college catalog first.") -> None:
        super().__init__(message, {"upstream": "catalog"})


class NoIntendedMajorError(EmptyInputError):
    def __init__(
        self,
        message: str = "Student must set an intended major before running the Career Agent",
    ) -> None:
        super().__init__(message, {"field": "intended_major"})


class StudentNotFoundError(CollegeMatchError):
    def __init__(self, student_id: str) -> None:
        super().__init__("Student profile not found", {"student_id": student_id})


class CollaboratorError(CollegeMatchError):
    """An external collaborator (text generation, wage data) failed."""

    def __init__(
        self,
        message: str,
        *,
        collaborator: str,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, {"collaborator": collaborator})
        self.original_error = original_error
