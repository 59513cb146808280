# app/agent/errors.py

from dataclasses import dataclass
from typing import Iterable, List, Optional

from pydantic import ValidationError  # type: ignore

MAX_REPORTED_ISSUES = 8


@dataclass(frozen=True)
class ValidationIssue:
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


def issues_from_validation_error(error: ValidationError) -> List[ValidationIssue]:
    """
    Flatten pydantic errors into (path, message) pairs.
    Paths use wire names, e.g. steps.0.id
    """
    issues = []
    for err in error.errors():
        path = ".".join(str(part) for part in err.get("loc", ())) or "(root)"
        issues.append(ValidationIssue(path=path, message=err.get("msg", "")))
    return issues


def summarize_issues(issues: Iterable[ValidationIssue]) -> str:
    return "; ".join(str(issue) for issue in list(issues)[:MAX_REPORTED_ISSUES])


class DiagnoseError(Exception):
    """Base class for diagnose failures"""


class ConfigurationError(DiagnoseError):
    status_code = 500


class InputValidationError(DiagnoseError):
    status_code = 400

    def __init__(self, issues: List[ValidationIssue]):
        self.issues = issues
        super().__init__(summarize_issues(issues))


class GenerationError(DiagnoseError):
    """
    A model attempt that could not be turned into a valid plan.
    Carries the raw model text so the caller can report it.
    """

    status_code = 500

    def __init__(self, raw: str, issues: List[ValidationIssue], message: Optional[str] = None):
        self.raw = raw
        self.issues = issues
        super().__init__(message or summarize_issues(issues))

    @property
    def summary(self) -> str:
        return summarize_issues(self.issues)


class GenerationParseError(GenerationError):
    pass


class GenerationSchemaError(GenerationError):
    pass
