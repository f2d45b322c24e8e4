"""Error taxonomy shared by import, merge and reporting.

Two shapes live here:

* ``ImportIssue`` records, collected while parsing/importing and exported to
  the CSV error log. They describe data problems and do not unwind anything.
* ``KindredError`` exceptions, raised when an operation cannot continue.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from datetime import UTC, datetime
from enum import StrEnum
from typing import ClassVar


class ErrorCode(StrEnum):
    UNSUPPORTED_VERSION = "UNSUPPORTED_VERSION"
    PARSE_ERROR = "PARSE_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    VALIDATION_WARNING = "VALIDATION_WARNING"
    CONSTRAINT_VIOLATION = "CONSTRAINT_VIOLATION"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class ErrorSeverity(StrEnum):
    ERROR = "Error"
    WARNING = "Warning"


@dataclass(frozen=True, slots=True, kw_only=True)
class ImportIssue:
    """One error or warning attached to an import, optionally located in the file."""

    severity: ErrorSeverity
    code: ErrorCode
    message: str
    line: int | None = None
    gedcom_id: str | None = None
    individual_name: str | None = None
    field: str | None = None
    suggested_fix: str | None = None
    created_at: datetime = dataclass_field(default_factory=lambda: datetime.now(tz=UTC), compare=False)

    @classmethod
    def error(
        cls,
        message: str,
        *,
        code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        line: int | None = None,
        gedcom_id: str | None = None,
        individual_name: str | None = None,
        field: str | None = None,
        suggested_fix: str | None = None,
    ) -> ImportIssue:
        return cls(
            severity=ErrorSeverity.ERROR,
            code=code,
            message=message,
            line=line,
            gedcom_id=gedcom_id,
            individual_name=individual_name,
            field=field,
            suggested_fix=suggested_fix,
        )

    @classmethod
    def warning(
        cls,
        message: str,
        *,
        line: int | None = None,
        gedcom_id: str | None = None,
        individual_name: str | None = None,
        field: str | None = None,
        suggested_fix: str | None = None,
    ) -> ImportIssue:
        return cls(
            severity=ErrorSeverity.WARNING,
            code=ErrorCode.VALIDATION_WARNING,
            message=message,
            line=line,
            gedcom_id=gedcom_id,
            individual_name=individual_name,
            field=field,
            suggested_fix=suggested_fix,
        )

    @property
    def is_error(self) -> bool:
        return self.severity is ErrorSeverity.ERROR


_GEDCOM_ID_DECORATION = re.compile(r"[@I]")


def individual_number(gedcom_id: str) -> str:
    """``"@I045@"`` -> ``"45"``."""
    return _GEDCOM_ID_DECORATION.sub("", gedcom_id).lstrip("0")


def format_issue(issue: ImportIssue) -> str:
    """Render an issue as the multi-line message shown to users."""
    parts: list[str] = []

    if issue.gedcom_id:
        parts.append(f"Import failed at individual #{individual_number(issue.gedcom_id)}")

    if issue.line:
        parts.append(f"Line {issue.line} in GEDCOM file")

    if issue.individual_name and issue.gedcom_id:
        parts.append(f"Individual: {issue.individual_name} ({issue.gedcom_id})")
    elif issue.individual_name:
        parts.append(f"Individual: {issue.individual_name}")
    elif issue.gedcom_id:
        parts.append(f"GEDCOM ID: {issue.gedcom_id}")

    if issue.field:
        parts.append(f"Field: {issue.field}")

    if issue.code is ErrorCode.CONSTRAINT_VIOLATION:
        parts.append(f"Database constraint violation: {issue.message}")
    else:
        parts.append(f"Error: {issue.message}")

    if issue.suggested_fix:
        parts.append(f"Suggested fix: {issue.suggested_fix}")

    return "\n".join(parts)


class KindredError(Exception):
    """Base class for failures the application reports to callers."""

    code: ClassVar[ErrorCode] = ErrorCode.UNKNOWN_ERROR


class UnsupportedVersionError(KindredError):
    code = ErrorCode.UNSUPPORTED_VERSION

    def __init__(self, version: str | None) -> None:
        self.version = version
        if version is None:
            message = "GEDCOM version not found in file"
        else:
            message = f"GEDCOM version {version} is not supported. Please use version 5.5.1 or 7.0"
        super().__init__(message)


class GedcomParseError(KindredError):
    code = ErrorCode.PARSE_ERROR

    def __init__(self, message: str, *, line: int | None = None) -> None:
        self.line = line
        super().__init__(message if line is None else f"Line {line}: {message}")


class ConstraintViolationError(KindredError):
    """The store rejected a write (unique key, foreign key or check)."""

    code = ErrorCode.CONSTRAINT_VIOLATION


class ImportFailedError(KindredError):
    """An import aborted; nothing it wrote is visible."""

    def __init__(self, issue: ImportIssue) -> None:
        self.issue = issue
        super().__init__(issue.message)

    @property
    def code(self) -> ErrorCode:  # type: ignore[override]
        return self.issue.code


class PersonNotFoundError(KindredError):
    def __init__(self, person_id: int) -> None:
        self.person_id = person_id
        super().__init__(f"Person {person_id} not found")


class OwnerNotFoundError(KindredError):
    def __init__(self, owner_id: int) -> None:
        self.owner_id = owner_id
        super().__init__(f"Owner {owner_id} not found")


class MergeBlockedError(KindredError):
    """Merge request is invalid as stated (self-merge, hard field conflict)."""

    code = ErrorCode.VALIDATION_ERROR

    def __init__(self, message: str, *, errors: tuple[str, ...] = ()) -> None:
        self.errors = errors or (message,)
        super().__init__(message)


class ForbiddenMergeError(KindredError):
    """Merge would touch a record the owner may not merge away."""

    code = ErrorCode.VALIDATION_ERROR


def classify_failure(exc: BaseException) -> ImportIssue:
    """Map a storage-time exception to the issue reported for a failed import."""
    if isinstance(exc, ImportFailedError):
        return exc.issue
    detail = str(exc)
    if isinstance(exc, ConstraintViolationError) or "constraint" in detail.lower():
        if "FOREIGN KEY" in detail.upper():
            message = "Invalid relationship reference"
        else:
            message = "Duplicate record detected"
        return ImportIssue.error(
            message,
            code=ErrorCode.CONSTRAINT_VIOLATION,
            suggested_fix="Review duplicate resolutions and retry the import",
        )
    if isinstance(exc, TimeoutError) or "timeout" in detail.lower():
        return ImportIssue.error(
            "Import timed out - please try again. Large imports may take several minutes.",
            code=ErrorCode.TIMEOUT_ERROR,
        )
    if isinstance(exc, ConnectionError):
        return ImportIssue.error(
            f"Connection to the database failed: {detail}",
            code=ErrorCode.NETWORK_ERROR,
            suggested_fix="Check the database connection and retry the import",
        )
    return ImportIssue.error(f"Import failed: {detail}", code=ErrorCode.UNKNOWN_ERROR)
