"""CSV export of import errors and warnings."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable

    from kindred.domain.errors import ImportIssue

CSV_HEADER: Final[tuple[str, ...]] = (
    "Severity",
    "Line",
    "GEDCOM ID",
    "Name",
    "Field",
    "Error",
    "Suggested Fix",
)

_QUOTE_TRIGGERS: Final[tuple[str, ...]] = (",", '"', "\n", ":")


def escape_csv_field(value: str | None) -> str:
    # colons are quoted too, which the csv module's minimal quoting would not do
    if not value:
        return ""
    if any(trigger in value for trigger in _QUOTE_TRIGGERS):
        return '"' + value.replace('"', '""') + '"'
    return value


def issue_row(issue: ImportIssue) -> tuple[str, ...]:
    return (
        str(issue.severity),
        "" if issue.line is None else str(issue.line),
        issue.gedcom_id or "",
        issue.individual_name or "",
        issue.field or "",
        issue.message or "",
        issue.suggested_fix or "",
    )


def issues_to_csv(issues: Iterable[ImportIssue]) -> str:
    """Header plus one row per issue, rows joined by ``\\n``."""
    rows = [CSV_HEADER, *(issue_row(issue) for issue in issues)]
    return "\n".join(",".join(escape_csv_field(value) for value in row) for row in rows)
