"""GEDCOM records and the pure rules applied to them."""

from __future__ import annotations

from .dates import INVALID_DATE_MESSAGE, MONTHS, normalize_date
from .mapping import append_date_modifier_note, gender_for_sex, individual_fields, split_name
from .records import DateModifier, Family, GedcomDate, GedcomDocument, Individual
from .statistics import DateRange, GedcomStatistics, extract_statistics
from .validation import (
    ConsistencyIssue,
    ConsistencyIssueType,
    OrphanReport,
    validate_individual,
    validate_orphaned_references,
    validate_relationship_consistency,
)

__all__ = [
    "INVALID_DATE_MESSAGE",
    "MONTHS",
    "ConsistencyIssue",
    "ConsistencyIssueType",
    "DateModifier",
    "DateRange",
    "Family",
    "GedcomDate",
    "GedcomDocument",
    "GedcomStatistics",
    "Individual",
    "OrphanReport",
    "append_date_modifier_note",
    "extract_statistics",
    "gender_for_sex",
    "individual_fields",
    "normalize_date",
    "split_name",
    "validate_individual",
    "validate_orphaned_references",
    "validate_relationship_consistency",
]
