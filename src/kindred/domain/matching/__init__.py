"""Duplicate detection with weighted confidence scoring."""

from __future__ import annotations

from .detect import (
    DEFAULT_THRESHOLD,
    DuplicateCandidate,
    find_all_duplicates,
    find_duplicates,
    find_duplicates_for_person,
    validate_query,
)
from .profiles import (
    MatchProfile,
    parent_family_key,
    parents_by_child,
    profile_for_individual,
    profile_for_person,
    profiles_for_persons,
)
from .scoring import (
    MatchField,
    MatchScore,
    calculate_match_confidence,
    compare_dates,
    compare_names,
    compare_parents,
)

__all__ = [
    "DEFAULT_THRESHOLD",
    "DuplicateCandidate",
    "MatchField",
    "MatchProfile",
    "MatchScore",
    "calculate_match_confidence",
    "compare_dates",
    "compare_names",
    "compare_parents",
    "find_all_duplicates",
    "find_duplicates",
    "find_duplicates_for_person",
    "parent_family_key",
    "parents_by_child",
    "profile_for_individual",
    "profile_for_person",
    "profiles_for_persons",
    "validate_query",
]
