"""Duplicate detection over match profiles.

Comparison is a plain pairwise scan; inputs are expected to be one owner's
tree plus one GEDCOM file.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import combinations
from logging import getLogger
from typing import TYPE_CHECKING, Final

from .scoring import MatchField, calculate_match_confidence

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .profiles import MatchProfile

log = getLogger(__name__)

DEFAULT_THRESHOLD: Final = 70


@dataclass(frozen=True, slots=True, kw_only=True)
class DuplicateCandidate:
    person1: MatchProfile
    person2: MatchProfile
    confidence: int
    matching_fields: tuple[MatchField, ...]


def validate_query(threshold: int, limit: int | None) -> None:
    if not 0 <= threshold <= 100:
        raise ValueError(f"threshold must be between 0 and 100, got {threshold}")
    if limit is not None and limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")


def _score(first: MatchProfile, second: MatchProfile) -> DuplicateCandidate:
    score = calculate_match_confidence(first, second)
    return DuplicateCandidate(
        person1=first,
        person2=second,
        confidence=score.confidence,
        matching_fields=score.matching_fields,
    )


def _rank(
    candidates: Iterable[DuplicateCandidate],
    threshold: int,
    limit: int | None,
) -> list[DuplicateCandidate]:
    # sorted() is stable: equal confidences keep scan order
    ranked = sorted(
        (candidate for candidate in candidates if candidate.confidence >= threshold),
        key=lambda candidate: candidate.confidence,
        reverse=True,
    )
    return ranked if limit is None else ranked[:limit]


def find_duplicates(
    incoming: Sequence[MatchProfile],
    existing: Sequence[MatchProfile],
    *,
    threshold: int = DEFAULT_THRESHOLD,
    limit: int | None = None,
) -> list[DuplicateCandidate]:
    """Every incoming x existing pair at or above ``threshold``, best first."""
    validate_query(threshold, limit)
    if not incoming or not existing:
        return []
    found = _rank(
        (_score(candidate, person) for candidate in incoming for person in existing),
        threshold,
        limit,
    )
    log.debug("Compared %d x %d profiles, %d duplicates", len(incoming), len(existing), len(found))
    return found


def find_all_duplicates(
    profiles: Sequence[MatchProfile],
    *,
    threshold: int = DEFAULT_THRESHOLD,
    limit: int | None = None,
) -> list[DuplicateCandidate]:
    """Each unordered pair once, oriented so ``person1`` has the lower id."""
    validate_query(threshold, limit)
    ordered = sorted(profiles, key=lambda profile: profile.sort_key)
    return _rank(
        (
            _score(first, second)
            for first, second in combinations(ordered, 2)
            if first.id != second.id
        ),
        threshold,
        limit,
    )


def find_duplicates_for_person(
    target: MatchProfile,
    others: Sequence[MatchProfile],
    *,
    threshold: int = DEFAULT_THRESHOLD,
    limit: int | None = None,
) -> list[DuplicateCandidate]:
    validate_query(threshold, limit)
    return _rank(
        (_score(target, other) for other in others if other.id != target.id),
        threshold,
        limit,
    )
