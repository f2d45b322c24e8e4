"""Field comparators and the weighted match confidence.

Every comparator returns a score in ``[0, 100]``. The overall confidence is::

    round(0.5 * name + 0.3 * birth_date + 0.2 * parents)

rounded half up to an integer.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from Levenshtein import distance

if TYPE_CHECKING:
    from collections.abc import Collection

    from .profiles import MatchProfile

NAME_WEIGHT: Final = 0.5
DATE_WEIGHT: Final = 0.3
PARENT_WEIGHT: Final = 0.2

# a field counts as matching above this score
FIELD_MATCH_SCORE: Final = 70


class MatchField(StrEnum):
    NAME = "name"
    BIRTH_DATE = "birthDate"
    PARENTS = "parents"


@dataclass(frozen=True, slots=True)
class MatchScore:
    confidence: int
    matching_fields: tuple[MatchField, ...]


def compare_names(first: str | None, second: str | None) -> float:
    if not first or not second:
        return 0.0
    a = first.strip().lower()
    b = second.strip().lower()
    if a == b:
        return 100.0
    longest = max(len(a), len(b))
    if longest == 0:
        return 0.0
    similarity = (1 - distance(a, b) / longest) * 100
    return max(0.0, min(100.0, similarity))


def compare_dates(first: str | None, second: str | None) -> float:
    """Compare (possibly partial) ISO dates; a missing component cannot disprove a match."""
    if not first or not second:
        return 0.0
    a = first.strip()
    b = second.strip()
    if a == b:
        return 100.0

    year_a, month_a, day_a = ([*a.split("-"), None, None])[:3]
    year_b, month_b, day_b = ([*b.split("-"), None, None])[:3]
    if year_a != year_b:
        return 0.0
    if not month_a or not month_b:
        return 100.0
    if month_a != month_b:
        return 50.0
    if not day_a or not day_b:
        return 100.0
    return 75.0


def compare_parents(first: Collection[str], second: Collection[str]) -> float:
    if not first or not second:
        return 0.0
    return 100.0 if set(first) & set(second) else 0.0


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def calculate_match_confidence(candidate: MatchProfile, existing: MatchProfile) -> MatchScore:
    name_score = compare_names(candidate.name, existing.name)
    date_score = compare_dates(candidate.birth_date, existing.birth_date)
    parent_score = compare_parents(candidate.parent_families, existing.parent_families)

    fields: list[MatchField] = []
    if name_score > FIELD_MATCH_SCORE:
        fields.append(MatchField.NAME)
    if date_score > FIELD_MATCH_SCORE:
        fields.append(MatchField.BIRTH_DATE)
    if parent_score > 0:
        fields.append(MatchField.PARENTS)

    total = name_score * NAME_WEIGHT + date_score * DATE_WEIGHT + parent_score * PARENT_WEIGHT
    return MatchScore(confidence=round_half_up(total), matching_fields=tuple(fields))
