from __future__ import annotations

import pytest

from kindred.domain.matching import (
    MatchField,
    MatchProfile,
    calculate_match_confidence,
    compare_dates,
    compare_names,
    compare_parents,
)


def test_compare_names_is_case_insensitive() -> None:
    assert compare_names("JOHN SMITH", "john smith") == 100
    assert compare_names("  John Smith ", "john smith") == 100


def test_compare_names_missing_side_scores_zero() -> None:
    assert compare_names(None, "x") == 0
    assert compare_names("x", "") == 0


def test_compare_names_uses_edit_distance() -> None:
    # one substitution over ten characters
    assert compare_names("John Smith", "John Smyth") == pytest.approx(90.0)
    assert compare_names("abc", "xyz") == 0


@pytest.mark.parametrize(
    ("first", "second", "score"),
    [
        ("1950-01-15", "1950-06-20", 50),
        ("1950", "1950-01-15", 100),
        ("1950-01-15", "1951-01-15", 0),
        ("1950-01-15", "1950-01-15", 100),
        ("1950-01", "1950-01-15", 100),
        ("1950-01-15", "1950-01-20", 75),
        (None, "1950", 0),
        ("1950", None, 0),
    ],
)
def test_compare_dates(first: str | None, second: str | None, score: float) -> None:
    assert compare_dates(first, second) == score


def test_compare_parents_needs_a_shared_family() -> None:
    assert compare_parents({"@F1@"}, {"@F1@", "@F2@"}) == 100
    assert compare_parents({"@F1@"}, {"@F2@"}) == 0
    assert compare_parents(set(), {"@F1@"}) == 0


def test_confidence_without_parent_data() -> None:
    candidate = MatchProfile(id="@I1@", name="John Smith", birth_date="1950-01-15")
    existing = MatchProfile(id=4, name="John Smith", birth_date="1950-01-15")

    score = calculate_match_confidence(candidate, existing)

    assert score.confidence == 80
    assert score.matching_fields == (MatchField.NAME, MatchField.BIRTH_DATE)


def test_confidence_with_shared_parents() -> None:
    candidate = MatchProfile(id="@I3@", name="Peter Smith", parent_families=frozenset({"k"}))
    existing = MatchProfile(id=9, name="Peter Smith", parent_families=frozenset({"k"}))

    score = calculate_match_confidence(candidate, existing)

    assert score.confidence == 70
    assert score.matching_fields == (MatchField.NAME, MatchField.PARENTS)


def test_confidence_rounds_half_up() -> None:
    candidate = MatchProfile(id="@I1@", name="John Smith", birth_date="1950-01-15")
    existing = MatchProfile(id=1, name="John Smith", birth_date="1950-01-20")

    score = calculate_match_confidence(candidate, existing)

    # 0.5 * 100 + 0.3 * 75 = 72.5
    assert score.confidence == 73
    assert score.matching_fields == (MatchField.NAME, MatchField.BIRTH_DATE)


def test_weak_fields_are_not_reported_as_matching() -> None:
    candidate = MatchProfile(id="@I1@", name="ab", birth_date="1950-01-15")
    existing = MatchProfile(id=1, name="ac", birth_date="1950-06-15")

    score = calculate_match_confidence(candidate, existing)

    assert score.confidence == 40
    assert score.matching_fields == ()
