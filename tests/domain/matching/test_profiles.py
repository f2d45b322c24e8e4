from __future__ import annotations

from kindred.domain.matching import (
    parent_family_key,
    parents_by_child,
    profile_for_individual,
    profiles_for_persons,
)
from tests.helpers.trees import father_of, make_individual, make_person, mother_of, spouses


def test_profile_for_individual_uses_famc_as_parent_family() -> None:
    individual = make_individual(
        "@I3@", "Peter", "Smith", birth_date="1975", child_of_family="@F1@"
    )

    profile = profile_for_individual(individual)

    assert profile.id == "@I3@"
    assert profile.name == "Peter Smith"
    assert profile.birth_date == "1975"
    assert profile.parent_families == frozenset({"@F1@"})
    assert profile_for_individual(make_individual("@I4@", "Anna")).parent_families == frozenset()


def test_parent_family_key_is_order_independent() -> None:
    assert parent_family_key([2, 1]) == parent_family_key([1, 2, 2]) == "parents:1,2"
    assert parent_family_key([]) is None


def test_siblings_share_a_parent_family() -> None:
    relationships = [
        father_of(1, 3),
        mother_of(2, 3),
        father_of(1, 4),
        mother_of(2, 4),
        *spouses(1, 2),
    ]
    persons = [
        make_person("John", "Smith", person_id=1),
        make_person("Mary", "Jones", person_id=2),
        make_person("Peter", "Smith", person_id=3),
        make_person("Anna", "Smith", person_id=4),
    ]

    assert parents_by_child(relationships) == {3: {1, 2}, 4: {1, 2}}
    profiles = {profile.id: profile for profile in profiles_for_persons(persons, relationships)}

    assert profiles[3].parent_families == profiles[4].parent_families == frozenset({"parents:1,2"})
    assert profiles[1].parent_families == frozenset()
    assert profiles[1].name == "John Smith"
