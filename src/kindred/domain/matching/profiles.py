"""What the detector compares: one profile per GEDCOM individual or stored person."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from kindred.domain.model import ParentOf

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from kindred.domain.gedcom import Individual
    from kindred.domain.model import IsoDate, Person, PersonId, Relationship


@dataclass(frozen=True, slots=True, kw_only=True)
class MatchProfile:
    id: str | int
    name: str
    birth_date: IsoDate | None = None
    parent_families: frozenset[str] = field(default_factory=frozenset[str])

    @property
    def sort_key(self) -> tuple[int, str | int]:
        # ints before strings so mixed id types never compare directly
        return (0, self.id) if isinstance(self.id, int) else (1, self.id)


def profile_for_individual(individual: Individual) -> MatchProfile:
    family = individual.child_of_family
    families = frozenset({family}) if family else frozenset[str]()
    return MatchProfile(
        id=individual.gedcom_id,
        name=individual.name,
        birth_date=individual.birth_date,
        parent_families=families,
    )


def parent_family_key(parent_ids: Iterable[PersonId]) -> str | None:
    """Stable key for a set of parents; people with the same key share a family."""
    ordered = sorted(set(parent_ids))
    if not ordered:
        return None
    return "parents:" + ",".join(str(parent_id) for parent_id in ordered)


def parents_by_child(relationships: Iterable[Relationship]) -> dict[PersonId, set[PersonId]]:
    parents: dict[PersonId, set[PersonId]] = {}
    for relationship in relationships:
        if isinstance(relationship.kind, ParentOf):
            parents.setdefault(relationship.person2_id, set()).add(relationship.person1_id)
    return parents


def profile_for_person(
    person: Person,
    parents: Mapping[PersonId, set[PersonId]] | None = None,
) -> MatchProfile:
    key = parent_family_key((parents or {}).get(person.persisted_id, ()))
    return MatchProfile(
        id=person.persisted_id,
        name=person.display_name,
        birth_date=person.birth_date,
        parent_families=frozenset({key}) if key else frozenset(),
    )


def profiles_for_persons(
    persons: Iterable[Person],
    relationships: Iterable[Relationship] = (),
) -> list[MatchProfile]:
    parents = parents_by_child(relationships)
    return [profile_for_person(person, parents) for person in persons]
