"""Ancestor/descendant walks over parentOf rows.

Walks are breadth-first with an explicit queue and visited set, so depth is
bounded by the heap rather than the call stack and cycles in bad data end the
walk instead of looping.
"""

from __future__ import annotations

from collections import defaultdict, deque
from typing import TYPE_CHECKING, Final, TypeAlias

from kindred.domain.model import ParentOf, year_of

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from kindred.domain.model import ParentRole, Person, PersonId, Relationship

MIN_PARENT_AGE_DIFFERENCE: Final = 13

Adjacency: TypeAlias = "Mapping[PersonId, set[PersonId]]"


def _adjacency(relationships: Iterable[Relationship], *, upward: bool) -> Adjacency:
    edges: defaultdict[PersonId, set[PersonId]] = defaultdict(set)
    for relationship in relationships:
        if not isinstance(relationship.kind, ParentOf):
            continue
        if upward:
            edges[relationship.person2_id].add(relationship.person1_id)
        else:
            edges[relationship.person1_id].add(relationship.person2_id)
    return edges


def _walk(start: PersonId, edges: Adjacency) -> set[PersonId]:
    visited: set[PersonId] = set()
    queue: deque[PersonId] = deque([start])
    while queue:
        current = queue.popleft()
        for following in edges.get(current, ()):
            if following in visited or following == start:
                continue
            visited.add(following)
            queue.append(following)
    return visited


def find_ancestors(person_id: PersonId, relationships: Iterable[Relationship]) -> set[PersonId]:
    return _walk(person_id, _adjacency(relationships, upward=True))


def find_descendants(person_id: PersonId, relationships: Iterable[Relationship]) -> set[PersonId]:
    return _walk(person_id, _adjacency(relationships, upward=False))


def is_valid_parent_by_age(parent: Person, child: Person) -> bool:
    """Unknown birth years cannot rule a parent out."""
    parent_year = year_of(parent.birth_date)
    child_year = year_of(child.birth_date)
    if parent_year is None or child_year is None:
        return True
    return child_year - parent_year >= MIN_PARENT_AGE_DIFFERENCE


def parent_candidate_filter(
    child: Person,
    role: ParentRole,
    relationships: Iterable[Relationship],
) -> Callable[[Person], bool]:
    """Predicate for people who could be linked as ``child``'s parent of ``role``."""
    rows = list(relationships)
    child_id = child.persisted_id
    current = {
        relationship.person1_id
        for relationship in rows
        if relationship.person2_id == child_id and relationship.kind == ParentOf(role)
    }
    excluded = {child_id} | current
    excluded |= find_ancestors(child_id, rows) | find_descendants(child_id, rows)

    def accepts(person: Person) -> bool:
        return person.id not in excluded and is_valid_parent_by_age(person, child)

    return accepts
