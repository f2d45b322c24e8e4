"""Derive normalized relationship rows from GEDCOM families."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from kindred.domain.model import ParentOf, ParentRole, Relationship, Spouse, deduplicate

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from kindred.domain.gedcom import Family
    from kindred.domain.model import GedcomId, OwnerId, PersonId

log = getLogger(__name__)


def _resolve(member: GedcomId | None, id_map: Mapping[GedcomId, PersonId]) -> PersonId | None:
    return id_map.get(member) if member else None


def build_relationships_from_families(
    families: Iterable[Family],
    id_map: Mapping[GedcomId, PersonId],
    *,
    owner_id: OwnerId,
) -> list[Relationship]:
    """One pass over families; members missing from ``id_map`` are dropped.

    Spouse rows are emitted in both directions, and only when both spouses
    resolved. Each resolved child gets a father row from the husband and a
    mother row from the wife.
    """
    relationships: list[Relationship] = []

    for family in families:
        husband_id = _resolve(family.husband, id_map)
        wife_id = _resolve(family.wife, id_map)

        if husband_id is not None and wife_id is not None and husband_id != wife_id:
            relationships.extend(
                Relationship(person1_id=first, person2_id=second, kind=Spouse(), owner_id=owner_id)
                for first, second in ((husband_id, wife_id), (wife_id, husband_id))
            )

        for child in family.children:
            child_id = _resolve(child, id_map)
            if child_id is None:
                log.debug("Child %s of %s was not imported", child, family.id)
                continue
            for parent_id, role in ((husband_id, ParentRole.FATHER), (wife_id, ParentRole.MOTHER)):
                if parent_id is None or parent_id == child_id:
                    continue
                relationships.append(
                    Relationship(
                        person1_id=parent_id,
                        person2_id=child_id,
                        kind=ParentOf(role),
                        owner_id=owner_id,
                    )
                )

    return relationships


def deduplicate_relationships(relationships: Iterable[Relationship]) -> list[Relationship]:
    """Exact-key uniqueness, first occurrence kept, order preserved."""
    return deduplicate(list(relationships))
