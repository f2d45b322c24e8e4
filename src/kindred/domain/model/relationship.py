"""Typed, directional relationships between two persons.

A relationship's kind is a closed sum type::

    ParentOf(role)   person1 is a parent of person2; role is mother/father/unknown
    Spouse()         stored twice, once per direction

The deduplication key is ``(person1_id, person2_id, kind)``. ``ParentOf(None)``
and ``ParentOf(ParentRole.FATHER)`` are different keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from .entity import Entity
from .enums import ParentRole, RelationshipType
from .primitives import OwnerId, PersonId


@dataclass(frozen=True, slots=True)
class ParentOf:
    role: ParentRole | None = None

    @property
    def type(self) -> RelationshipType:
        return RelationshipType.PARENT_OF

    def __composite_values__(self) -> tuple[RelationshipType, ParentRole | None]:
        return (RelationshipType.PARENT_OF, self.role)


@dataclass(frozen=True, slots=True)
class Spouse:
    @property
    def type(self) -> RelationshipType:
        return RelationshipType.SPOUSE

    @property
    def role(self) -> None:
        return None

    def __composite_values__(self) -> tuple[RelationshipType, None]:
        return (RelationshipType.SPOUSE, None)


RelationshipKind: TypeAlias = ParentOf | Spouse

RelationshipKey: TypeAlias = tuple[PersonId, PersonId, RelationshipKind]


def relationship_kind(
    type_: RelationshipType | str | None,
    parent_role: ParentRole | str | None = None,
) -> RelationshipKind:
    """Rebuild a kind from its stored columns."""
    if type_ is None:
        raise ValueError("relationship type is required")
    match RelationshipType(type_):
        case RelationshipType.PARENT_OF:
            return ParentOf(ParentRole(parent_role) if parent_role else None)
        case RelationshipType.SPOUSE:
            if parent_role:
                raise ValueError("spouse relationships carry no parent role")
            return Spouse()


@dataclass(eq=False, kw_only=True)
class Relationship(Entity):
    person1_id: PersonId
    person2_id: PersonId
    kind: RelationshipKind
    owner_id: OwnerId

    def __post_init__(self) -> None:
        if self.person1_id == self.person2_id:
            raise ValueError(f"Relationship endpoints must differ (person {self.person1_id})")

    @property
    def key(self) -> RelationshipKey:
        return (self.person1_id, self.person2_id, self.kind)

    def involves(self, person_id: PersonId) -> bool:
        return person_id in (self.person1_id, self.person2_id)

    def remap(self, old_id: PersonId, new_id: PersonId) -> RelationshipKey:
        """Key this relationship would have with ``old_id`` replaced by ``new_id``."""
        person1 = new_id if self.person1_id == old_id else self.person1_id
        person2 = new_id if self.person2_id == old_id else self.person2_id
        return (person1, person2, self.kind)


def deduplicate(relationships: list[Relationship]) -> list[Relationship]:
    """Keep the first occurrence of each key, preserving input order."""
    seen: set[RelationshipKey] = set()
    unique: list[Relationship] = []
    for relationship in relationships:
        if relationship.key in seen:
            continue
        seen.add(relationship.key)
        unique.append(relationship)
    return unique
