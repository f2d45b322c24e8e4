"""Plan how a merge rewires relationships from source onto target.

Pure: takes the rows touching each person and returns which rows move
(with their new key) and which rows are deleted. Nothing is written here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from kindred.domain.model import ParentOf, ParentRole

if TYPE_CHECKING:
    from collections.abc import Sequence

    from kindred.domain.model import OwnerId, PersonId, Relationship, RelationshipKey


class ConflictField(StrEnum):
    MOTHER = "mother"
    FATHER = "father"


_ROLE_BY_CONFLICT: dict[ConflictField, ParentRole] = {
    ConflictField.MOTHER: ParentRole.MOTHER,
    ConflictField.FATHER: ParentRole.FATHER,
}


def _parents(
    person_id: PersonId,
    relationships: Sequence[Relationship],
    role: ParentRole,
) -> list[Relationship]:
    return [
        relationship
        for relationship in relationships
        if relationship.person2_id == person_id and relationship.kind == ParentOf(role)
    ]


def _source_parents(
    source_id: PersonId,
    target_id: PersonId,
    relationships: Sequence[Relationship],
    role: ParentRole,
) -> list[Relationship]:
    # a target that parents the source collapses to a self-loop, never a rival parent
    return [
        relationship
        for relationship in _parents(source_id, relationships, role)
        if relationship.person1_id != target_id
    ]


def detect_relationship_conflicts(
    source_id: PersonId,
    target_id: PersonId,
    source_relationships: Sequence[Relationship],
    target_relationships: Sequence[Relationship],
) -> tuple[ConflictField, ...]:
    """Roles for which source and target have different parents."""
    conflicts: list[ConflictField] = []
    for conflict, role in _ROLE_BY_CONFLICT.items():
        source_parents = _source_parents(source_id, target_id, source_relationships, role)
        target_parents = _parents(target_id, target_relationships, role)
        if (
            source_parents
            and target_parents
            and source_parents[0].person1_id != target_parents[0].person1_id
        ):
            conflicts.append(conflict)
    return tuple(conflicts)


@dataclass(slots=True, kw_only=True)
class TransferPlan:
    moves: list[tuple[Relationship, RelationshipKey]] = field(
        default_factory=list[tuple["Relationship", "RelationshipKey"]]
    )
    deletions: list[Relationship] = field(default_factory=list["Relationship"])

    @property
    def transferred(self) -> int:
        return len(self.moves)


def plan_relationship_transfer(
    source_id: PersonId,
    target_id: PersonId,
    source_relationships: Sequence[Relationship],
    target_relationships: Sequence[Relationship],
    *,
    owner_id: OwnerId,
) -> TransferPlan:
    """Decide the fate of every row touching the source.

    * rows owned by someone else go away with the source
    * rows between source and target would become self-loops and go away
    * rows whose remapped key already exists on the target go away
    * on a mother/father conflict the source's parent replaces the target's
    * everything else moves to the target
    """
    plan = TransferPlan()
    owned_target = [
        relationship
        for relationship in target_relationships
        if relationship.owner_id == owner_id and not relationship.involves(source_id)
    ]

    replaced: set[int] = set()
    for conflict in detect_relationship_conflicts(
        source_id, target_id, source_relationships, owned_target
    ):
        role = _ROLE_BY_CONFLICT[conflict]
        winner = _source_parents(source_id, target_id, source_relationships, role)[0].person1_id
        for relationship in _parents(target_id, owned_target, role):
            if relationship.person1_id != winner:
                plan.deletions.append(relationship)
                replaced.add(id(relationship))

    existing = {
        relationship.key for relationship in owned_target if id(relationship) not in replaced
    }
    for relationship in source_relationships:
        if relationship.owner_id != owner_id:
            plan.deletions.append(relationship)
            continue
        key = relationship.remap(source_id, target_id)
        if key[0] == key[1] or key in existing:
            plan.deletions.append(relationship)
            continue
        existing.add(key)
        plan.moves.append((relationship, key))

    return plan
