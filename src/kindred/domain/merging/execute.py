"""Atomic person merge."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from kindred.domain.errors import ForbiddenMergeError, MergeBlockedError
from kindred.domain.model import PersonMerge

from .preview import load_merge_parties
from .reconcile import genders_conflict, reconcile_fields
from .transfer import plan_relationship_transfer

if TYPE_CHECKING:
    from kindred.domain.model import OwnerId, PersonFields, PersonId
    from kindred.domain.ports import TreeUnitOfWork

log = getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class MergeResult:
    source_id: PersonId
    target_id: PersonId
    merged: PersonFields
    relationships_transferred: int


def execute_merge(
    source_id: PersonId,
    target_id: PersonId,
    *,
    owner_id: OwnerId,
    unit_of_work: TreeUnitOfWork,
) -> MergeResult:
    """Fold ``source`` into ``target`` and delete ``source``.

    Runs in one unit of work: any exception leaves persons and
    relationships exactly as they were.
    """
    with unit_of_work as uow:
        repositories = uow.repositories
        owner, source, target = load_merge_parties(repositories, source_id, target_id, owner_id)

        if owner.is_default_person(source_id):
            raise ForbiddenMergeError("Cannot merge your profile person into another person")
        if owner.is_default_person(target_id):
            raise ForbiddenMergeError("Cannot merge into your profile person")
        if genders_conflict(source.gender, target.gender):
            raise MergeBlockedError(
                f"Gender mismatch: Cannot merge {source.gender} into {target.gender}"
            )

        merged = reconcile_fields(source.snapshot(), target.snapshot())
        target.apply(merged)

        plan = plan_relationship_transfer(
            source_id,
            target_id,
            repositories.relationships.for_person(source_id),
            repositories.relationships.for_person(target_id),
            owner_id=owner_id,
        )
        # deletions first so moved rows never collide with rows on their way out
        for relationship in plan.deletions:
            repositories.relationships.delete(relationship)
        uow.flush()
        for relationship, (person1_id, person2_id, _) in plan.moves:
            relationship.person1_id = person1_id
            relationship.person2_id = person2_id
        uow.flush()

        repositories.persons.delete(source)
        repositories.merges.add(
            PersonMerge(
                owner_id=owner_id,
                source_id=source_id,
                target_id=target_id,
                source_name=source.display_name,
                relationships_transferred=plan.transferred,
            )
        )
        uow.flush()
        uow.commit()

    log.info(
        "Merged person %s into %s for owner %s: %d relationships transferred, %d removed",
        source_id,
        target_id,
        owner_id,
        plan.transferred,
        len(plan.deletions),
    )
    return MergeResult(
        source_id=source_id,
        target_id=target_id,
        merged=merged,
        relationships_transferred=plan.transferred,
    )
