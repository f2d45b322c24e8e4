"""Read-only merge preview: reconciliation and validation without writes."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from kindred.domain.errors import MergeBlockedError, OwnerNotFoundError, PersonNotFoundError

from .reconcile import compare_fields, genders_conflict, reconcile_fields
from .transfer import ConflictField, detect_relationship_conflicts

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from kindred.domain.model import (
        Owner,
        OwnerId,
        Person,
        PersonFields,
        PersonId,
        Relationship,
    )
    from kindred.domain.ports import TreeRepositories

    from .reconcile import FieldComparison

log = getLogger(__name__)

SELF_MERGE_MESSAGE = "Cannot merge a person into themselves"

_CONFLICT_WARNINGS: dict[ConflictField, str] = {
    ConflictField.MOTHER: "Both people have different mothers - merge will overwrite",
    ConflictField.FATHER: "Both people have different fathers - merge will overwrite",
}


@dataclass(frozen=True, slots=True, kw_only=True)
class MergeValidation:
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    conflict_fields: tuple[ConflictField, ...] = ()

    @property
    def can_merge(self) -> bool:
        return not self.errors


@dataclass(frozen=True, slots=True, kw_only=True)
class MergePreview:
    source: Person
    target: Person
    merged: PersonFields
    validation: MergeValidation
    comparison: Mapping[str, FieldComparison]
    relationships_to_transfer: tuple[Relationship, ...]
    existing_relationships: tuple[Relationship, ...]

    @property
    def can_merge(self) -> bool:
        return self.validation.can_merge


def validate_merge(source: Person, target: Person, owner: Owner) -> list[str]:
    """Blocking problems, in display order."""
    errors: list[str] = []
    if source.owner_id != target.owner_id:
        errors.append("Cannot merge records across different users")
    if genders_conflict(source.gender, target.gender):
        errors.append(f"Gender mismatch: Cannot merge {source.gender} into {target.gender}")
    if owner.is_default_person(source.persisted_id):
        errors.append("Cannot merge your profile person into another person")
    if owner.is_default_person(target.persisted_id):
        errors.append("Cannot merge into your profile person")
    return errors


def build_merge_preview(
    source: Person,
    target: Person,
    owner: Owner,
    source_relationships: Sequence[Relationship],
    target_relationships: Sequence[Relationship],
) -> MergePreview:
    owner_id = owner.persisted_id
    # rows of other owners are never shown, even if they reference these persons
    source_rows = tuple(r for r in source_relationships if r.owner_id == owner_id)
    target_rows = tuple(r for r in target_relationships if r.owner_id == owner_id)

    conflicts = detect_relationship_conflicts(
        source.persisted_id,
        target.persisted_id,
        source_rows,
        [r for r in target_rows if not r.involves(source.persisted_id)],
    )
    validation = MergeValidation(
        errors=tuple(validate_merge(source, target, owner)),
        warnings=tuple(_CONFLICT_WARNINGS[conflict] for conflict in conflicts),
        conflict_fields=conflicts,
    )
    source_fields = source.snapshot()
    target_fields = target.snapshot()
    merged = reconcile_fields(source_fields, target_fields)
    return MergePreview(
        source=source,
        target=target,
        merged=merged,
        validation=validation,
        comparison=compare_fields(source_fields, target_fields, merged),
        relationships_to_transfer=source_rows,
        existing_relationships=target_rows,
    )


def load_merge_parties(
    repositories: TreeRepositories,
    source_id: PersonId,
    target_id: PersonId,
    owner_id: OwnerId,
) -> tuple[Owner, Person, Person]:
    """Owner, source and target; persons of other owners are reported as missing."""
    if source_id == target_id:
        raise MergeBlockedError(SELF_MERGE_MESSAGE)
    owner = repositories.owners.get(owner_id)
    if owner is None:
        raise OwnerNotFoundError(owner_id)
    parties: list[Person] = []
    for person_id in (source_id, target_id):
        person = repositories.persons.get(person_id)
        if person is None or person.owner_id != owner_id:
            raise PersonNotFoundError(person_id)
        parties.append(person)
    source, target = parties
    return owner, source, target


def preview_merge(
    repositories: TreeRepositories,
    source_id: PersonId,
    target_id: PersonId,
    *,
    owner_id: OwnerId,
) -> MergePreview:
    owner, source, target = load_merge_parties(repositories, source_id, target_id, owner_id)
    preview = build_merge_preview(
        source,
        target,
        owner,
        repositories.relationships.for_person(source_id),
        repositories.relationships.for_person(target_id),
    )
    log.debug(
        "Previewed merge %s -> %s: can_merge=%s, %d warnings",
        source_id,
        target_id,
        preview.can_merge,
        len(preview.validation.warnings),
    )
    return preview
