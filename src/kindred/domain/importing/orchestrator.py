"""Run an import plan against the store as one transaction."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from kindred.domain.errors import (
    ConstraintViolationError,
    ImportFailedError,
    ImportIssue,
    KindredError,
    OwnerNotFoundError,
    PersonNotFoundError,
    classify_failure,
)
from kindred.domain.gedcom import individual_fields
from kindred.domain.merging.reconcile import genders_conflict, reconcile_fields
from kindred.domain.model import Person

from .relationships import build_relationships_from_families, deduplicate_relationships

if TYPE_CHECKING:
    from kindred.domain.model import GedcomId, OwnerId, PersonId
    from kindred.domain.ports import TreeRepositories, TreeUnitOfWork

    from .plan import ImportPlan, PersonUpdate

log = getLogger(__name__)


@dataclass(slots=True, kw_only=True)
class ImportResult:
    persons_inserted: int = 0
    persons_updated: int = 0
    relationships_inserted: int = 0
    relationships_existing: int = 0
    id_map: dict[GedcomId, PersonId] = field(default_factory=dict[str, int])
    issues: list[ImportIssue] = field(default_factory=list[ImportIssue])


def _owned_person(repositories: TreeRepositories, person_id: PersonId, owner_id: OwnerId) -> Person:
    person = repositories.persons.get(person_id)
    if person is None or person.owner_id != owner_id:
        raise PersonNotFoundError(person_id)
    return person


def _apply_update(person: Person, update: PersonUpdate) -> ImportIssue | None:
    incoming = update.fields
    stored = person.snapshot()
    person.apply(reconcile_fields(incoming, stored))
    if genders_conflict(incoming.gender, stored.gender):
        return ImportIssue.warning(
            f"Gender conflict: kept {stored.gender}, GEDCOM record says {incoming.gender}",
            gedcom_id=update.gedcom_id,
            individual_name=update.individual_name or None,
            field="gender",
            suggested_fix="Review the merged person's gender after import",
        )
    return None


def _failed(owner_id: OwnerId, exc: Exception) -> ImportFailedError:
    issue = classify_failure(exc)
    log.warning("Import for owner %s rolled back: %s", owner_id, issue.message)
    return ImportFailedError(issue)


def execute_import(
    plan: ImportPlan,
    *,
    owner_id: OwnerId,
    unit_of_work: TreeUnitOfWork,
) -> ImportResult:
    """Insert new persons, update merged ones, then add derived relationships.

    Either everything is committed or nothing is. Storage failures are
    re-raised as ``ImportFailedError`` carrying a classified issue; lookup
    failures (unknown owner or person) propagate unchanged.
    """
    result = ImportResult(issues=list(plan.issues))
    log.info(
        "Importing for owner %s: %d new, %d updates, %d families",
        owner_id,
        len(plan.to_insert),
        len(plan.updates),
        len(plan.families),
    )
    try:
        with unit_of_work as uow:
            repositories = uow.repositories
            if repositories.owners.get(owner_id) is None:
                raise OwnerNotFoundError(owner_id)
            for person_id in plan.referenced_person_ids:
                _owned_person(repositories, person_id, owner_id)

            inserted: list[tuple[GedcomId, Person]] = []
            for individual in plan.to_insert:
                person = Person.from_fields(individual_fields(individual), owner_id=owner_id)
                repositories.persons.add(person)
                inserted.append((individual.gedcom_id, person))
            uow.flush()
            result.persons_inserted = len(inserted)

            id_map = dict(plan.id_map)
            id_map.update((gedcom_id, person.persisted_id) for gedcom_id, person in inserted)
            result.id_map = id_map

            for update in plan.updates:
                person = _owned_person(repositories, update.person_id, owner_id)
                if (warning := _apply_update(person, update)) is not None:
                    result.issues.append(warning)
                result.persons_updated += 1

            relationships = deduplicate_relationships(
                build_relationships_from_families(plan.families, id_map, owner_id=owner_id)
            )
            existing = repositories.relationships.keys_among(set(id_map.values()))
            for relationship in relationships:
                if relationship.key in existing:
                    result.relationships_existing += 1
                    continue
                repositories.relationships.add(relationship)
                result.relationships_inserted += 1

            uow.flush()
            uow.commit()
    except ConstraintViolationError as exc:
        raise _failed(owner_id, exc) from exc
    except KindredError:
        raise
    except Exception as exc:
        raise _failed(owner_id, exc) from exc

    log.info(
        "Imported for owner %s: %d inserted, %d updated, %d relationships (%d already present)",
        owner_id,
        result.persons_inserted,
        result.persons_updated,
        result.relationships_inserted,
        result.relationships_existing,
    )
    return result
