"""Turn a parsed document plus duplicate decisions into an import plan."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from kindred.domain.gedcom import (
    individual_fields,
    validate_individual,
    validate_orphaned_references,
)

from .resolution import apply_duplicate_resolutions

if TYPE_CHECKING:
    from collections.abc import Iterable

    from kindred.domain.errors import ImportIssue
    from kindred.domain.gedcom import Family, GedcomDocument, Individual
    from kindred.domain.model import GedcomId, PersonFields, PersonId

    from .resolution import ResolutionDecision

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PersonUpdate:
    person_id: PersonId
    gedcom_id: GedcomId
    fields: PersonFields
    individual_name: str = ""


@dataclass(slots=True, kw_only=True)
class ImportPlan:
    to_insert: list[Individual] = field(default_factory=list["Individual"])
    updates: list[PersonUpdate] = field(default_factory=list[PersonUpdate])
    # partial: inserted persons are added once they have ids
    id_map: dict[GedcomId, PersonId] = field(default_factory=dict[str, int])
    families: list[Family] = field(default_factory=list["Family"])
    issues: list[ImportIssue] = field(default_factory=list["ImportIssue"])

    @property
    def referenced_person_ids(self) -> set[PersonId]:
        return set(self.id_map.values()) | {update.person_id for update in self.updates}


def prepare_import(
    document: GedcomDocument,
    decisions: Iterable[ResolutionDecision] = (),
) -> ImportPlan:
    issues = list(document.issues)

    orphans = validate_orphaned_references(document)
    issues.extend(orphans.warnings)

    importable: list[Individual] = []
    for individual in document.individuals:
        problem = validate_individual(individual)
        if problem is not None:
            log.warning("Not importing %s: %s", individual.gedcom_id, problem.message)
            issues.append(problem)
            continue
        importable.append(individual)

    outcome = apply_duplicate_resolutions(importable, decisions)
    updates = [
        PersonUpdate(
            person_id=pending.existing_person_id,
            gedcom_id=pending.gedcom_id,
            fields=individual_fields(pending.individual),
            individual_name=pending.individual.name,
        )
        for pending in outcome.to_merge
    ]
    return ImportPlan(
        to_insert=outcome.to_insert,
        updates=updates,
        id_map=outcome.id_map,
        families=orphans.families,
        issues=issues,
    )
