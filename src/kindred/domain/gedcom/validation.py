"""Structural checks over a parsed GEDCOM document."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import TYPE_CHECKING

from kindred.domain.errors import ErrorCode, ImportIssue

if TYPE_CHECKING:
    from kindred.domain.model import GedcomId

    from .records import Family, GedcomDocument, Individual


@dataclass(slots=True, kw_only=True)
class OrphanReport:
    warnings: list[ImportIssue] = field(default_factory=list[ImportIssue])
    families: list[Family] = field(default_factory=list["Family"])

    @property
    def has_orphans(self) -> bool:
        return bool(self.warnings)


def validate_orphaned_references(document: GedcomDocument) -> OrphanReport:
    """Warn about family members that reference unknown individuals.

    The returned families have those references removed.
    """
    known = {individual.gedcom_id for individual in document.individuals}
    report = OrphanReport()

    for family in document.families:
        husband, wife = family.husband, family.wife
        for role, member in (("husband", husband), ("wife", wife)):
            if member is not None and member not in known:
                report.warnings.append(
                    ImportIssue.warning(
                        f"Orphaned {role} reference: Individual {member} not found",
                        line=family.line,
                        gedcom_id=family.id,
                        field=role,
                        suggested_fix=f"Remove invalid {role} reference or add missing individual",
                    )
                )
        if husband not in known:
            husband = None
        if wife not in known:
            wife = None

        orphaned = [child for child in family.children if child not in known]
        if orphaned:
            report.warnings.append(
                ImportIssue.warning(
                    f"Orphaned child reference(s): {', '.join(orphaned)} "
                    f"not found in family {family.id}",
                    line=family.line,
                    gedcom_id=family.id,
                    field="children",
                    suggested_fix="Remove invalid child references or add missing individuals",
                )
            )
        children = [child for child in family.children if child in known]
        report.families.append(replace(family, husband=husband, wife=wife, children=children))

    return report


class ConsistencyIssueType(StrEnum):
    CHILD_FAMILY_MISMATCH = "child-family-mismatch"
    SPOUSE_FAMILY_MISMATCH = "spouse-family-mismatch"


@dataclass(frozen=True, slots=True)
class ConsistencyIssue:
    type: ConsistencyIssueType
    description: str
    affected_ids: tuple[GedcomId, ...]


def validate_relationship_consistency(document: GedcomDocument) -> list[ConsistencyIssue]:
    """FAMC/FAMS pointers whose family does not point back."""
    families = {family.id: family for family in document.families}
    issues: list[ConsistencyIssue] = []

    for individual in document.individuals:
        family_id = individual.child_of_family
        family = families.get(family_id) if family_id else None
        if family is not None and individual.gedcom_id not in family.children:
            issues.append(
                ConsistencyIssue(
                    ConsistencyIssueType.CHILD_FAMILY_MISMATCH,
                    f"Individual {individual.gedcom_id} ({individual.name}) references family "
                    f"{family.id} but is not listed as a child",
                    (individual.gedcom_id, family.id),
                )
            )

    for individual in document.individuals:
        for family_id in individual.spouse_families:
            family = families.get(family_id)
            if family is None:
                continue
            if individual.gedcom_id not in (family.husband, family.wife):
                issues.append(
                    ConsistencyIssue(
                        ConsistencyIssueType.SPOUSE_FAMILY_MISMATCH,
                        f"Individual {individual.gedcom_id} ({individual.name}) references "
                        f"family {family.id} as spouse but is not listed as husband or wife",
                        (individual.gedcom_id, family.id),
                    )
                )

    return issues


def validate_individual(individual: Individual) -> ImportIssue | None:
    """Blocking problem that keeps this individual out of the import, if any."""
    if not individual.has_name:
        return ImportIssue.error(
            "Individual has no name",
            code=ErrorCode.VALIDATION_ERROR,
            line=individual.line,
            gedcom_id=individual.gedcom_id,
            field="name",
            suggested_fix="Add a NAME record with at least a given name or surname",
        )
    return None
