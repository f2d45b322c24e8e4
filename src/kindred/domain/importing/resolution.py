"""Apply per-individual duplicate decisions to an import set."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from kindred.domain.gedcom import Individual
    from kindred.domain.model import GedcomId, PersonId


class Resolution(StrEnum):
    SKIP = "skip"
    MERGE = "merge"
    IMPORT_AS_NEW = "import_as_new"


@dataclass(frozen=True, slots=True, kw_only=True)
class ResolutionDecision:
    gedcom_id: GedcomId
    resolution: Resolution
    existing_person_id: PersonId | None = None

    def __post_init__(self) -> None:
        if self.resolution is not Resolution.IMPORT_AS_NEW and self.existing_person_id is None:
            raise ValueError(
                f"Resolution {self.resolution} for {self.gedcom_id} needs an existing person id"
            )


@dataclass(frozen=True, slots=True)
class PendingMerge:
    """GEDCOM individual whose fields update an existing person."""

    gedcom_id: GedcomId
    existing_person_id: PersonId
    individual: Individual


@dataclass(slots=True, kw_only=True)
class ResolutionOutcome:
    to_insert: list[Individual] = field(default_factory=list["Individual"])
    id_map: dict[GedcomId, PersonId] = field(default_factory=dict[str, int])
    to_merge: list[PendingMerge] = field(default_factory=list[PendingMerge])


def apply_duplicate_resolutions(
    individuals: Iterable[Individual],
    decisions: Iterable[ResolutionDecision],
) -> ResolutionOutcome:
    """Partition individuals by decision.

    ``skip`` and ``merge`` map the GEDCOM id to the existing person and keep the
    individual out of the insert set; ``merge`` also queues a field update.
    ``import_as_new`` and undecided individuals are inserted and get their id
    at insertion time.
    """
    by_gedcom_id = {decision.gedcom_id: decision for decision in decisions}
    outcome = ResolutionOutcome()

    for individual in individuals:
        decision = by_gedcom_id.get(individual.gedcom_id)
        existing_id = None if decision is None else decision.existing_person_id
        if (
            decision is None
            or decision.resolution is Resolution.IMPORT_AS_NEW
            or existing_id is None
        ):
            outcome.to_insert.append(individual)
            continue

        outcome.id_map[individual.gedcom_id] = existing_id
        if decision.resolution is Resolution.MERGE:
            outcome.to_merge.append(PendingMerge(individual.gedcom_id, existing_id, individual))

    return outcome
