"""Application orchestration entry points."""

from __future__ import annotations

import threading
from collections.abc import Callable
from contextlib import contextmanager
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from kindred.adapters.gedcom import read_gedcom
from kindred.adapters.sqlalchemy.unit_of_work import SqlAlchemyTreeUnitOfWork, is_started, startup
from kindred.config import get_detection_config
from kindred.domain.errors import OwnerNotFoundError, PersonNotFoundError
from kindred.domain.gedcom import extract_statistics, validate_relationship_consistency
from kindred.domain.importing import execute_import, prepare_import
from kindred.domain.lineage import parent_candidate_filter
from kindred.domain.matching import (
    find_all_duplicates,
    find_duplicates,
    find_duplicates_for_person,
    profile_for_individual,
    profiles_for_persons,
)
from kindred.domain.merging import execute_merge, preview_merge
from kindred.domain.model import Owner
from kindred.domain.ports.unit_of_work import TreeUnitOfWork
from kindred.domain.reporting import issues_to_csv

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from kindred.config import DetectionConfig
    from kindred.domain.errors import ImportIssue
    from kindred.domain.gedcom import ConsistencyIssue, GedcomDocument, GedcomStatistics
    from kindred.domain.importing import ImportResult, ResolutionDecision
    from kindred.domain.matching import DuplicateCandidate
    from kindred.domain.merging import MergePreview, MergeResult
    from kindred.domain.model import OwnerId, ParentRole, Person, PersonId, Relationship

UnitOfWorkFactory = Callable[[], TreeUnitOfWork]


log = getLogger(__name__)


@dataclass(slots=True)
class OwnerCheckState:
    """Owners whose lookup has already succeeded in this process."""

    checked: set[OwnerId] = field(default_factory=set[int])

    def is_checked(self, owner_id: OwnerId) -> bool:
        return owner_id in self.checked

    def mark_checked(self, owner_id: OwnerId) -> None:
        self.checked.add(owner_id)

    def reset(self) -> None:
        self.checked.clear()


OWNER_CHECK = OwnerCheckState()


def ensure_owner_checked(
    state: OwnerCheckState,
    owner_id: OwnerId,
    unit_of_work_factory: UnitOfWorkFactory,
) -> None:
    if state.is_checked(owner_id):
        return
    with unit_of_work_factory() as uow:
        if uow.repositories.owners.get(owner_id) is None:
            raise OwnerNotFoundError(owner_id)
    log.debug("Owner %s verified", owner_id)
    state.mark_checked(owner_id)


class OwnerLocks:
    """One lock per owner; mutations of the same tree never interleave."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[OwnerId, threading.Lock] = {}

    def for_owner(self, owner_id: OwnerId) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(owner_id, threading.Lock())

    @contextmanager
    def hold(self, owner_id: OwnerId) -> Iterator[None]:
        with self.for_owner(owner_id):
            yield


OWNER_LOCKS = OwnerLocks()


def _effective_factory(unit_of_work_factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if unit_of_work_factory is not None:
        return unit_of_work_factory
    if not is_started():
        startup()
    return SqlAlchemyTreeUnitOfWork


def _load_tree(
    unit_of_work_factory: UnitOfWorkFactory,
    owner_id: OwnerId,
) -> tuple[list[Person], list[Relationship]]:
    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        persons = repositories.persons.list_for_owner(owner_id)
        relationships = repositories.relationships.for_owner(owner_id)
    return persons, relationships


@dataclass(frozen=True, slots=True)
class ParseReport:
    document: GedcomDocument
    statistics: GedcomStatistics
    duplicates: list[DuplicateCandidate]
    relationship_issues: list[ConsistencyIssue]


def parse_gedcom(
    content: str | bytes,
    *,
    owner_id: OwnerId,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    detection: DetectionConfig | None = None,
    owner_check: OwnerCheckState = OWNER_CHECK,
) -> ParseReport:
    """Parse a GEDCOM file and compare its individuals against the owner's tree."""

    factory = _effective_factory(unit_of_work_factory)
    config = detection or get_detection_config()
    ensure_owner_checked(owner_check, owner_id, factory)

    document = read_gedcom(content)
    persons, relationships = _load_tree(factory, owner_id)
    duplicates = find_duplicates(
        [profile_for_individual(individual) for individual in document.individuals],
        profiles_for_persons(persons, relationships),
        threshold=config.threshold,
        limit=config.limit,
    )
    report = ParseReport(
        document=document,
        statistics=extract_statistics(document),
        duplicates=duplicates,
        relationship_issues=validate_relationship_consistency(document),
    )
    log.info(
        "Parsed GEDCOM %s for owner %s: %d individuals, %d families, %d possible duplicates",
        document.version,
        owner_id,
        report.statistics.total_individuals,
        report.statistics.total_families,
        len(duplicates),
    )
    return report


def import_gedcom(
    document: GedcomDocument,
    *,
    owner_id: OwnerId,
    decisions: Iterable[ResolutionDecision] = (),
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    locks: OwnerLocks = OWNER_LOCKS,
    owner_check: OwnerCheckState = OWNER_CHECK,
) -> ImportResult:
    """Import a parsed document under the owner's lock as one transaction."""

    factory = _effective_factory(unit_of_work_factory)
    ensure_owner_checked(owner_check, owner_id, factory)
    plan = prepare_import(document, decisions)
    with locks.hold(owner_id):
        return execute_import(plan, owner_id=owner_id, unit_of_work=factory())


def list_duplicates(
    *,
    owner_id: OwnerId,
    person_id: PersonId | None = None,
    threshold: int | None = None,
    limit: int | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    detection: DetectionConfig | None = None,
    owner_check: OwnerCheckState = OWNER_CHECK,
) -> list[DuplicateCandidate]:
    """Likely duplicates within the owner's tree, optionally around one person."""

    factory = _effective_factory(unit_of_work_factory)
    config = detection or get_detection_config()
    effective_threshold = config.threshold if threshold is None else threshold
    effective_limit = config.limit if limit is None else limit
    ensure_owner_checked(owner_check, owner_id, factory)

    persons, relationships = _load_tree(factory, owner_id)
    profiles = profiles_for_persons(persons, relationships)
    if person_id is None:
        return find_all_duplicates(profiles, threshold=effective_threshold, limit=effective_limit)

    target = next((profile for profile in profiles if profile.id == person_id), None)
    if target is None:
        raise PersonNotFoundError(person_id)
    return find_duplicates_for_person(
        target,
        profiles,
        threshold=effective_threshold,
        limit=effective_limit,
    )


def preview_person_merge(
    source_id: PersonId,
    target_id: PersonId,
    *,
    owner_id: OwnerId,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    owner_check: OwnerCheckState = OWNER_CHECK,
) -> MergePreview:
    factory = _effective_factory(unit_of_work_factory)
    ensure_owner_checked(owner_check, owner_id, factory)
    with factory() as uow:
        return preview_merge(uow.repositories, source_id, target_id, owner_id=owner_id)


def merge_persons(
    source_id: PersonId,
    target_id: PersonId,
    *,
    owner_id: OwnerId,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    locks: OwnerLocks = OWNER_LOCKS,
    owner_check: OwnerCheckState = OWNER_CHECK,
) -> MergeResult:
    factory = _effective_factory(unit_of_work_factory)
    ensure_owner_checked(owner_check, owner_id, factory)
    with locks.hold(owner_id):
        return execute_merge(source_id, target_id, owner_id=owner_id, unit_of_work=factory())


def parent_candidates(
    child_id: PersonId,
    role: ParentRole,
    *,
    owner_id: OwnerId,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[Person]:
    """People in the owner's tree who could be linked as the child's parent."""

    factory = _effective_factory(unit_of_work_factory)
    persons, relationships = _load_tree(factory, owner_id)
    child = next((person for person in persons if person.id == child_id), None)
    if child is None:
        raise PersonNotFoundError(child_id)
    accepts = parent_candidate_filter(child, role, relationships)
    return [person for person in persons if accepts(person)]


def create_owner(
    *,
    display_name: str,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Owner:
    factory = _effective_factory(unit_of_work_factory)
    owner = Owner(display_name=display_name)
    with factory() as uow:
        uow.repositories.owners.add(owner)
        uow.commit()
    log.info("Created owner %s (%s)", owner.id, display_name)
    return owner


def list_owners(*, unit_of_work_factory: UnitOfWorkFactory | None = None) -> list[Owner]:
    factory = _effective_factory(unit_of_work_factory)
    with factory() as uow:
        return uow.repositories.owners.list_all()


def set_default_person(
    owner_id: OwnerId,
    person_id: PersonId | None,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Owner:
    """Designate (or clear) the owner's profile person."""

    factory = _effective_factory(unit_of_work_factory)
    with factory() as uow:
        repositories = uow.repositories
        owner = repositories.owners.get(owner_id)
        if owner is None:
            raise OwnerNotFoundError(owner_id)
        if person_id is not None:
            person = repositories.persons.get(person_id)
            if person is None or person.owner_id != owner_id:
                raise PersonNotFoundError(person_id)
        owner.default_person_id = person_id
        uow.commit()
    return owner


def export_issues_csv(issues: Iterable[ImportIssue]) -> str:
    return issues_to_csv(issues)
