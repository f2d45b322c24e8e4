from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from kindred import app
from kindred.adapters.sqlalchemy.unit_of_work import is_started, shutdown
from kindred.config import DetectionConfig
from kindred.domain.errors import ImportIssue, OwnerNotFoundError, PersonNotFoundError
from kindred.domain.importing import Resolution, ResolutionDecision
from kindred.domain.model import Gender, ParentRole
from tests.helpers.trees import father_of, relationship_rows, seed_owner, seed_tree

if TYPE_CHECKING:
    from collections.abc import Callable

    from kindred.adapters.sqlalchemy.unit_of_work import SqlAlchemyTreeUnitOfWork

    UnitOfWorkFactory = Callable[[], SqlAlchemyTreeUnitOfWork]


@pytest.fixture
def owner_check() -> app.OwnerCheckState:
    return app.OwnerCheckState()


def test_owner_check_runs_once_per_owner(
    sqlite_unit_of_work: UnitOfWorkFactory,
    owner_check: app.OwnerCheckState,
) -> None:
    lookups: list[int] = []

    def counting_factory() -> SqlAlchemyTreeUnitOfWork:
        lookups.append(1)
        return sqlite_unit_of_work()

    with pytest.raises(OwnerNotFoundError):
        app.ensure_owner_checked(owner_check, 1, counting_factory)
    assert not owner_check.is_checked(1)

    owner_id = seed_owner(sqlite_unit_of_work)
    app.ensure_owner_checked(owner_check, owner_id, counting_factory)
    app.ensure_owner_checked(owner_check, owner_id, counting_factory)
    assert owner_check.is_checked(owner_id)
    assert len(lookups) == 2

    # another owner is still looked up
    with pytest.raises(OwnerNotFoundError):
        app.ensure_owner_checked(owner_check, 999, counting_factory)

    owner_check.reset()
    assert not owner_check.is_checked(owner_id)


def test_unknown_owner_is_reported_after_another_owner_passed(
    sqlite_unit_of_work: UnitOfWorkFactory,
    owner_check: app.OwnerCheckState,
) -> None:
    owner_id = seed_owner(sqlite_unit_of_work)
    detection = DetectionConfig()
    assert (
        app.list_duplicates(
            owner_id=owner_id,
            unit_of_work_factory=sqlite_unit_of_work,
            detection=detection,
            owner_check=owner_check,
        )
        == []
    )

    with pytest.raises(OwnerNotFoundError):
        app.list_duplicates(
            owner_id=owner_id + 1,
            unit_of_work_factory=sqlite_unit_of_work,
            detection=detection,
            owner_check=owner_check,
        )


def test_owner_locks_are_per_owner() -> None:
    locks = app.OwnerLocks()

    assert locks.for_owner(1) is locks.for_owner(1)
    assert locks.for_owner(1) is not locks.for_owner(2)
    with locks.hold(1):
        assert locks.for_owner(1).locked()
        assert not locks.for_owner(2).locked()
    assert not locks.for_owner(1).locked()


def test_parse_then_import(
    sqlite_unit_of_work: UnitOfWorkFactory,
    owner_check: app.OwnerCheckState,
    family_gedcom: bytes,
) -> None:
    tree = seed_tree(
        sqlite_unit_of_work,
        {"john": {"first_name": "John", "last_name": "Smith", "birth_date": "1950-03-15"}},
    )

    report = app.parse_gedcom(
        family_gedcom,
        owner_id=tree.owner_id,
        unit_of_work_factory=sqlite_unit_of_work,
        detection=DetectionConfig(),
        owner_check=owner_check,
    )

    assert report.statistics.total_individuals == 4
    assert report.relationship_issues == []
    assert [(c.person1.id, c.person2.id, c.confidence) for c in report.duplicates] == [
        ("@I1@", tree["john"], 80)
    ]

    result = app.import_gedcom(
        report.document,
        owner_id=tree.owner_id,
        decisions=[
            ResolutionDecision(
                gedcom_id="@I1@",
                resolution=Resolution.MERGE,
                existing_person_id=tree["john"],
            )
        ],
        unit_of_work_factory=sqlite_unit_of_work,
        locks=app.OwnerLocks(),
        owner_check=owner_check,
    )

    assert result.persons_inserted == 3
    assert result.persons_updated == 1
    assert result.id_map["@I1@"] == tree["john"]


def test_list_duplicates(
    sqlite_unit_of_work: UnitOfWorkFactory,
    owner_check: app.OwnerCheckState,
) -> None:
    tree = seed_tree(
        sqlite_unit_of_work,
        {
            "a": {"first_name": "John", "last_name": "Smith", "birth_date": "1950"},
            "b": {"first_name": "John", "last_name": "Smith", "birth_date": "1950-03-15"},
            "c": {"first_name": "Mary", "last_name": "Jones"},
        },
    )

    def duplicates(**kwargs: object) -> list[tuple[object, object]]:
        found = app.list_duplicates(
            owner_id=tree.owner_id,
            unit_of_work_factory=sqlite_unit_of_work,
            detection=DetectionConfig(),
            owner_check=owner_check,
            **kwargs,  # type: ignore[arg-type]
        )
        return [(candidate.person1.id, candidate.person2.id) for candidate in found]

    assert duplicates() == [(tree["a"], tree["b"])]
    assert duplicates(person_id=tree["b"]) == [(tree["b"], tree["a"])]
    assert duplicates(person_id=tree["c"]) == []
    assert len(duplicates(threshold=0)) == 3
    assert len(duplicates(threshold=0, limit=2)) == 2
    with pytest.raises(PersonNotFoundError):
        duplicates(person_id=9999)


def test_preview_and_merge_services(
    sqlite_unit_of_work: UnitOfWorkFactory,
    owner_check: app.OwnerCheckState,
) -> None:
    tree = seed_tree(
        sqlite_unit_of_work,
        {
            "father": {"first_name": "Adam"},
            "source": {"first_name": "Peter", "gender": Gender.MALE},
            "target": {"first_name": "Peter", "birth_date": "1975"},
        },
        links=lambda ids, owner_id: [
            father_of(ids["father"], ids["source"], owner_id=owner_id),
        ],
    )

    preview = app.preview_person_merge(
        tree["source"],
        tree["target"],
        owner_id=tree.owner_id,
        unit_of_work_factory=sqlite_unit_of_work,
        owner_check=owner_check,
    )
    assert preview.can_merge
    assert preview.merged.gender is Gender.MALE
    assert len(preview.relationships_to_transfer) == 1

    result = app.merge_persons(
        tree["source"],
        tree["target"],
        owner_id=tree.owner_id,
        unit_of_work_factory=sqlite_unit_of_work,
        locks=app.OwnerLocks(),
        owner_check=owner_check,
    )

    assert result.relationships_transferred == 1
    assert relationship_rows(sqlite_unit_of_work, tree.owner_id) == {
        (tree["father"], tree["target"], "parentOf", "father"),
    }


def test_parent_candidates(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    tree = seed_tree(
        sqlite_unit_of_work,
        {
            "grandfather": {"first_name": "Old", "birth_date": "1920"},
            "father": {"first_name": "Adam", "birth_date": "1950"},
            "child": {"first_name": "Peter", "birth_date": "1980"},
            "uncle": {"first_name": "Bob", "birth_date": "1952"},
            "cousin": {"first_name": "Tim", "birth_date": "1979"},
        },
        links=lambda ids, owner_id: [
            father_of(ids["grandfather"], ids["father"], owner_id=owner_id),
            father_of(ids["father"], ids["child"], owner_id=owner_id),
        ],
    )

    candidates = app.parent_candidates(
        tree["child"],
        ParentRole.FATHER,
        owner_id=tree.owner_id,
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert [person.id for person in candidates] == [tree["uncle"]]
    with pytest.raises(PersonNotFoundError):
        app.parent_candidates(
            9999,
            ParentRole.MOTHER,
            owner_id=tree.owner_id,
            unit_of_work_factory=sqlite_unit_of_work,
        )


def test_owner_services(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    owner = app.create_owner(display_name="Ada", unit_of_work_factory=sqlite_unit_of_work)
    tree = seed_tree(
        sqlite_unit_of_work, {"ada": {"first_name": "Ada"}}, owner_id=owner.persisted_id
    )
    stranger = seed_tree(sqlite_unit_of_work, {"bob": {"first_name": "Bob"}})

    updated = app.set_default_person(
        owner.persisted_id, tree["ada"], unit_of_work_factory=sqlite_unit_of_work
    )
    assert updated.default_person_id == tree["ada"]

    with pytest.raises(PersonNotFoundError):
        app.set_default_person(
            owner.persisted_id, stranger["bob"], unit_of_work_factory=sqlite_unit_of_work
        )
    with pytest.raises(OwnerNotFoundError):
        app.set_default_person(999, None, unit_of_work_factory=sqlite_unit_of_work)

    cleared = app.set_default_person(
        owner.persisted_id, None, unit_of_work_factory=sqlite_unit_of_work
    )
    assert cleared.default_person_id is None

    owners = app.list_owners(unit_of_work_factory=sqlite_unit_of_work)
    assert [o.display_name for o in owners] == ["Ada", "Tree Owner"]


def test_services_start_the_default_store_on_demand(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")
    shutdown()
    try:
        owner = app.create_owner(display_name="Lazy")
        assert is_started()
        assert owner.persisted_id in [o.id for o in app.list_owners()]
    finally:
        shutdown()


def test_export_issues_csv() -> None:
    csv = app.export_issues_csv([ImportIssue.warning("Check: this", gedcom_id="@I1@")])

    assert csv.splitlines()[1] == 'Warning,,@I1@,,,"Check: this",'

