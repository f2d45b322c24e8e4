from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from kindred.adapters.sqlalchemy.repositories import SqlAlchemyPersonRepository
from kindred.app import set_default_person
from kindred.domain.errors import (
    ForbiddenMergeError,
    MergeBlockedError,
    PersonNotFoundError,
)
from kindred.domain.merging import execute_merge, preview_merge
from kindred.domain.model import Gender
from tests.helpers.trees import (
    father_of,
    mother_of,
    parent_of,
    relationship_rows,
    seed_tree,
    spouses,
    stored_person,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from kindred.adapters.sqlalchemy.unit_of_work import SqlAlchemyTreeUnitOfWork

    UnitOfWorkFactory = Callable[[], SqlAlchemyTreeUnitOfWork]


def _counts(factory: UnitOfWorkFactory, owner_id: int) -> tuple[int, int]:
    with factory() as uow:
        repositories = uow.repositories
        return (
            len(repositories.persons.list_for_owner(owner_id)),
            len(repositories.relationships.for_owner(owner_id)),
        )


def test_merge_reconciles_fields_and_removes_source(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    tree = seed_tree(
        sqlite_unit_of_work,
        {
            "source": {"first_name": "John", "last_name": "Smith", "birth_date": "1950"},
            "target": {"first_name": "John", "last_name": "A. Smith", "birth_date": "1950-03-15"},
        },
    )

    result = execute_merge(
        tree["source"],
        tree["target"],
        owner_id=tree.owner_id,
        unit_of_work=sqlite_unit_of_work(),
    )

    assert result.merged.last_name == "A. Smith"
    assert result.merged.birth_date == "1950-03-15"
    assert stored_person(sqlite_unit_of_work, tree["source"]) is None
    target = stored_person(sqlite_unit_of_work, tree["target"])
    assert target is not None
    assert target.last_name == "A. Smith"

    with sqlite_unit_of_work() as uow:
        (audit,) = uow.repositories.merges.for_owner(tree.owner_id)
    assert (audit.source_id, audit.target_id, audit.source_name) == (
        tree["source"],
        tree["target"],
        "John Smith",
    )


def test_merge_transfers_distinct_relationships(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    tree = seed_tree(
        sqlite_unit_of_work,
        {
            "mother": {"first_name": "Mother", "gender": Gender.FEMALE},
            "source": {"first_name": "Peter"},
            "target": {"first_name": "Peter"},
            "child": {"first_name": "Child"},
        },
        links=lambda ids, owner_id: [
            mother_of(ids["mother"], ids["source"], owner_id=owner_id),
            parent_of(ids["source"], ids["child"], owner_id=owner_id),
        ],
    )

    result = execute_merge(
        tree["source"],
        tree["target"],
        owner_id=tree.owner_id,
        unit_of_work=sqlite_unit_of_work(),
    )

    assert result.relationships_transferred == 2
    assert relationship_rows(sqlite_unit_of_work, tree.owner_id) == {
        (tree["mother"], tree["target"], "parentOf", "mother"),
        (tree["target"], tree["child"], "parentOf", None),
    }


def test_merge_drops_relationships_the_target_already_has(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    tree = seed_tree(
        sqlite_unit_of_work,
        {
            "mother": {"first_name": "Mother"},
            "source": {"first_name": "Peter"},
            "target": {"first_name": "Peter"},
        },
        links=lambda ids, owner_id: [
            mother_of(ids["mother"], ids["source"], owner_id=owner_id),
            mother_of(ids["mother"], ids["target"], owner_id=owner_id),
            *spouses(ids["source"], ids["target"], owner_id=owner_id),
        ],
    )

    result = execute_merge(
        tree["source"],
        tree["target"],
        owner_id=tree.owner_id,
        unit_of_work=sqlite_unit_of_work(),
    )

    assert result.relationships_transferred == 0
    assert relationship_rows(sqlite_unit_of_work, tree.owner_id) == {
        (tree["mother"], tree["target"], "parentOf", "mother"),
    }


def test_source_parent_replaces_target_parent(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    tree = seed_tree(
        sqlite_unit_of_work,
        {
            "father_a": {"first_name": "Adam"},
            "father_b": {"first_name": "Bob"},
            "source": {"first_name": "Peter"},
            "target": {"first_name": "Peter"},
        },
        links=lambda ids, owner_id: [
            father_of(ids["father_a"], ids["source"], owner_id=owner_id),
            father_of(ids["father_b"], ids["target"], owner_id=owner_id),
        ],
    )
    with sqlite_unit_of_work() as uow:
        preview = preview_merge(
            uow.repositories, tree["source"], tree["target"], owner_id=tree.owner_id
        )
    assert preview.can_merge
    assert preview.validation.warnings == (
        "Both people have different fathers - merge will overwrite",
    )

    execute_merge(
        tree["source"],
        tree["target"],
        owner_id=tree.owner_id,
        unit_of_work=sqlite_unit_of_work(),
    )

    assert relationship_rows(sqlite_unit_of_work, tree.owner_id) == {
        (tree["father_a"], tree["target"], "parentOf", "father"),
    }


def test_merging_a_child_into_its_parent_keeps_the_grandparent(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    tree = seed_tree(
        sqlite_unit_of_work,
        {
            "grandmother": {"first_name": "Edith"},
            "mother": {"first_name": "Mary"},
            "child": {"first_name": "Mary"},
        },
        links=lambda ids, owner_id: [
            mother_of(ids["grandmother"], ids["mother"], owner_id=owner_id),
            mother_of(ids["mother"], ids["child"], owner_id=owner_id),
        ],
    )
    with sqlite_unit_of_work() as uow:
        preview = preview_merge(
            uow.repositories, tree["child"], tree["mother"], owner_id=tree.owner_id
        )
    assert preview.validation.warnings == ()
    assert preview.validation.conflict_fields == ()

    result = execute_merge(
        tree["child"],
        tree["mother"],
        owner_id=tree.owner_id,
        unit_of_work=sqlite_unit_of_work(),
    )

    assert result.relationships_transferred == 0
    assert relationship_rows(sqlite_unit_of_work, tree.owner_id) == {
        (tree["grandmother"], tree["mother"], "parentOf", "mother"),
    }


def test_failed_merge_changes_nothing(
    sqlite_unit_of_work: UnitOfWorkFactory,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    tree = seed_tree(
        sqlite_unit_of_work,
        {
            "mother": {"first_name": "Mother"},
            "source": {"first_name": "Peter", "nickname": "Pete"},
            "target": {"first_name": "Peter"},
        },
        links=lambda ids, owner_id: [mother_of(ids["mother"], ids["source"], owner_id=owner_id)],
    )
    before = relationship_rows(sqlite_unit_of_work, tree.owner_id)

    def explode(self: SqlAlchemyPersonRepository, person: object) -> None:
        raise RuntimeError("connection lost")

    monkeypatch.setattr(SqlAlchemyPersonRepository, "delete", explode)

    with pytest.raises(RuntimeError):
        execute_merge(
            tree["source"],
            tree["target"],
            owner_id=tree.owner_id,
            unit_of_work=sqlite_unit_of_work(),
        )

    assert _counts(sqlite_unit_of_work, tree.owner_id) == (3, 1)
    assert relationship_rows(sqlite_unit_of_work, tree.owner_id) == before
    target = stored_person(sqlite_unit_of_work, tree["target"])
    assert target is not None
    assert target.nickname is None


def test_merge_refusals(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    tree = seed_tree(
        sqlite_unit_of_work,
        {
            "me": {"first_name": "Me"},
            "john": {"first_name": "John", "gender": Gender.MALE},
            "joan": {"first_name": "Joan", "gender": Gender.FEMALE},
        },
    )
    stranger = seed_tree(sqlite_unit_of_work, {"john": {"first_name": "John"}})
    set_default_person(tree.owner_id, tree["me"], unit_of_work_factory=sqlite_unit_of_work)

    def merge(source: int, target: int) -> None:
        execute_merge(source, target, owner_id=tree.owner_id, unit_of_work=sqlite_unit_of_work())

    with pytest.raises(MergeBlockedError, match="into themselves"):
        merge(tree["john"], tree["john"])
    with pytest.raises(MergeBlockedError, match="Gender mismatch: Cannot merge male into female"):
        merge(tree["john"], tree["joan"])
    with pytest.raises(ForbiddenMergeError):
        merge(tree["me"], tree["john"])
    with pytest.raises(ForbiddenMergeError):
        merge(tree["john"], tree["me"])
    with pytest.raises(PersonNotFoundError):
        merge(stranger["john"], tree["john"])
    with pytest.raises(PersonNotFoundError):
        merge(tree["john"], 9999)

    assert _counts(sqlite_unit_of_work, tree.owner_id) == (3, 0)
