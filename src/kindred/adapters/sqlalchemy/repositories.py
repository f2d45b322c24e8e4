"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import or_, select

from kindred.adapters.sqlalchemy.mappings import (
    owner_table,
    person_merge_table,
    person_table,
    relationship_table,
)
from kindred.domain.model import Owner, Person, PersonMerge, Relationship

if TYPE_CHECKING:
    from collections.abc import Collection

    from sqlalchemy.orm import Session

    from kindred.domain.model import OwnerId, PersonId, RelationshipKey


class SqlAlchemyOwnerRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Owner) -> None:
        self.session.add(entity)

    def get(self, owner_id: OwnerId) -> Owner | None:
        return self.session.get(Owner, owner_id)

    def list_all(self) -> list[Owner]:
        stmt = select(Owner).order_by(owner_table.c.id)
        return list(self.session.scalars(stmt))


class SqlAlchemyPersonRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Person) -> None:
        self.session.add(entity)

    def get(self, person_id: PersonId) -> Person | None:
        return self.session.get(Person, person_id)

    def list_for_owner(self, owner_id: OwnerId) -> list[Person]:
        stmt = (
            select(Person)
            .where(person_table.c.owner_id == owner_id)
            .order_by(person_table.c.id)
        )
        return list(self.session.scalars(stmt))

    def delete(self, person: Person) -> None:
        self.session.delete(person)


class SqlAlchemyRelationshipRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Relationship) -> None:
        self.session.add(entity)

    def for_person(self, person_id: PersonId) -> list[Relationship]:
        columns = relationship_table.c
        stmt = (
            select(Relationship)
            .where(or_(columns.person1_id == person_id, columns.person2_id == person_id))
            .order_by(columns.id)
        )
        return list(self.session.scalars(stmt))

    def for_owner(self, owner_id: OwnerId) -> list[Relationship]:
        columns = relationship_table.c
        stmt = select(Relationship).where(columns.owner_id == owner_id).order_by(columns.id)
        return list(self.session.scalars(stmt))

    def keys_among(self, person_ids: Collection[PersonId]) -> set[RelationshipKey]:
        if not person_ids:
            return set()
        ids = list(person_ids)
        columns = relationship_table.c
        stmt = select(Relationship).where(
            columns.person1_id.in_(ids),
            columns.person2_id.in_(ids),
        )
        return {relationship.key for relationship in self.session.scalars(stmt)}

    def delete(self, relationship: Relationship) -> None:
        self.session.delete(relationship)


class SqlAlchemyPersonMergeRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: PersonMerge) -> None:
        self.session.add(entity)

    def for_owner(self, owner_id: OwnerId) -> list[PersonMerge]:
        columns = person_merge_table.c
        stmt = select(PersonMerge).where(columns.owner_id == owner_id).order_by(columns.id)
        return list(self.session.scalars(stmt))


if TYPE_CHECKING:
    from kindred.domain.ports.persistence import (
        OwnerRepository,
        PersonMergeRepository,
        PersonRepository,
        RelationshipRepository,
    )

    _session_stub = cast("Session", object())
    _owner_repo: OwnerRepository = SqlAlchemyOwnerRepository(_session_stub)
    _person_repo: PersonRepository = SqlAlchemyPersonRepository(_session_stub)
    _relationship_repo: RelationshipRepository = SqlAlchemyRelationshipRepository(_session_stub)
    _merge_repo: PersonMergeRepository = SqlAlchemyPersonMergeRepository(_session_stub)
