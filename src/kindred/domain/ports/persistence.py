"""Ports for persisting domain aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

from kindred.domain.model import Owner, Person, PersonMerge, Relationship

if TYPE_CHECKING:
    from collections.abc import Collection

    from kindred.domain.model import OwnerId, PersonId, RelationshipKey

TEntity = TypeVar("TEntity")


@runtime_checkable
class Repository(Protocol[TEntity]):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class OwnerRepository(Repository[Owner], Protocol):
    def get(self, owner_id: OwnerId) -> Owner | None: ...

    def list_all(self) -> list[Owner]: ...


@runtime_checkable
class PersonRepository(Repository[Person], Protocol):
    def get(self, person_id: PersonId) -> Person | None: ...

    def list_for_owner(self, owner_id: OwnerId) -> list[Person]: ...

    def delete(self, person: Person) -> None: ...


@runtime_checkable
class RelationshipRepository(Repository[Relationship], Protocol):
    def for_person(self, person_id: PersonId) -> list[Relationship]:
        """Every relationship touching ``person_id``, whoever owns it."""
        ...

    def for_owner(self, owner_id: OwnerId) -> list[Relationship]: ...

    def keys_among(self, person_ids: Collection[PersonId]) -> set[RelationshipKey]:
        """Dedup keys of relationships whose endpoints are both in ``person_ids``."""
        ...

    def delete(self, relationship: Relationship) -> None: ...


@runtime_checkable
class PersonMergeRepository(Repository[PersonMerge], Protocol):
    def for_owner(self, owner_id: OwnerId) -> list[PersonMerge]: ...
