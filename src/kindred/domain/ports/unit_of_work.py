"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, TypeAlias, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from kindred.domain.ports.persistence import (
        OwnerRepository,
        PersonMergeRepository,
        PersonRepository,
        RelationshipRepository,
    )


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""

TRepositories = TypeVar("TRepositories", bound=RepositoryCollection)


@runtime_checkable
class UnitOfWork(Protocol[TRepositories]):
    """Generic unit-of-work boundary around a repository collection.

    Leaving the ``with`` block on an exception rolls back; nothing is
    committed unless ``commit`` is called.
    """

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def flush(self) -> None:
        """Send pending writes so generated ids become available."""
        ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class TreeRepositories(RepositoryCollection):
    """Repositories for one family-tree store."""

    owners: OwnerRepository
    persons: PersonRepository
    relationships: RelationshipRepository
    merges: PersonMergeRepository


TreeUnitOfWork: TypeAlias = UnitOfWork[TreeRepositories]
