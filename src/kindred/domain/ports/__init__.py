"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    OwnerRepository,
    PersonMergeRepository,
    PersonRepository,
    RelationshipRepository,
    Repository,
)
from .unit_of_work import RepositoryCollection, TreeRepositories, TreeUnitOfWork, UnitOfWork

__all__ = [
    "OwnerRepository",
    "PersonMergeRepository",
    "PersonRepository",
    "RelationshipRepository",
    "Repository",
    "RepositoryCollection",
    "TreeRepositories",
    "TreeUnitOfWork",
    "UnitOfWork",
]
