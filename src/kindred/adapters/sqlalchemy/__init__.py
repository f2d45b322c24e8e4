"""SQLAlchemy adapter package for Kindred."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyOwnerRepository,
    SqlAlchemyPersonMergeRepository,
    SqlAlchemyPersonRepository,
    SqlAlchemyRelationshipRepository,
)
from .unit_of_work import (
    SqlAlchemyTreeUnitOfWork,
    StartupError,
    enable_sqlite_foreign_keys,
    shutdown,
    startup,
    tree_unit_of_work_factory,
)

__all__ = [
    "SqlAlchemyOwnerRepository",
    "SqlAlchemyPersonMergeRepository",
    "SqlAlchemyPersonRepository",
    "SqlAlchemyRelationshipRepository",
    "SqlAlchemyTreeUnitOfWork",
    "StartupError",
    "create_all_tables",
    "enable_sqlite_foreign_keys",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
    "tree_unit_of_work_factory",
]
