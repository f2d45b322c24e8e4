"""SQLAlchemy-backed unit of work for family-tree stores."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, Literal, TypeVar

from sqlalchemy import create_engine, event
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker

from kindred.adapters.sqlalchemy.mappings import start_mappers
from kindred.adapters.sqlalchemy.migrations import upgrade_head
from kindred.adapters.sqlalchemy.repositories import (
    SqlAlchemyOwnerRepository,
    SqlAlchemyPersonMergeRepository,
    SqlAlchemyPersonRepository,
    SqlAlchemyRelationshipRepository,
)
from kindred.config import get_database_config
from kindred.domain.errors import ConstraintViolationError
from kindred.domain.ports.unit_of_work import RepositoryCollection, TreeRepositories

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call kindred.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """SQLite ignores foreign keys unless every connection switches them on."""

    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _set_pragma(  # pyright: ignore[reportUnusedFunction]
        dbapi_connection: Any,
        connection_record: Any,
    ) -> None:
        _ = connection_record
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the SQLAlchemy engine, metadata, and session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    resolved_engine = engine
    if resolved_engine is None:
        resolved_engine = create_engine(database_uri or get_database_config().uri)
        enable_sqlite_foreign_keys(resolved_engine)
    start_mappers()
    upgrade_head(engine=resolved_engine)

    log.info("SQLAlchemy adapter started on %s", resolved_engine.url)
    _STATE.engine = resolved_engine


def configured_engine() -> Engine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


@contextmanager
def _storage_errors() -> Iterator[None]:
    """Translate driver failures into the domain's failure vocabulary."""

    try:
        yield
    except IntegrityError as exc:
        raise ConstraintViolationError(str(exc.orig)) from exc
    except PoolTimeoutError as exc:
        raise TimeoutError(str(exc)) from exc
    except OperationalError as exc:
        if "locked" in str(exc.orig):
            raise TimeoutError(str(exc.orig)) from exc
        raise


TRepositories = TypeVar("TRepositories", bound=RepositoryCollection)


class BaseSqlAlchemyUnitOfWork(ABC, Generic[TRepositories]):
    """Generic SQLAlchemy unit of work with pluggable repository collections."""

    def __init__(self) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.session_factory
        self._session: Session | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        self.session = self.session_factory()
        self._repositories = self._build_repositories(self.session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self.session.close()
        self.session = None
        return False

    def flush(self) -> None:
        with _storage_errors():
            self.session.flush()

    def commit(self) -> None:
        with _storage_errors():
            self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


class SqlAlchemyTreeUnitOfWork(BaseSqlAlchemyUnitOfWork[TreeRepositories]):
    """Unit of work managing SQLAlchemy sessions for one family-tree store."""

    def _build_repositories(self, session: Session) -> TreeRepositories:
        return TreeRepositories(
            owners=SqlAlchemyOwnerRepository(session),
            persons=SqlAlchemyPersonRepository(session),
            relationships=SqlAlchemyRelationshipRepository(session),
            merges=SqlAlchemyPersonMergeRepository(session),
        )


def tree_unit_of_work_factory() -> Callable[[], SqlAlchemyTreeUnitOfWork]:
    """Factory handed to application services; fails fast before ``startup``."""

    _ = _STATE.session_factory
    return SqlAlchemyTreeUnitOfWork


if TYPE_CHECKING:
    from kindred.domain.ports.unit_of_work import TreeUnitOfWork

    _uow_check: TreeUnitOfWork = SqlAlchemyTreeUnitOfWork()
