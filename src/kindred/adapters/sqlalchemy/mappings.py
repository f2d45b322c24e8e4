"""SQLAlchemy mapping metadata for the Kindred domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from enum import Enum as PyEnum
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    func,
    literal_column,
    orm,
)
from sqlalchemy.orm import composite, configure_mappers

from kindred.domain.model import (
    Gender,
    Owner,
    ParentRole,
    Person,
    PersonMerge,
    Relationship,
    RelationshipType,
    relationship_kind,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

ISO_DATE_LENGTH = 10


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _value_enum(enum_cls: type[PyEnum]) -> Enum:
    # store the wire values ("parentOf"), not the member names
    return Enum(
        enum_cls,
        native_enum=False,
        values_callable=lambda members: [member.value for member in members],
        length=16,
    )


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

owner_table = Table(
    "owner",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("display_name", String, nullable=False),
    # not a foreign key: person.owner_id already points the other way
    Column("default_person_id", Integer, nullable=True),
)

person_table = Table(
    "person",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "owner_id",
        Integer,
        ForeignKey("owner.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("first_name", String, nullable=False, default=""),
    Column("last_name", String, nullable=False, default=""),
    Column("gender", _value_enum(Gender), nullable=False, default=Gender.UNSPECIFIED),
    Column("birth_date", String(ISO_DATE_LENGTH), nullable=True),
    Column("death_date", String(ISO_DATE_LENGTH), nullable=True),
    Column("photo_url", String, nullable=True),
    Column("birth_surname", String, nullable=True),
    Column("nickname", String, nullable=True),
    Column("notes", Text, nullable=True),
)

relationship_table = Table(
    "relationship",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "person1_id",
        Integer,
        ForeignKey("person.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column(
        "person2_id",
        Integer,
        ForeignKey("person.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("type", _value_enum(RelationshipType), key="_kind_type", nullable=False),
    Column("parent_role", _value_enum(ParentRole), key="_kind_role", nullable=True),
    Column(
        "owner_id",
        Integer,
        ForeignKey("owner.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    CheckConstraint("person1_id <> person2_id", name="distinct_endpoints"),
)

Index(
    "uq_relationship_key",
    relationship_table.c.person1_id,
    relationship_table.c.person2_id,
    relationship_table.c._kind_type,  # noqa: SLF001
    func.coalesce(relationship_table.c._kind_role, literal_column("''")),  # noqa: SLF001
    unique=True,
)

person_merge_table = Table(
    "person_merge",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "owner_id",
        Integer,
        ForeignKey("owner.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    # the source row is gone after the merge; keep plain ids
    Column("source_id", Integer, nullable=False),
    Column("target_id", Integer, nullable=False),
    Column("source_name", String, nullable=False, default=""),
    Column("relationships_transferred", Integer, nullable=False, default=0),
    Column("created_at", UTCDateTime(), nullable=False),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Owner, owner_table)
    mapper_registry.map_imperatively(Person, person_table)
    mapper_registry.map_imperatively(
        Relationship,
        relationship_table,
        properties={
            "kind": composite(
                relationship_kind,
                relationship_table.c._kind_type,  # noqa: SLF001
                relationship_table.c._kind_role,  # noqa: SLF001
            ),
        },
    )
    mapper_registry.map_imperatively(PersonMerge, person_merge_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create tables without going through migrations."""

    start_mappers()
    mapper_registry.metadata.create_all(engine)
