"""Person aggregate and its reconcilable field snapshot."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import TYPE_CHECKING

from .entity import Entity
from .enums import Gender

if TYPE_CHECKING:
    from .primitives import IsoDate, OwnerId


@dataclass(frozen=True, kw_only=True)
class PersonFields:
    """Values a merge or import reconciles; identity and ownership excluded."""

    first_name: str = ""
    last_name: str = ""
    gender: Gender = Gender.UNSPECIFIED
    birth_date: IsoDate | None = None
    death_date: IsoDate | None = None
    photo_url: str | None = None
    birth_surname: str | None = None
    nickname: str | None = None
    notes: str | None = None

    @classmethod
    def names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def value(self, name: str) -> object:
        return getattr(self, name)

    def with_values(self, **changes: object) -> PersonFields:
        return replace(self, **changes)  # type: ignore[arg-type]


@dataclass(eq=False, kw_only=True)
class Person(Entity):
    owner_id: OwnerId
    first_name: str = ""
    last_name: str = ""
    gender: Gender = Gender.UNSPECIFIED
    birth_date: IsoDate | None = None
    death_date: IsoDate | None = None
    photo_url: str | None = None
    birth_surname: str | None = None
    nickname: str | None = None
    notes: str | None = None

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def snapshot(self) -> PersonFields:
        return PersonFields(**{name: getattr(self, name) for name in PersonFields.names()})

    def apply(self, values: PersonFields) -> None:
        for name in PersonFields.names():
            setattr(self, name, values.value(name))

    @classmethod
    def from_fields(cls, values: PersonFields, *, owner_id: OwnerId) -> Person:
        return cls(
            owner_id=owner_id,
            **{name: values.value(name) for name in PersonFields.names()},  # type: ignore[arg-type]
        )
