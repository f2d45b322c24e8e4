"""Transient GEDCOM records.

These exist only between parsing and import: an ``Individual`` becomes a
``Person`` (or is resolved to an existing one), a ``Family`` becomes
``Relationship`` rows. Neither is persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kindred.domain.errors import ImportIssue
    from kindred.domain.model import GedcomId, IsoDate


class DateModifier(StrEnum):
    ABOUT = "ABT"
    BEFORE = "BEF"
    AFTER = "AFT"
    CALCULATED = "CAL"
    ESTIMATED = "EST"

    @property
    def note(self) -> str:
        return _MODIFIER_NOTES[self]


_MODIFIER_NOTES: dict[DateModifier, str] = {
    DateModifier.ABOUT: "(Date approximate)",
    DateModifier.BEFORE: "(Date before)",
    DateModifier.AFTER: "(Date after)",
    DateModifier.CALCULATED: "(Date calculated)",
    DateModifier.ESTIMATED: "(Date estimated)",
}


@dataclass(frozen=True, slots=True)
class GedcomDate:
    """A normalized date: full or partial ISO string plus optional modifier."""

    value: IsoDate
    modifier: DateModifier | None = None

    @property
    def partial(self) -> bool:
        return len(self.value) < len("YYYY-MM-DD")


@dataclass(slots=True, kw_only=True)
class Individual:
    gedcom_id: GedcomId
    first_name: str = ""
    last_name: str = ""
    sex: str | None = None
    birth_date: IsoDate | None = None
    death_date: IsoDate | None = None
    birth_date_modifier: DateModifier | None = None
    death_date_modifier: DateModifier | None = None
    notes: str | None = None
    photo_url: str | None = None
    child_of_family: GedcomId | None = None
    spouse_families: list[GedcomId] = field(default_factory=list[str])
    line: int | None = None

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def has_name(self) -> bool:
        return bool(self.first_name.strip() or self.last_name.strip())


@dataclass(slots=True, kw_only=True)
class Family:
    id: GedcomId
    husband: GedcomId | None = None
    wife: GedcomId | None = None
    children: list[GedcomId] = field(default_factory=list[str])
    marriage_date: IsoDate | None = None
    line: int | None = None

    @property
    def members(self) -> list[GedcomId]:
        spouses = [member for member in (self.husband, self.wife) if member is not None]
        return [*spouses, *self.children]


@dataclass(slots=True, kw_only=True)
class GedcomDocument:
    """Everything the reader extracted from one GEDCOM file."""

    version: str
    individuals: list[Individual] = field(default_factory=list[Individual])
    families: list[Family] = field(default_factory=list[Family])
    issues: list[ImportIssue] = field(default_factory=list["ImportIssue"])

    def individual(self, gedcom_id: GedcomId) -> Individual | None:
        return next((i for i in self.individuals if i.gedcom_id == gedcom_id), None)
