"""Field mapping from GEDCOM individuals onto person fields."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from kindred.domain.model import Gender, PersonFields

if TYPE_CHECKING:
    from .records import DateModifier, Individual

_NAME = re.compile(r"^([^/]*)\s*/([^/]*)/")


def split_name(value: str) -> tuple[str, str]:
    """``"John /Smith/"`` -> ``("John", "Smith")``; no slashes means all first name."""
    if match := _NAME.match(value):
        return match.group(1).strip(), match.group(2).strip()
    return value.strip(), ""


def gender_for_sex(sex: str | None) -> Gender:
    if not sex:
        return Gender.UNSPECIFIED
    match sex.upper():
        case "M":
            return Gender.MALE
        case "F":
            return Gender.FEMALE
        case "U":
            return Gender.UNSPECIFIED
        case _:
            return Gender.OTHER


def append_date_modifier_note(notes: str | None, modifier: DateModifier | None) -> str | None:
    if modifier is None:
        return notes
    if not notes or not notes.strip():
        return modifier.note
    return f"{notes}\n{modifier.note}"


def individual_fields(individual: Individual) -> PersonFields:
    return PersonFields(
        first_name=individual.first_name or "",
        last_name=individual.last_name or "",
        gender=gender_for_sex(individual.sex),
        birth_date=individual.birth_date or None,
        death_date=individual.death_date or None,
        photo_url=individual.photo_url or None,
        notes=individual.notes or None,
    )
