"""Field reconciliation shared by person merges and import-time merges.

Rules, applied per field with the target (the surviving record) as default:

1. a non-empty value beats an empty or missing one
2. the longer string wins; for partial ISO dates that is the one with more
   components (``1950-03-15`` over ``1950``)
3. ties keep the target value

Gender is the exception: ``unspecified`` counts as missing, and two different
specified genders are a conflict the caller has to handle.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from kindred.domain.model import Gender, PersonFields

if TYPE_CHECKING:
    from collections.abc import Mapping


def select_best_value(source: str | None, target: str | None) -> str | None:
    if not source:
        return target
    if not target:
        return source
    return source if len(source) > len(target) else target


def genders_conflict(source: Gender | None, target: Gender | None) -> bool:
    return (
        source is not None
        and target is not None
        and Gender.UNSPECIFIED not in (source, target)
        and source != target
    )


def reconcile_gender(source: Gender | None, target: Gender | None) -> Gender:
    """Specified beats unspecified; on a conflict the target is kept."""
    if target is None or target is Gender.UNSPECIFIED:
        return source or Gender.UNSPECIFIED
    return target


def reconcile_fields(source: PersonFields, target: PersonFields) -> PersonFields:
    merged: dict[str, object] = {}
    for name in PersonFields.names():
        if name == "gender":
            merged[name] = reconcile_gender(source.gender, target.gender)
            continue
        best = select_best_value(source.value(name), target.value(name))  # type: ignore[arg-type]
        if name in ("first_name", "last_name"):
            best = best or ""
        merged[name] = best
    return PersonFields(**merged)  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class FieldComparison:
    source: object
    target: object
    merged: object


def compare_fields(
    source: PersonFields,
    target: PersonFields,
    merged: PersonFields,
) -> Mapping[str, FieldComparison]:
    """Per-field ``source / target / merged`` table, in declaration order."""
    return {
        name: FieldComparison(source.value(name), target.value(name), merged.value(name))
        for name in PersonFields.names()
    }
