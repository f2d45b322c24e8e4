"""Domain primitives: scalar aliases + date helpers.

Dates are kept as (possibly partial) ISO strings: ``YYYY``, ``YYYY-MM`` or
``YYYY-MM-DD``. They are never padded to a full date.
"""

from __future__ import annotations

import re
from typing import Final, TypeAlias

PersonId: TypeAlias = int
OwnerId: TypeAlias = int
GedcomId: TypeAlias = str
IsoDate: TypeAlias = str

PARTIAL_ISO_DATE: Final[re.Pattern[str]] = re.compile(r"^\d{4}(-\d{2})?(-\d{2})?$")


def is_partial_iso_date(value: str | None) -> bool:
    return value is not None and PARTIAL_ISO_DATE.match(value) is not None


def date_precision(value: str | None) -> int:
    """Number of date components present (0 for missing or non-ISO values)."""
    if value is None or not is_partial_iso_date(value):
        return 0
    return value.count("-") + 1


def year_of(value: str | None) -> int | None:
    if value is None or not is_partial_iso_date(value):
        return None
    return int(value[:4])
