"""GEDCOM date normalization.

Accepted shapes (optionally prefixed by a modifier such as ``ABT``)::

    1950-01-15      already ISO (GEDCOM 7)  -> 1950-01-15
    15 JAN 1950                             -> 1950-01-15
    JAN 1950                                -> 1950-01
    1950                                    -> 1950

Partial dates stay partial.
"""

from __future__ import annotations

import re
from typing import Final

from .records import DateModifier, GedcomDate

MONTHS: Final[dict[str, str]] = {
    "JAN": "01",
    "FEB": "02",
    "MAR": "03",
    "APR": "04",
    "MAY": "05",
    "JUN": "06",
    "JUL": "07",
    "AUG": "08",
    "SEP": "09",
    "OCT": "10",
    "NOV": "11",
    "DEC": "12",
}

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_YEAR = re.compile(r"^\d{4}$")
_DAY = re.compile(r"^\d{1,2}$")
_MODIFIED = re.compile(r"^(ABT|BEF|AFT|CAL|EST)\s+(.+)$")

INVALID_DATE_MESSAGE: Final = "Invalid date format"


def normalize_date(raw: str | None) -> GedcomDate | None:
    """Return the normalized date, or ``None`` when ``raw`` has no supported shape."""
    if not raw or not raw.strip():
        return None
    text = raw.strip()
    if _ISO_DATE.match(text):
        return GedcomDate(text)

    modifier: DateModifier | None = None
    if match := _MODIFIED.match(text):
        modifier = DateModifier(match.group(1))
        text = match.group(2)

    parts = text.split()
    match parts:
        case [year] if _YEAR.match(year):
            return GedcomDate(year, modifier)
        case [month, year] if month.upper() in MONTHS and _YEAR.match(year):
            return GedcomDate(f"{year}-{MONTHS[month.upper()]}", modifier)
        case [day, month, year] if (
            _DAY.match(day) and month.upper() in MONTHS and _YEAR.match(year)
        ):
            return GedcomDate(f"{year}-{MONTHS[month.upper()]}-{day.zfill(2)}", modifier)
        case _:
            return None
