"""Summary numbers shown before an import is confirmed."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kindred.domain.model import IsoDate

    from .records import GedcomDocument


@dataclass(frozen=True, slots=True)
class DateRange:
    earliest: IsoDate
    latest: IsoDate


@dataclass(frozen=True, slots=True)
class GedcomStatistics:
    total_individuals: int
    total_families: int
    version: str
    date_range: DateRange | None = None


def extract_statistics(document: GedcomDocument) -> GedcomStatistics:
    # ISO strings (full or partial) sort chronologically by year first
    dates = sorted(
        date
        for individual in document.individuals
        for date in (individual.birth_date, individual.death_date)
        if date
    )
    return GedcomStatistics(
        total_individuals=len(document.individuals),
        total_families=len(document.families),
        version=document.version,
        date_range=DateRange(dates[0], dates[-1]) if dates else None,
    )
