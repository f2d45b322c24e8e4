"""Public domain model surface."""

from __future__ import annotations

from kindred.domain.model.audit import PersonMerge
from kindred.domain.model.entity import Entity
from kindred.domain.model.enums import Gender, ParentRole, RelationshipType
from kindred.domain.model.owner import Owner
from kindred.domain.model.person import Person, PersonFields
from kindred.domain.model.primitives import (
    PARTIAL_ISO_DATE,
    GedcomId,
    IsoDate,
    OwnerId,
    PersonId,
    date_precision,
    is_partial_iso_date,
    year_of,
)
from kindred.domain.model.relationship import (
    ParentOf,
    Relationship,
    RelationshipKey,
    RelationshipKind,
    Spouse,
    deduplicate,
    relationship_kind,
)

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    # aggregates
    "Owner",
    "Person",
    "PersonFields",
    "Relationship",
    # relationship kinds
    "ParentOf",
    "Spouse",
    "RelationshipKind",
    "RelationshipKey",
    "relationship_kind",
    "deduplicate",
    # audit
    "PersonMerge",
    # enums
    "Gender",
    "ParentRole",
    "RelationshipType",
    # primitives
    "GedcomId",
    "IsoDate",
    "OwnerId",
    "PersonId",
    "PARTIAL_ISO_DATE",
    "date_precision",
    "is_partial_iso_date",
    "year_of",
]
