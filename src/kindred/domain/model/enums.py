"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Gender(StrEnum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
    UNSPECIFIED = "unspecified"


class RelationshipType(StrEnum):
    """Storage discriminator for ``RelationshipKind``."""

    PARENT_OF = "parentOf"
    SPOUSE = "spouse"


class ParentRole(StrEnum):
    MOTHER = "mother"
    FATHER = "father"
