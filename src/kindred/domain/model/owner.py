"""Account that owns a family tree."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .entity import Entity

if TYPE_CHECKING:
    from .primitives import PersonId


@dataclass(eq=False, kw_only=True)
class Owner(Entity):
    display_name: str
    # the owner's own profile person; never merged away
    default_person_id: PersonId | None = None

    def is_default_person(self, person_id: PersonId) -> bool:
        return self.default_person_id is not None and self.default_person_id == person_id
