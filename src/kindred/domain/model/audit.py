"""Audit records for merge decisions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from .entity import Entity

if TYPE_CHECKING:
    from .primitives import OwnerId, PersonId


@dataclass(eq=False, kw_only=True)
class PersonMerge(Entity):
    """Audit record for folding a duplicate person into its surviving counterpart."""

    owner_id: OwnerId
    source_id: PersonId
    target_id: PersonId
    source_name: str = ""
    relationships_transferred: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
