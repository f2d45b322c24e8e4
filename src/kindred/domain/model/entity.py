"""
Base building blocks:
identity semantics shared by persisted aggregates.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False, kw_only=True)
class Entity:
    """Identity is assigned by the store when the entity is first flushed."""

    id: int | None = None

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    @property
    def persisted_id(self) -> int:
        if self.id is None:
            raise ValueError(f"{type(self).__name__} has not been persisted yet")
        return self.id
