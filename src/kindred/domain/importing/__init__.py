"""GEDCOM import: resolution decisions, relationship derivation, transactional apply."""

from __future__ import annotations

from .orchestrator import ImportResult, execute_import
from .plan import ImportPlan, PersonUpdate, prepare_import
from .relationships import build_relationships_from_families, deduplicate_relationships
from .resolution import (
    PendingMerge,
    Resolution,
    ResolutionDecision,
    ResolutionOutcome,
    apply_duplicate_resolutions,
)

__all__ = [
    "ImportPlan",
    "ImportResult",
    "PendingMerge",
    "PersonUpdate",
    "Resolution",
    "ResolutionDecision",
    "ResolutionOutcome",
    "apply_duplicate_resolutions",
    "build_relationships_from_families",
    "deduplicate_relationships",
    "execute_import",
    "prepare_import",
]
