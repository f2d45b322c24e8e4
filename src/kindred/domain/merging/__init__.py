"""Person merge: reconciliation, preview and atomic execution."""

from __future__ import annotations

from .execute import MergeResult, execute_merge
from .preview import (
    SELF_MERGE_MESSAGE,
    MergePreview,
    MergeValidation,
    build_merge_preview,
    load_merge_parties,
    preview_merge,
    validate_merge,
)
from .reconcile import (
    FieldComparison,
    compare_fields,
    genders_conflict,
    reconcile_fields,
    reconcile_gender,
    select_best_value,
)
from .transfer import (
    ConflictField,
    TransferPlan,
    detect_relationship_conflicts,
    plan_relationship_transfer,
)

__all__ = [
    "SELF_MERGE_MESSAGE",
    "ConflictField",
    "FieldComparison",
    "MergePreview",
    "MergeResult",
    "MergeValidation",
    "TransferPlan",
    "build_merge_preview",
    "compare_fields",
    "detect_relationship_conflicts",
    "execute_merge",
    "genders_conflict",
    "load_merge_parties",
    "plan_relationship_transfer",
    "preview_merge",
    "reconcile_fields",
    "reconcile_gender",
    "select_best_value",
    "validate_merge",
]
