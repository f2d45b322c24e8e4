"""Wire contracts for the tree-maintenance endpoints."""

from __future__ import annotations

from .schema import (
    DuplicateQuery,
    DuplicatesResponse,
    ErrorResponse,
    GedcomParseResponse,
    ImportRequest,
    ImportResponse,
    MergeExecuteResponse,
    MergePreviewResponse,
    MergeRequest,
    ResolutionDecisionPayload,
)
from .translator import (
    duplicates_response,
    error_response,
    error_status,
    import_response,
    merge_execute_response,
    merge_preview_response,
    parse_response,
    resolution_decisions,
)

__all__ = [
    "DuplicateQuery",
    "DuplicatesResponse",
    "ErrorResponse",
    "GedcomParseResponse",
    "ImportRequest",
    "ImportResponse",
    "MergeExecuteResponse",
    "MergePreviewResponse",
    "MergeRequest",
    "ResolutionDecisionPayload",
    "duplicates_response",
    "error_response",
    "error_status",
    "import_response",
    "merge_execute_response",
    "merge_preview_response",
    "parse_response",
    "resolution_decisions",
]
