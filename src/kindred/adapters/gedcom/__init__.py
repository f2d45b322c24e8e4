"""GEDCOM file adapter (python-gedcom)."""

from __future__ import annotations

from .reader import (
    SUPPORTED_VERSIONS,
    detect_version,
    read_gedcom,
    read_gedcom_file,
    record_lines,
    validate_version,
)
from .translator import translate_elements

__all__ = [
    "SUPPORTED_VERSIONS",
    "detect_version",
    "read_gedcom",
    "read_gedcom_file",
    "record_lines",
    "translate_elements",
    "validate_version",
]
