"""Read GEDCOM text with python-gedcom.

Only the version check happens before structural parsing: an unsupported
file is rejected without building an element tree.
"""

from __future__ import annotations

import re
from logging import getLogger
from pathlib import Path
from typing import Final

from gedcom.parser import GedcomFormatViolationError, Parser

from kindred.domain.errors import GedcomParseError, UnsupportedVersionError
from kindred.domain.gedcom import GedcomDocument

from .translator import translate_elements

log = getLogger(__name__)

SUPPORTED_VERSIONS: Final[tuple[str, ...]] = ("5.5", "5.5.1", "7.0")

_GEDC = re.compile(r"^1\s+GEDC\b")
_VERS = re.compile(r"^2\s+VERS\s+(.+)$")
_RECORD = re.compile(r"^0\s+(@[^@]+@)\s+\w+")
_VIOLATION_LINE = re.compile(r"Line <?(\d+)")


def detect_version(content: str) -> str | None:
    """Value of ``HEAD/GEDC/VERS``, or ``None`` if the file has none."""
    lines = content.splitlines()
    for index, line in enumerate(lines):
        if not _GEDC.match(line.strip()):
            continue
        for following in lines[index + 1 :]:
            stripped = following.strip()
            if match := _VERS.match(stripped):
                return match.group(1).strip()
            if not stripped.startswith("2 ") and not stripped.startswith("3 "):
                break
    return None


def validate_version(version: str | None) -> str:
    if version is None or version not in SUPPORTED_VERSIONS:
        raise UnsupportedVersionError(version)
    return version


def record_lines(content: str) -> dict[str, int]:
    """Map each level-0 record pointer to its 1-based line number."""
    return {
        match.group(1): number
        for number, line in enumerate(content.splitlines(), start=1)
        if (match := _RECORD.match(line.strip()))
    }


def _decode(content: str | bytes) -> str:
    if isinstance(content, bytes):
        try:
            return content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise GedcomParseError(
                f"File is not UTF-8 encoded (invalid byte at offset {exc.start})"
            ) from exc
    return content.removeprefix("\ufeff")


def read_gedcom(content: str | bytes) -> GedcomDocument:
    """Parse GEDCOM text into individuals, families and date warnings.

    Raises ``UnsupportedVersionError`` for a missing or unknown version and
    ``GedcomParseError`` when the line structure is invalid.
    """
    text = _decode(content)
    version = validate_version(detect_version(text))

    parser = Parser()
    try:
        parser.parse(text.encode("utf-8").splitlines(keepends=True), strict=False)
    except GedcomFormatViolationError as exc:
        detail = str(exc)
        match = _VIOLATION_LINE.search(detail)
        line = int(match.group(1)) if match else None
        log.warning("Rejecting GEDCOM file: %s", detail.splitlines()[0])
        raise GedcomParseError(
            "Lines must be no more than one level higher than previous line",
            line=line,
        ) from exc

    document = translate_elements(
        parser.get_root_child_elements(),
        version=version,
        lines=record_lines(text),
    )
    log.info(
        "Read GEDCOM %s: %d individuals, %d families, %d issues",
        version,
        len(document.individuals),
        len(document.families),
        len(document.issues),
    )
    return document


def read_gedcom_file(path: Path | str) -> GedcomDocument:
    return read_gedcom(Path(path).read_bytes())
