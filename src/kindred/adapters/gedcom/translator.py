"""Translate python-gedcom element trees into transient GEDCOM records."""

from __future__ import annotations

import re
from logging import getLogger
from typing import TYPE_CHECKING, Final

import gedcom.tags as tags
from gedcom.element.family import FamilyElement
from gedcom.element.individual import IndividualElement

from kindred.domain.errors import ImportIssue
from kindred.domain.gedcom import (
    INVALID_DATE_MESSAGE,
    Family,
    GedcomDate,
    GedcomDocument,
    Individual,
    append_date_modifier_note,
    normalize_date,
    split_name,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from gedcom.element.element import Element


log = getLogger(__name__)

TAG_NOTE: Final = "NOTE"
DATE_FIX: Final = "Use format YYYY-MM-DD or standard GEDCOM date format (DD MMM YYYY)"

_POINTER = re.compile(r"^@[^@]+@$")


def _first_child(element: Element, tag: str) -> Element | None:
    return next((child for child in element.get_child_elements() if child.get_tag() == tag), None)


def _children(element: Element, tag: str) -> list[Element]:
    return [child for child in element.get_child_elements() if child.get_tag() == tag]


def _text(element: Element) -> str:
    return element.get_multi_line_value().replace("\r\n", "\n").replace("\r", "\n")


class _Translator:
    def __init__(
        self,
        elements: Iterable[Element],
        *,
        version: str,
        lines: Mapping[str, int],
    ) -> None:
        self._elements = list(elements)
        self._lines = lines
        self._notes = {
            element.get_pointer(): element
            for element in self._elements
            if element.get_tag() == TAG_NOTE and element.get_pointer()
        }
        self.document = GedcomDocument(version=version)

    def run(self) -> GedcomDocument:
        for element in self._elements:
            if isinstance(element, IndividualElement):
                self.document.individuals.append(self._individual(element))
            elif isinstance(element, FamilyElement):
                self.document.families.append(self._family(element))
        log.debug(
            "Translated %d individuals, %d families",
            len(self.document.individuals),
            len(self.document.families),
        )
        return self.document

    def _individual(self, element: Element) -> Individual:
        pointer = element.get_pointer()
        individual = Individual(gedcom_id=pointer, line=self._lines.get(pointer))

        if (name := _first_child(element, tags.GEDCOM_TAG_NAME)) is not None:
            individual.first_name, individual.last_name = split_name(name.get_value())

        if (sex := _first_child(element, tags.GEDCOM_TAG_SEX)) is not None:
            individual.sex = sex.get_value().strip() or None

        notes = [self._note_text(note) for note in _children(element, TAG_NOTE)]
        individual.notes = "\n".join(note for note in notes if note) or None

        birth = self._event_date(individual, element, tags.GEDCOM_TAG_BIRTH, "birthDate")
        if birth is not None:
            individual.birth_date = birth.value
            individual.birth_date_modifier = birth.modifier
            individual.notes = append_date_modifier_note(individual.notes, birth.modifier)

        death = self._event_date(individual, element, tags.GEDCOM_TAG_DEATH, "deathDate")
        if death is not None:
            individual.death_date = death.value
            individual.death_date_modifier = death.modifier
            individual.notes = append_date_modifier_note(individual.notes, death.modifier)

        individual.photo_url = self._photo_url(element)

        famc = _children(element, tags.GEDCOM_TAG_FAMILY_CHILD)
        if famc:
            individual.child_of_family = famc[0].get_value().strip() or None
        individual.spouse_families = [
            value
            for fams in _children(element, tags.GEDCOM_TAG_FAMILY_SPOUSE)
            if (value := fams.get_value().strip())
        ]
        return individual

    def _family(self, element: Element) -> Family:
        pointer = element.get_pointer()
        family = Family(id=pointer, line=self._lines.get(pointer))

        if (husband := _first_child(element, tags.GEDCOM_TAG_HUSBAND)) is not None:
            family.husband = husband.get_value().strip() or None
        if (wife := _first_child(element, tags.GEDCOM_TAG_WIFE)) is not None:
            family.wife = wife.get_value().strip() or None
        family.children = [
            value
            for child in _children(element, tags.GEDCOM_TAG_CHILD)
            if (value := child.get_value().strip())
        ]

        marriage = _first_child(element, tags.GEDCOM_TAG_MARRIAGE)
        date = _first_child(marriage, tags.GEDCOM_TAG_DATE) if marriage is not None else None
        if date is not None and (normalized := normalize_date(date.get_value())) is not None:
            family.marriage_date = normalized.value
        return family

    def _event_date(
        self,
        individual: Individual,
        element: Element,
        event_tag: str,
        field: str,
    ) -> GedcomDate | None:
        event = _first_child(element, event_tag)
        if event is None:
            return None
        date = _first_child(event, tags.GEDCOM_TAG_DATE)
        if date is None:
            return None
        raw = date.get_value()
        normalized = normalize_date(raw)
        if normalized is None:
            log.debug("Dropping unparseable %s %r for %s", field, raw, individual.gedcom_id)
            self.document.issues.append(
                ImportIssue.warning(
                    f'Could not parse date "{raw}" - {INVALID_DATE_MESSAGE}',
                    line=individual.line,
                    gedcom_id=individual.gedcom_id,
                    individual_name=individual.name or None,
                    field=field,
                    suggested_fix=DATE_FIX,
                )
            )
        return normalized

    def _note_text(self, note: Element) -> str:
        value = note.get_value().strip()
        if _POINTER.match(value) and (record := self._notes.get(value)) is not None:
            return _text(record).strip()
        return _text(note).strip()

    @staticmethod
    def _photo_url(element: Element) -> str | None:
        # the first OBJE block is authoritative
        obje = _first_child(element, tags.GEDCOM_TAG_OBJECT)
        if obje is None:
            return None
        file = _first_child(obje, tags.GEDCOM_TAG_FILE)
        if file is None:
            return None
        return file.get_value().strip() or None


def translate_elements(
    elements: Iterable[Element],
    *,
    version: str,
    lines: Mapping[str, int] | None = None,
) -> GedcomDocument:
    """Build a ``GedcomDocument`` from level-0 records.

    ``lines`` maps record pointers to the 1-based line they start on.
    """
    return _Translator(elements, version=version, lines=lines or {}).run()
