"""Translate between API payloads and domain objects."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kindred.domain.errors import (
    ForbiddenMergeError,
    ImportFailedError,
    KindredError,
    MergeBlockedError,
    OwnerNotFoundError,
    PersonNotFoundError,
)
from kindred.domain.importing import Resolution, ResolutionDecision
from kindred.domain.model import PersonFields

from .schema import (
    DateRangePayload,
    DuplicateMatch,
    DuplicatesResponse,
    ErrorResponse,
    FieldComparisonPayload,
    GedcomParseResponse,
    ImportIssuePayload,
    ImportResponse,
    MergeExecuteResponse,
    MergePreviewResponse,
    MergeValidationPayload,
    PersonFieldsPayload,
    PersonPayload,
    PersonSummary,
    RelationshipIssuePayload,
    RelationshipPayload,
    StatisticsPayload,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from kindred.domain.errors import ImportIssue
    from kindred.domain.gedcom import ConsistencyIssue, GedcomStatistics
    from kindred.domain.importing import ImportResult
    from kindred.domain.matching import DuplicateCandidate, MatchProfile
    from kindred.domain.merging import MergePreview, MergeResult
    from kindred.domain.model import Person, Relationship

    from .schema import ImportRequest


def _text(value: object) -> str | None:
    return None if value is None else str(value)


def resolution_decisions(request: ImportRequest) -> list[ResolutionDecision]:
    return [
        ResolutionDecision(
            gedcom_id=payload.gedcom_id,
            resolution=Resolution(payload.resolution),
            existing_person_id=payload.existing_person_id,
        )
        for payload in request.resolutions
    ]


def person_summary(profile: MatchProfile) -> PersonSummary:
    return PersonSummary(id=profile.id, name=profile.name, birth_date=profile.birth_date)


def duplicate_match(candidate: DuplicateCandidate) -> DuplicateMatch:
    return DuplicateMatch(
        person1=person_summary(candidate.person1),
        person2=person_summary(candidate.person2),
        confidence=candidate.confidence,
        matching_fields=[field.value for field in candidate.matching_fields],
    )


def duplicates_response(candidates: Iterable[DuplicateCandidate]) -> DuplicatesResponse:
    return DuplicatesResponse(duplicates=[duplicate_match(candidate) for candidate in candidates])


def person_fields_payload(values: PersonFields) -> PersonFieldsPayload:
    return PersonFieldsPayload(
        first_name=values.first_name,
        last_name=values.last_name,
        gender=values.gender.value,
        birth_date=values.birth_date,
        death_date=values.death_date,
        photo_url=values.photo_url,
        birth_surname=values.birth_surname,
        nickname=values.nickname,
        notes=values.notes,
    )


def person_payload(person: Person) -> PersonPayload:
    values = person_fields_payload(person.snapshot())
    return PersonPayload(id=person.persisted_id, **values.model_dump())


def relationship_payload(relationship: Relationship) -> RelationshipPayload:
    role = relationship.kind.role
    return RelationshipPayload(
        id=relationship.id,
        person1_id=relationship.person1_id,
        person2_id=relationship.person2_id,
        type=relationship.kind.type.value,
        parent_role=None if role is None else role.value,
    )


def merge_preview_response(preview: MergePreview) -> MergePreviewResponse:
    validation = preview.validation
    return MergePreviewResponse(
        can_merge=preview.can_merge,
        validation=MergeValidationPayload(
            errors=list(validation.errors),
            warnings=list(validation.warnings),
            conflict_fields=[conflict.value for conflict in validation.conflict_fields],
        ),
        source=person_payload(preview.source),
        target=person_payload(preview.target),
        merged=person_fields_payload(preview.merged),
        comparison={
            name: FieldComparisonPayload(
                source=_text(row.source),
                target=_text(row.target),
                merged=_text(row.merged),
            )
            for name, row in preview.comparison.items()
        },
        relationships_to_transfer=[
            relationship_payload(row) for row in preview.relationships_to_transfer
        ],
        existing_relationships=[
            relationship_payload(row) for row in preview.existing_relationships
        ],
    )


def merge_execute_response(result: MergeResult) -> MergeExecuteResponse:
    return MergeExecuteResponse(
        target_id=result.target_id,
        source_id=result.source_id,
        relationships_transferred=result.relationships_transferred,
        merged_data=person_fields_payload(result.merged),
    )


def issue_payload(issue: ImportIssue) -> ImportIssuePayload:
    return ImportIssuePayload(
        severity=issue.severity.value,
        code=issue.code.value,
        message=issue.message,
        line=issue.line,
        gedcom_id=issue.gedcom_id,
        individual_name=issue.individual_name,
        field=issue.field,
        suggested_fix=issue.suggested_fix,
    )


def statistics_payload(statistics: GedcomStatistics) -> StatisticsPayload:
    date_range = statistics.date_range
    return StatisticsPayload(
        total_individuals=statistics.total_individuals,
        total_families=statistics.total_families,
        version=statistics.version,
        date_range=(
            None
            if date_range is None
            else DateRangePayload(earliest=date_range.earliest, latest=date_range.latest)
        ),
    )


def parse_response(
    statistics: GedcomStatistics,
    issues: Iterable[ImportIssue],
    duplicates: Iterable[DuplicateCandidate],
    relationship_issues: Iterable[ConsistencyIssue],
) -> GedcomParseResponse:
    return GedcomParseResponse(
        version=statistics.version,
        statistics=statistics_payload(statistics),
        errors=[issue_payload(issue) for issue in issues],
        duplicates=[duplicate_match(candidate) for candidate in duplicates],
        relationship_issues=[
            RelationshipIssuePayload(
                type=issue.type.value,
                description=issue.description,
                affected_ids=list(issue.affected_ids),
            )
            for issue in relationship_issues
        ],
    )


def import_response(result: ImportResult) -> ImportResponse:
    return ImportResponse(
        persons_inserted=result.persons_inserted,
        persons_updated=result.persons_updated,
        relationships_inserted=result.relationships_inserted,
        id_map=dict(result.id_map),
        issues=[issue_payload(issue) for issue in result.issues],
    )


def error_status(exc: KindredError) -> int:
    # cross-owner lookups are reported exactly like missing records
    if isinstance(exc, PersonNotFoundError | OwnerNotFoundError):
        return 404
    if isinstance(exc, ForbiddenMergeError):
        return 403
    if isinstance(exc, ImportFailedError):
        return 500
    return 400


def error_response(exc: KindredError) -> ErrorResponse:
    return ErrorResponse(
        status=error_status(exc),
        code=exc.code.value,
        error=str(exc),
        errors=list(exc.errors) if isinstance(exc, MergeBlockedError) else [],
        issue=issue_payload(exc.issue) if isinstance(exc, ImportFailedError) else None,
    )
