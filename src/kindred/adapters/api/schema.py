"""Request and response contracts for the tree-maintenance endpoints.

Field names are snake_case in Python and camelCase on the wire; both are
accepted on input.
"""

from __future__ import annotations

from typing import Literal, Self, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from kindred.domain.matching import DEFAULT_THRESHOLD

ResolutionName: TypeAlias = Literal["skip", "merge", "import_as_new"]
GenderName: TypeAlias = Literal["male", "female", "other", "unspecified"]
RelationshipTypeName: TypeAlias = Literal["parentOf", "spouse"]
ParentRoleName: TypeAlias = Literal["mother", "father"]
MatchFieldName: TypeAlias = Literal["name", "birthDate", "parents"]
ConflictFieldName: TypeAlias = Literal["mother", "father"]


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(by_alias=True, mode="json")


# Requests ---------------------------------------------------------------------


class DuplicateQuery(ApiModel):
    threshold: int = Field(default=DEFAULT_THRESHOLD, ge=0, le=100)
    limit: int | None = Field(default=None, ge=1)


class MergeRequest(ApiModel):
    source_id: int
    target_id: int


class ResolutionDecisionPayload(ApiModel):
    gedcom_id: str
    resolution: ResolutionName
    existing_person_id: int | None = None

    @model_validator(mode="after")
    def _requires_existing_person(self) -> Self:
        if self.resolution != "import_as_new" and self.existing_person_id is None:
            raise ValueError(f"resolution '{self.resolution}' requires existingPersonId")
        return self


class ImportRequest(ApiModel):
    resolutions: list[ResolutionDecisionPayload] = Field(default_factory=list)


# Responses --------------------------------------------------------------------


class PersonSummary(ApiModel):
    id: int | str
    name: str
    birth_date: str | None = None


class DuplicateMatch(ApiModel):
    person1: PersonSummary
    person2: PersonSummary
    confidence: int
    matching_fields: list[MatchFieldName]


class DuplicatesResponse(ApiModel):
    duplicates: list[DuplicateMatch]


class PersonFieldsPayload(ApiModel):
    first_name: str
    last_name: str
    gender: GenderName
    birth_date: str | None = None
    death_date: str | None = None
    photo_url: str | None = None
    birth_surname: str | None = None
    nickname: str | None = None
    notes: str | None = None


class PersonPayload(PersonFieldsPayload):
    id: int


class RelationshipPayload(ApiModel):
    id: int | None
    person1_id: int
    person2_id: int
    type: RelationshipTypeName
    parent_role: ParentRoleName | None = None


class MergeValidationPayload(ApiModel):
    errors: list[str]
    warnings: list[str]
    conflict_fields: list[ConflictFieldName]


class FieldComparisonPayload(ApiModel):
    source: str | None
    target: str | None
    merged: str | None


class MergePreviewResponse(ApiModel):
    can_merge: bool
    validation: MergeValidationPayload
    source: PersonPayload
    target: PersonPayload
    merged: PersonFieldsPayload
    comparison: dict[str, FieldComparisonPayload]
    relationships_to_transfer: list[RelationshipPayload]
    existing_relationships: list[RelationshipPayload]


class MergeExecuteResponse(ApiModel):
    success: bool = True
    target_id: int
    source_id: int
    relationships_transferred: int
    merged_data: PersonFieldsPayload


class ImportIssuePayload(ApiModel):
    severity: Literal["Error", "Warning"]
    code: str
    message: str
    line: int | None = None
    gedcom_id: str | None = None
    individual_name: str | None = None
    field: str | None = None
    suggested_fix: str | None = None


class DateRangePayload(ApiModel):
    earliest: str
    latest: str


class StatisticsPayload(ApiModel):
    total_individuals: int
    total_families: int
    version: str
    date_range: DateRangePayload | None = None


class RelationshipIssuePayload(ApiModel):
    type: Literal["child-family-mismatch", "spouse-family-mismatch"]
    description: str
    affected_ids: list[str]


class GedcomParseResponse(ApiModel):
    version: str
    statistics: StatisticsPayload
    errors: list[ImportIssuePayload]
    duplicates: list[DuplicateMatch]
    relationship_issues: list[RelationshipIssuePayload]


class ImportResponse(ApiModel):
    success: bool = True
    persons_inserted: int
    persons_updated: int
    relationships_inserted: int
    id_map: dict[str, int]
    issues: list[ImportIssuePayload]


class ErrorResponse(ApiModel):
    status: int
    code: str
    error: str
    errors: list[str] = Field(default_factory=list)
    issue: ImportIssuePayload | None = None
