from __future__ import annotations

from kindred.domain.merging import ConflictField, build_merge_preview, validate_merge
from kindred.domain.model import Gender, Owner
from tests.helpers.trees import father_of, make_person, mother_of, spouses


def _owner(default_person_id: int | None = None) -> Owner:
    return Owner(id=1, display_name="Owner", default_person_id=default_person_id)


def test_gender_mismatch_blocks_the_merge() -> None:
    source = make_person("John", person_id=10, gender=Gender.MALE)
    target = make_person("Joan", person_id=20, gender=Gender.FEMALE)

    preview = build_merge_preview(source, target, _owner(), [], [])

    assert not preview.can_merge
    assert "Gender mismatch: Cannot merge male into female" in preview.validation.errors


def test_validate_merge_collects_every_blocking_problem() -> None:
    source = make_person("John", person_id=10, gender=Gender.MALE)
    target = make_person("John", person_id=20, owner_id=2)

    assert validate_merge(source, target, _owner(default_person_id=10)) == [
        "Cannot merge records across different users",
        "Cannot merge your profile person into another person",
    ]
    assert validate_merge(target, source, _owner(default_person_id=10)) == [
        "Cannot merge records across different users",
        "Cannot merge into your profile person",
    ]


def test_parent_conflicts_are_warnings() -> None:
    source = make_person("Peter", "Smith", person_id=10, birth_date="1975")
    target = make_person("Peter", "Smith", person_id=20, birth_date="1975-04-02")

    preview = build_merge_preview(
        source,
        target,
        _owner(),
        [mother_of(1, 10), father_of(3, 10)],
        [mother_of(2, 20), father_of(3, 20)],
    )

    assert preview.can_merge
    assert preview.validation.conflict_fields == (ConflictField.MOTHER,)
    assert preview.validation.warnings == (
        "Both people have different mothers - merge will overwrite",
    )
    assert preview.merged.birth_date == "1975-04-02"
    assert preview.comparison["birth_date"].source == "1975"
    assert len(preview.relationships_to_transfer) == 2
    assert len(preview.existing_relationships) == 2


def test_preview_hides_rows_of_other_owners() -> None:
    source = make_person("Peter", person_id=10)
    target = make_person("Peter", person_id=20)
    mine = spouses(10, 30)
    theirs = mother_of(40, 10, owner_id=2)

    preview = build_merge_preview(source, target, _owner(), [*mine, theirs], [])

    assert preview.relationships_to_transfer == tuple(mine)
