from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from kindred import app
from kindred.adapters.gedcom import read_gedcom
from kindred.domain.errors import (
    ErrorCode,
    ImportFailedError,
    ImportIssue,
    MergeBlockedError,
    PersonNotFoundError,
)
from kindred.domain.gedcom import extract_statistics
from kindred.domain.importing import ImportResult, Resolution
from kindred.domain.model import Owner
from kindred.ui import cli as cli_module

if TYPE_CHECKING:
    from pathlib import Path


def _stdout_json(capsys: pytest.CaptureFixture[str]) -> dict[str, object]:
    return json.loads(capsys.readouterr().out)


def test_duplicates_command_passes_filters(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    captured: dict[str, object] = {}

    def fake_list_duplicates(**kwargs: object) -> list[object]:
        captured.update(kwargs)
        return []

    monkeypatch.setattr(cli_module, "list_duplicates", fake_list_duplicates)

    cli_module.main(["duplicates", "--owner-id", "7", "--threshold", "85", "--limit", "5"])

    assert captured == {"owner_id": 7, "person_id": None, "threshold": 85, "limit": 5}
    assert _stdout_json(capsys) == {"duplicates": []}


@pytest.mark.parametrize(
    "argv",
    [
        ["duplicates", "--owner-id", "1", "--threshold", "101"],
        ["duplicates", "--owner-id", "1", "--limit", "0"],
    ],
)
def test_out_of_range_filters_exit_with_usage_error(argv: list[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(argv)

    assert excinfo.value.code == 2


def test_unreadable_resolutions_exit_with_usage_error(tmp_path: Path) -> None:
    resolutions = tmp_path / "resolutions.json"
    resolutions.write_text('[{"gedcomId": "@I1@", "resolution": "merge"}]', encoding="utf-8")
    gedcom = tmp_path / "family.ged"
    gedcom.write_text("0 HEAD\n0 TRLR\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(
            ["import", str(gedcom), "--owner-id", "1", "--resolutions", str(resolutions)]
        )

    assert excinfo.value.code == 2


def test_import_dry_run_reports_without_importing(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    tmp_path: Path,
    family_gedcom: bytes,
) -> None:
    gedcom = tmp_path / "family.ged"
    gedcom.write_bytes(family_gedcom)

    def fake_parse(content: bytes, *, owner_id: int) -> app.ParseReport:
        assert owner_id == 3
        document = read_gedcom(content)
        return app.ParseReport(
            document=document,
            statistics=extract_statistics(document),
            duplicates=[],
            relationship_issues=[],
        )

    def fail_import(*_: object, **__: object) -> None:
        raise AssertionError("dry run must not import")

    monkeypatch.setattr(cli_module, "parse_gedcom", fake_parse)
    monkeypatch.setattr(cli_module, "import_gedcom", fail_import)

    cli_module.main(["import", str(gedcom), "--owner-id", "3", "--dry-run"])

    payload = _stdout_json(capsys)
    assert payload["version"] == "5.5.1"
    assert payload["statistics"] == {
        "totalIndividuals": 4,
        "totalFamilies": 1,
        "version": "5.5.1",
        "dateRange": {"earliest": "1950-03-15", "latest": "2010"},
    }
    errors = payload["errors"]
    assert isinstance(errors, list)
    assert [error["field"] for error in errors] == ["birthDate"]


def test_import_applies_resolutions_and_writes_issue_log(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    tmp_path: Path,
    family_gedcom: bytes,
) -> None:
    gedcom = tmp_path / "family.ged"
    gedcom.write_bytes(family_gedcom)
    resolutions = tmp_path / "resolutions.json"
    resolutions.write_text(
        json.dumps([{"gedcomId": "@I1@", "resolution": "skip", "existingPersonId": 42}]),
        encoding="utf-8",
    )
    errors_csv = tmp_path / "errors.csv"
    captured: dict[str, object] = {}

    def fake_parse(content: bytes, *, owner_id: int) -> app.ParseReport:
        document = read_gedcom(content)
        return app.ParseReport(document, extract_statistics(document), [], [])

    def fake_import(document: object, *, owner_id: int, decisions: list[object]) -> ImportResult:
        captured["owner_id"] = owner_id
        captured["decisions"] = decisions
        return ImportResult(
            persons_inserted=3,
            relationships_inserted=4,
            id_map={"@I1@": 42, "@I2@": 43, "@I3@": 44, "@I4@": 45},
            issues=[ImportIssue.warning("Unrecognized date", gedcom_id="@I4@")],
        )

    monkeypatch.setattr(cli_module, "parse_gedcom", fake_parse)
    monkeypatch.setattr(cli_module, "import_gedcom", fake_import)

    cli_module.main(
        [
            "import",
            str(gedcom),
            "--owner-id",
            "1",
            "--resolutions",
            str(resolutions),
            "--errors-csv",
            str(errors_csv),
        ]
    )

    decisions = captured["decisions"]
    assert isinstance(decisions, list)
    assert [(d.gedcom_id, d.resolution, d.existing_person_id) for d in decisions] == [
        ("@I1@", Resolution.SKIP, 42)
    ]
    payload = _stdout_json(capsys)
    assert payload["success"] is True
    assert payload["personsInserted"] == 3
    assert errors_csv.read_text(encoding="utf-8").splitlines()[1] == (
        "Warning,,@I4@,,,Unrecognized date,"
    )


def test_failed_import_logs_issue_and_exits(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    tmp_path: Path,
    family_gedcom: bytes,
) -> None:
    gedcom = tmp_path / "family.ged"
    gedcom.write_bytes(family_gedcom)
    errors_csv = tmp_path / "errors.csv"
    issue = ImportIssue.error("Duplicate record detected", code=ErrorCode.CONSTRAINT_VIOLATION)

    def fake_parse(content: bytes, *, owner_id: int) -> app.ParseReport:
        document = read_gedcom(content)
        return app.ParseReport(document, extract_statistics(document), [], [])

    def fake_import(*_: object, **__: object) -> ImportResult:
        raise ImportFailedError(issue)

    monkeypatch.setattr(cli_module, "parse_gedcom", fake_parse)
    monkeypatch.setattr(cli_module, "import_gedcom", fake_import)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["import", str(gedcom), "--owner-id", "1", "--errors-csv", str(errors_csv)])

    assert excinfo.value.code == 1
    payload = _stdout_json(capsys)
    assert payload["status"] == 500
    assert payload["code"] == "CONSTRAINT_VIOLATION"
    assert "Duplicate record detected" in errors_csv.read_text(encoding="utf-8")


@pytest.mark.parametrize(
    ("error", "status"),
    [
        (MergeBlockedError("Cannot merge a person into themselves"), 400),
        (PersonNotFoundError(9), 404),
    ],
)
def test_merge_failures_emit_error_payload(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    error: Exception,
    status: int,
) -> None:
    def fake_merge(*_: object, **__: object) -> None:
        raise error

    monkeypatch.setattr(cli_module, "merge_persons", fake_merge)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["merge", "--owner-id", "1", "--source", "9", "--target", "9"])

    assert excinfo.value.code == 1
    payload = _stdout_json(capsys)
    assert payload["status"] == status
    assert payload["error"] == str(error)


def test_owner_commands(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    calls: list[tuple[object, ...]] = []

    def fake_create(*, display_name: str) -> Owner:
        calls.append(("create", display_name))
        return Owner(display_name=display_name, id=5)

    def fake_list() -> list[Owner]:
        return [Owner(display_name="Ada", id=5, default_person_id=11)]

    def fake_set_default(owner_id: int, person_id: int | None) -> None:
        calls.append(("set-default", owner_id, person_id))

    monkeypatch.setattr(cli_module, "create_owner", fake_create)
    monkeypatch.setattr(cli_module, "list_owners", fake_list)
    monkeypatch.setattr(cli_module, "set_default_person", fake_set_default)

    cli_module.main(["owner", "create", "--display-name", "Ada"])
    cli_module.main(["owner", "set-default", "--owner-id", "5", "--person-id", "11"])
    cli_module.main(["owner", "set-default", "--owner-id", "5"])
    cli_module.main(["owner", "list"])

    assert calls == [("create", "Ada"), ("set-default", 5, 11), ("set-default", 5, None)]
    assert capsys.readouterr().out == "5\tAda\t11\n"
