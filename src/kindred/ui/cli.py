from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from kindred.adapters.api import (
    ImportRequest,
    duplicates_response,
    error_response,
    import_response,
    merge_execute_response,
    merge_preview_response,
    parse_response,
    resolution_decisions,
)
from kindred.app import (
    create_owner,
    export_issues_csv,
    import_gedcom,
    list_duplicates,
    list_owners,
    merge_persons,
    parse_gedcom,
    preview_person_merge,
    set_default_person,
)
from kindred.config import configure_logging
from kindred.domain.errors import ImportFailedError, KindredError, format_issue

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from kindred.adapters.api.schema import ApiModel
    from kindred.domain.importing import ResolutionDecision

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Maintain Kindred family trees")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_cmd = subparsers.add_parser("import", help="Import a GEDCOM file into a tree")
    import_cmd.add_argument("path", type=Path, help="GEDCOM file to import")
    import_cmd.add_argument("--owner-id", type=int, required=True, help="Owner of the tree")
    import_cmd.add_argument(
        "--resolutions",
        type=Path,
        help="JSON file with a list of duplicate resolutions "
        '({"gedcomId", "resolution", "existingPersonId"})',
    )
    import_cmd.add_argument(
        "--errors-csv",
        type=Path,
        help="Write the import's errors and warnings to this CSV file",
    )
    import_cmd.add_argument(
        "--dry-run",
        action="store_true",
        help="Only parse the file and report statistics and possible duplicates",
    )

    duplicates = subparsers.add_parser("duplicates", help="List likely duplicate persons")
    duplicates.add_argument("--owner-id", type=int, required=True, help="Owner of the tree")
    duplicates.add_argument("--person-id", type=int, help="Only duplicates of this person")
    duplicates.add_argument(
        "--threshold",
        type=int,
        help="Minimum confidence 0-100 (defaults to config)",
    )
    duplicates.add_argument("--limit", type=int, help="Maximum number of results")

    for name, help_text in (
        ("preview", "Show what merging two persons would do"),
        ("merge", "Merge the source person into the target person"),
    ):
        command = subparsers.add_parser(name, help=help_text)
        command.add_argument("--owner-id", type=int, required=True, help="Owner of the tree")
        command.add_argument("--source", type=int, required=True, help="Person merged away")
        command.add_argument("--target", type=int, required=True, help="Person that survives")

    owner = subparsers.add_parser("owner", help="Owner management commands")
    owner_sub = owner.add_subparsers(dest="owner_command", required=True)
    owner_create = owner_sub.add_parser("create", help="Create an owner")
    owner_create.add_argument(
        "--display-name",
        type=str,
        required=True,
        help="Display name for the owner",
    )
    owner_sub.add_parser("list", help="List owners")
    owner_default = owner_sub.add_parser(
        "set-default",
        help="Designate the owner's profile person",
    )
    owner_default.add_argument("--owner-id", type=int, required=True)
    owner_default.add_argument(
        "--person-id",
        type=int,
        help="Profile person id (omit to clear)",
    )

    args = parser.parse_args(list(argv))
    if getattr(args, "threshold", None) is not None and not 0 <= args.threshold <= 100:
        raise ValueError("Threshold must be between 0 and 100")
    if getattr(args, "limit", None) is not None and args.limit < 1:
        raise ValueError("Limit must be a positive integer")
    return args


def _load_resolutions(path: Path | None) -> list[ResolutionDecision]:
    if path is None:
        return []
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ValueError(f"Cannot read resolutions file {path}: {exc}") from exc
    return resolution_decisions(ImportRequest.model_validate({"resolutions": payload}))


def _emit(model: ApiModel) -> None:
    sys.stdout.write(json.dumps(model.to_wire(), indent=2) + "\n")


def _run_import(args: argparse.Namespace, decisions: list[ResolutionDecision]) -> None:
    content = args.path.read_bytes()
    report = parse_gedcom(content, owner_id=args.owner_id)
    if args.dry_run:
        _emit(
            parse_response(
                report.statistics,
                report.document.issues,
                report.duplicates,
                report.relationship_issues,
            )
        )
        return
    try:
        result = import_gedcom(report.document, owner_id=args.owner_id, decisions=decisions)
    except ImportFailedError as exc:
        if args.errors_csv is not None:
            args.errors_csv.write_text(export_issues_csv([exc.issue]), encoding="utf-8")
        raise
    if args.errors_csv is not None:
        args.errors_csv.write_text(export_issues_csv(result.issues), encoding="utf-8")
        log.info("Wrote %d issues to %s", len(result.issues), args.errors_csv)
    _emit(import_response(result))


def _dispatch(args: argparse.Namespace, decisions: list[ResolutionDecision]) -> None:
    if args.command == "import":
        _run_import(args, decisions)
    elif args.command == "duplicates":
        candidates = list_duplicates(
            owner_id=args.owner_id,
            person_id=args.person_id,
            threshold=args.threshold,
            limit=args.limit,
        )
        _emit(duplicates_response(candidates))
    elif args.command == "preview":
        preview = preview_person_merge(args.source, args.target, owner_id=args.owner_id)
        _emit(merge_preview_response(preview))
    elif args.command == "merge":
        result = merge_persons(args.source, args.target, owner_id=args.owner_id)
        _emit(merge_execute_response(result))
    elif args.command == "owner" and args.owner_command == "create":
        owner = create_owner(display_name=args.display_name)
        log.info("Created owner %s", owner.id)
    elif args.command == "owner" and args.owner_command == "list":
        for owner in list_owners():
            sys.stdout.write(f"{owner.id}\t{owner.display_name}\t{owner.default_person_id or ''}\n")
    elif args.command == "owner" and args.owner_command == "set-default":
        set_default_person(args.owner_id, args.person_id)
        log.info("Owner %s profile person set to %s", args.owner_id, args.person_id)
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    try:
        parsed_args = _parse_args(args_list)
        decisions = _load_resolutions(getattr(parsed_args, "resolutions", None))
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        _dispatch(parsed_args, decisions)
    except ImportFailedError as exc:
        log.error("%s", format_issue(exc.issue))  # noqa: TRY400
        _emit(error_response(exc))
        sys.exit(1)
    except KindredError as exc:
        log.error("%s", exc)  # noqa: TRY400
        _emit(error_response(exc))
        sys.exit(1)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
