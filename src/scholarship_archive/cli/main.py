"""Main CLI entry point."""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

DEFAULT_DB = Path("scholarships.db")


def _add_store_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--db",
        type=Path,
        default=DEFAULT_DB,
        help="Path to SQLite database (default: scholarships.db)",
    )
    parser.add_argument(
        "--dir",
        type=Path,
        default=None,
        metavar="DIRECTORY",
        help="Store records as JSON files in this directory instead of SQLite",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scholarship-archive",
        description="Validate, archive and track changes to scraped scholarship records",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # validate
    validate_parser = subparsers.add_parser("validate", help="Validate raw records without storing them")
    validate_parser.add_argument("--input", type=Path, required=True, help="JSON array or JSON-lines file")
    validate_parser.add_argument("--config", type=Path, default=None, help="Validation config YAML")
    validate_parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Check ids against this archive for duplicates",
    )
    validate_parser.add_argument("--output", type=Path, default=None, help="Write results to file")

    # ingest
    ingest_parser = subparsers.add_parser("ingest", help="Validate and archive raw records")
    group = ingest_parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--input", type=Path, help="JSON array or JSON-lines file")
    group.add_argument("--feed", type=str, help="URL serving a JSON array of extracted records")
    _add_store_args(ingest_parser)
    ingest_parser.add_argument("--config", type=Path, default=None, help="Validation config YAML")
    ingest_parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Allow replacing an archived record whose title/url differ (default: off)",
    )
    ingest_parser.add_argument(
        "--log-changes",
        action="store_true",
        help="Persist detected changes to the change log (SQLite only)",
    )
    ingest_parser.add_argument("--output", type=Path, default=None, help="Write ingest report to file")

    # list
    list_parser = subparsers.add_parser("list", help="List archived records")
    _add_store_args(list_parser)
    list_parser.add_argument(
        "--status",
        choices=["upcoming", "active", "expired", "cancelled"],
        default=None,
        help="Filter by status",
    )
    list_parser.add_argument("--category", type=str, default=None, help="Filter by category")

    # show / remove / cancel / changes
    for name, help_text in (
        ("show", "Show one archived record"),
        ("remove", "Delete an archived record"),
        ("cancel", "Mark an archived record as cancelled"),
        ("changes", "Show the change log for a record"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("record_id", help="Record id")
        _add_store_args(sub)

    # rescan
    rescan_parser = subparsers.add_parser("rescan", help="Re-derive record statuses")
    _add_store_args(rescan_parser)
    rescan_parser.add_argument(
        "--now",
        type=str,
        default=None,
        help="Evaluate at this ISO timestamp instead of the current time",
    )

    # stats
    stats_parser = subparsers.add_parser("stats", help="Show aggregate counts")
    _add_store_args(stats_parser)

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Parse args and dispatch to subcommands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    handlers = {
        "validate": _run_validate,
        "ingest": _run_ingest,
        "list": _run_list,
        "show": _run_show,
        "remove": _run_remove,
        "cancel": _run_cancel,
        "changes": _run_changes,
        "rescan": _run_rescan,
        "stats": _run_stats,
    }
    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return

    from scholarship_archive.errors import ArchiveError

    try:
        handler(args)
    except ArchiveError as e:
        raise SystemExit(str(e))


def _open_index(args: argparse.Namespace):
    from scholarship_archive.archive import ArchiveIndex
    from scholarship_archive.storage import JsonDirectoryStorage, SqliteStorage

    directory = getattr(args, "dir", None)
    storage = JsonDirectoryStorage(directory) if directory else SqliteStorage(args.db)
    return ArchiveIndex(storage)


def _load_config(args: argparse.Namespace):
    from scholarship_archive.validation import DEFAULT_CONFIG, ValidationConfig

    if getattr(args, "config", None):
        return ValidationConfig.from_yaml(args.config)
    return DEFAULT_CONFIG


def _emit(data, output: Optional[Path], summary: str) -> None:
    text = json.dumps(data, indent=2, default=str)
    if output:
        output.write_text(text, encoding="utf-8")
        print(f"{summary} (wrote to {output})")
    else:
        print(text)


def _run_validate(args: argparse.Namespace) -> None:
    """Run validate command. Exits 1 when any record is invalid."""
    from scholarship_archive.pipeline import validate_raw
    from scholarship_archive.sources import JsonFileSource

    raws = JsonFileSource(args.input).fetch()
    index = _open_index(args) if args.db else None
    results = validate_raw(raws, config=_load_config(args), index=index)
    invalid = sum(1 for r in results if not r.valid)
    _emit(
        [r.model_dump(mode="json") for r in results],
        args.output,
        f"Validated {len(results)} records, {invalid} invalid",
    )
    if invalid:
        raise SystemExit(1)


def _run_ingest(args: argparse.Namespace) -> None:
    """Run ingest command."""
    from scholarship_archive.pipeline import ingest_records
    from scholarship_archive.sources import SourceRegistry
    from scholarship_archive.storage import ChangeLogStore

    raws = SourceRegistry.for_location(args.feed or args.input).fetch()

    change_log = None
    if args.log_changes:
        if getattr(args, "dir", None):
            raise SystemExit("--log-changes requires SQLite storage (--db)")
        change_log = ChangeLogStore(args.db)

    index = _open_index(args)
    report = ingest_records(
        raws,
        index,
        config=_load_config(args),
        change_log=change_log,
        overwrite=args.overwrite,
    )
    print(
        f"Ingest: {report.received} received, {report.new} new, {report.updated} updated, "
        f"{report.unchanged} unchanged, {len(report.rejected)} rejected"
    )
    if args.output:
        args.output.write_text(json.dumps(report.model_dump(mode="json"), indent=2, default=str), encoding="utf-8")
        print(f"Wrote ingest report to {args.output}")


def _run_list(args: argparse.Namespace) -> None:
    index = _open_index(args)
    entries = index.list(status=args.status, category=args.category)
    print(json.dumps([e.model_dump(mode="json") for e in entries], indent=2, default=str))


def _run_show(args: argparse.Namespace) -> None:
    index = _open_index(args)
    record = index.get(args.record_id)
    print(json.dumps(record.model_dump(mode="json"), indent=2, default=str))


def _run_remove(args: argparse.Namespace) -> None:
    index = _open_index(args)
    index.remove(args.record_id)
    print(f"Removed {args.record_id}")


def _run_cancel(args: argparse.Namespace) -> None:
    index = _open_index(args)
    entry = index.cancel(args.record_id)
    print(f"{entry.id}: {entry.status.value}")


def _run_changes(args: argparse.Namespace) -> None:
    from scholarship_archive.storage import ChangeLogStore

    if getattr(args, "dir", None):
        raise SystemExit("Change log requires SQLite storage (--db)")
    log = ChangeLogStore(args.db)
    changes = log.list_for(args.record_id)
    print(
        json.dumps(
            [
                {"detected_at": c.detected_at.isoformat(), **c.to_entry().model_dump(mode="json")}
                for c in changes
            ],
            indent=2,
            default=str,
        )
    )


def _run_rescan(args: argparse.Namespace) -> None:
    now = None
    if args.now:
        try:
            now = datetime.fromisoformat(args.now)
        except ValueError:
            raise SystemExit("Invalid --now format. Use an ISO date or timestamp.")
    index = _open_index(args)
    transitions = index.rescan(now)
    for record_id, changes in sorted(transitions.items()):
        for c in changes:
            print(f"{record_id}: {c.old_value} -> {c.new_value}")
    print(f"Rescan: {len(transitions)} status change(s)", file=sys.stderr)


def _run_stats(args: argparse.Namespace) -> None:
    index = _open_index(args)
    print(json.dumps(index.stats().model_dump(mode="json"), indent=2))


if __name__ == "__main__":
    main()
