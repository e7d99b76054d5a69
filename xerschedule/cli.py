"""Command line interface for the XER schedule parser."""
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, Sequence

from .codes import hours_to_workdays
from .config import ConfigError, default_config, load_config, validate_config
from .frames import write_csv_bundle
from .importer import ImportSummary, InMemoryScheduleStore, ScheduleImportError, import_schedule
from .io import DataError, ParseResult, load_xer, result_to_dict
from .mapper import parse_xer

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Parse and import Primavera P6 XER schedule files.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Increase log output (-v for INFO, -vv for DEBUG).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("file", type=Path, help="Path to the .xer file.")
    common.add_argument(
        "--config",
        type=Path,
        help="Path to a YAML or JSON configuration file.",
    )
    common.add_argument(
        "--encoding",
        help="Text encoding of the XER file (default utf-8).",
    )
    common.add_argument(
        "--hours-per-day",
        dest="hours_per_day",
        type=float,
        help="Working hours per day used to convert hour counts into days.",
    )
    common.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Report dropped and truncated rows as warnings.",
    )

    parse_parser = subparsers.add_parser(
        "parse", parents=[common], help="Parse a file and print a summary."
    )
    parse_parser.add_argument(
        "--output",
        type=Path,
        help="Optional path to store the full parse result as JSON.",
    )

    export_parser = subparsers.add_parser(
        "export", parents=[common], help="Write the parsed tables as CSV files."
    )
    export_parser.add_argument(
        "--out",
        dest="output_dir",
        type=Path,
        required=True,
        help="Directory where the CSV files will be written.",
    )

    import_parser = subparsers.add_parser(
        "import",
        parents=[common],
        help="Dry-run the schedule import and report what would be created.",
    )
    import_parser.add_argument(
        "--project-id",
        dest="project_id",
        default="local",
        help="Project identifier the schedule is imported into.",
    )

    return parser


def run_cli(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        settings = _resolve_settings(args)
        content = load_xer(args.file, encoding=settings["encoding"])
    except (ConfigError, DataError) as exc:
        parser.error(str(exc))

    if args.command == "import":
        store = InMemoryScheduleStore()
        try:
            summary = import_schedule(
                store,
                args.project_id,
                content,
                file_name=args.file.name,
                strict=settings["strict"],
            )
        except ScheduleImportError as exc:
            print(f"Import rejected: {exc}")
            for detail in exc.details:
                print(f"  - {detail}")
            return 1
        _print_import_summary(summary)
        return 0

    result = parse_xer(content, strict=settings["strict"])
    if args.command == "parse":
        _print_summary(result, settings["hours_per_day"])
        if args.output:
            args.output.write_text(json.dumps(result_to_dict(result), indent=2))
    elif args.command == "export":
        written = write_csv_bundle(result, args.output_dir, settings["hours_per_day"])
        for path in written.values():
            logger.info("Wrote %s", path)
        print(f"Tables saved to {args.output_dir.resolve()}")

    return 0


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _resolve_settings(args: argparse.Namespace) -> Dict[str, Any]:
    settings = load_config(args.config) if args.config else default_config()
    overrides = {
        "encoding": args.encoding,
        "hours_per_day": args.hours_per_day,
        "strict": args.strict,
    }
    settings.update({key: value for key, value in overrides.items() if value is not None})
    return validate_config(settings)


def _print_summary(result: ParseResult, hours_per_day: float) -> None:
    print("Parse complete")
    print("--------------")
    project = result.projects[0] if result.projects else None
    if project is not None:
        print(f"Project: {project.short_name} ({project.project_id})")
        if project.data_date:
            print(f"Data date: {project.data_date:%Y-%m-%d %H:%M}")
    print(f"Projects: {len(result.projects)}")
    print(f"WBS nodes: {len(result.wbs)}")
    print(f"Activities: {len(result.tasks)}")
    print(f"Relationships: {len(result.task_preds)}")

    critical = [task for task in result.tasks if task.is_critical]
    print(f"Critical activities: {len(critical)}")
    remaining = [
        hours_to_workdays(task.remaining_duration_hrs, hours_per_day)
        for task in critical
        if task.remaining_duration_hrs is not None
    ]
    if remaining:
        print(f"Longest critical remaining duration: {max(remaining):.1f} days")

    _print_messages("Errors", result.errors)
    _print_messages("Warnings", result.warnings)


def _print_import_summary(summary: ImportSummary) -> None:
    print("Import complete (dry run)")
    print("-------------------------")
    if summary.xer_project_name:
        print(f"Source project: {summary.xer_project_name} ({summary.xer_project_id})")
    print(f"WBS rows: {summary.wbs_count}")
    print(f"Activities: {summary.activities_count}")
    print(f"Relationships: {summary.relationships_count}")
    if summary.skipped_relationships:
        print(f"Skipped relationships (unresolved activity): {summary.skipped_relationships}")
    _print_messages("Warnings", summary.warnings)


def _print_messages(title: str, messages: Sequence[str]) -> None:
    if not messages:
        return
    print(f"{title}:")
    for message in messages:
        print(f"  - {message}")


__all__ = ["run_cli", "build_parser"]
