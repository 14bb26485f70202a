"""Command-line entry point for Test Companion.

Usage:
    testcompanion areas [--file coverage.ini]
    testcompanion validate report.json
    testcompanion render report.json --format markdown [-o report.md]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .area import format_tree, load_taxonomy
from .config import AppSettings, coverage_candidates
from .report import ExportFormat, ReportImportError, import_report_file, render_report
from .validation import validate_session

logger = logging.getLogger(__name__)

_FORMAT_CHOICES = [f.value for f in ExportFormat]


def _cmd_areas(args: argparse.Namespace) -> int:
    if args.file:
        candidates = [Path(args.file)]
    else:
        candidates = coverage_candidates(AppSettings.load())
    print(format_tree(load_taxonomy(candidates)))
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    try:
        model = import_report_file(args.report)
    except ReportImportError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    result = validate_session(model)
    if result.is_valid:
        print("Report is valid.")
        return 0

    print(result.message)
    return 1


def _cmd_render(args: argparse.Namespace) -> int:
    try:
        model = import_report_file(args.report)
    except ReportImportError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    content = render_report(model, model.accumulated_duration, ExportFormat(args.format))

    if args.output:
        try:
            Path(args.output).write_text(content, encoding="utf-8")
        except OSError as e:
            print(f"Error: Failed to write {args.output}: {e}", file=sys.stderr)
            return 1
        logger.info(f"Wrote {args.output}")
    else:
        sys.stdout.write(content)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="testcompanion",
        description="Exploratory testing session reports",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    areas = subparsers.add_parser("areas", help="Print the coverage taxonomy")
    areas.add_argument("--file", help="Coverage file to load")
    areas.set_defaults(func=_cmd_areas)

    validate = subparsers.add_parser("validate", help="Validate an exported JSON report")
    validate.add_argument("report", help="Path to a JSON report")
    validate.set_defaults(func=_cmd_validate)

    render = subparsers.add_parser("render", help="Re-render a JSON report in another format")
    render.add_argument("report", help="Path to a JSON report")
    render.add_argument("--format", choices=_FORMAT_CHOICES, default=ExportFormat.PLAIN_TEXT.value)
    render.add_argument("-o", "--output", help="Output file (default: stdout)")
    render.set_defaults(func=_cmd_render)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
