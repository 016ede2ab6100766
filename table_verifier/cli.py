"""Command-line entry point."""

import argparse
import logging
import sys
from typing import List, Optional

from .core.config import VerifierConfig
from .core.errors import VerifierError
from .core.log_sink import configure_logging
from .core.registry import list_registered_schemas
from .runner import load_suite, run_suite

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="table-verifier",
        description="Verify rendered tables against JSON fixtures.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Run a suite of table tests")
    run.add_argument("suite", help="Suite JSON file")
    run.add_argument("--base-url", help="Prefix for relative page URLs")
    run.add_argument("--headed", action="store_true", help="Show the browser window")
    run.add_argument(
        "--log-level",
        choices=("error", "debug", "detail"),
        help="Which log files to write besides the error log",
    )
    run.add_argument("--log-dir", help="Directory for log files")
    run.add_argument("--report", help="Write one row per check to this CSV file")
    run.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when any check failed",
    )

    subparsers.add_parser("schemas", help="List registered schemas")
    return parser


def _cmd_schemas() -> int:
    from . import schemas  # noqa: F401

    for name, cls in sorted(list_registered_schemas().items()):
        schema = cls()
        print(f"{name}: {', '.join(schema.column_names())}")
    return 0


def _cmd_run(args: argparse.Namespace) -> int:
    config = VerifierConfig.from_env()
    overrides = {}
    if args.base_url:
        overrides["base_url"] = args.base_url
    if args.headed:
        overrides["headless"] = False
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.log_dir:
        overrides["log_dir"] = args.log_dir
    if overrides:
        config = config.with_overrides(**overrides)

    configure_logging(config)

    try:
        cases = load_suite(args.suite)
    except (OSError, ValueError, KeyError) as e:
        print(f"Failure: Cannot load suite {args.suite}: {e}", file=sys.stderr)
        return 2

    try:
        report = run_suite(cases, config)
    except VerifierError as e:
        print(f"Failure: Run did not complete: {e}", file=sys.stderr)
        return 2

    print(report.summary())
    if args.report:
        report.to_frame().write_csv(args.report)

    if args.strict and not report.passed:
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    if args.command == "schemas":
        return _cmd_schemas()
    return _cmd_run(args)
