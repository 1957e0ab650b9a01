# Where: sam_runner/cli.py
# What: Command-line entrypoint for running event fixtures against Lambdas.
# Why: Keep argument parsing and exit handling out of the runner core.
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from sam_runner.config import RunnerConfig
from sam_runner.errors import InputError
from sam_runner.logging import safe_print
from sam_runner.models import MODES
from sam_runner.runner import run_all
from sam_runner.ui import PlainReporter

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="sam-runner",
        description="Invoke SAM functions with the JSON events in EVENTS_DIR",
    )
    parser.add_argument("mode", help="'local' (sam local invoke) or 'remote' (aws lambda invoke)")
    parser.add_argument(
        "filter",
        nargs="?",
        default=None,
        help="Only run the event whose file name (without extension) matches exactly",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Extra dotenv file to load before reading configuration",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Print every response and enable debug logging",
    )
    parser.add_argument(
        "--color",
        dest="color",
        action="store_const",
        const=True,
        help="Force color output",
    )
    parser.add_argument(
        "--no-color",
        dest="color",
        action="store_const",
        const=False,
        help="Disable color output",
    )
    parser.add_argument(
        "--emoji",
        dest="emoji",
        action="store_const",
        const=True,
        help="Force emoji output",
    )
    parser.add_argument(
        "--no-emoji",
        dest="emoji",
        action="store_const",
        const=False,
        help="Disable emoji output",
    )
    parser.set_defaults(color=None, emoji=None)
    return parser.parse_args(argv)


def setup_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, stream=sys.stderr)


def _format_validation_error(exc: ValidationError) -> str:
    missing = [str(err["loc"][0]) for err in exc.errors() if err.get("type") == "missing"]
    if missing:
        return f"missing required configuration: {', '.join(missing)}"
    return str(exc)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if args.mode not in MODES:
        safe_print("second argument must be 'remote' or 'local'", file=sys.stderr)
        return 1
    if args.env_file:
        load_dotenv(args.env_file, override=False)

    try:
        config = RunnerConfig()
    except ValidationError as exc:
        safe_print(_format_validation_error(exc), file=sys.stderr)
        return 1

    setup_logging("DEBUG" if args.verbose else config.LOG_LEVEL)
    options = config.to_options(args.mode, args.filter, verbose=args.verbose)
    reporter = PlainReporter(color=args.color, emoji=args.emoji)

    try:
        run_all(options, reporter=reporter)
    except InputError as exc:
        safe_print(str(exc), file=sys.stderr)
        return 1
    except Exception:
        logging.getLogger("sam_runner.cli").exception("Event run failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
