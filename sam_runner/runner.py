# Where: sam_runner/runner.py
# What: Discover event fixtures and invoke their functions in parallel.
# Why: Separate batch scheduling from the CLI entrypoint and per-fixture logic.
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import replace
from pathlib import Path

from sam_runner.config import resolve_package_name
from sam_runner.errors import InputError
from sam_runner.invoker import run_lambda
from sam_runner.models import MODE_REMOTE, MODES, InvocationResult, RunOptions
from sam_runner.template import load_template
from sam_runner.ui import PlainReporter, Reporter

logger = logging.getLogger("sam_runner.runner")


def discover_fixtures(events_dir: Path) -> list[str]:
    """Return fixture names (file stems) found in ``events_dir``, sorted and unique."""
    if not events_dir.is_dir():
        raise InputError(f"events directory not found: {events_dir}")
    names: list[str] = []
    for entry in sorted(events_dir.iterdir()):
        if not entry.is_file():
            continue
        if entry.stem not in names:
            names.append(entry.stem)
    return names


def select_fixtures(fixtures: list[str], fixture_filter: str | None) -> list[str]:
    if not fixture_filter:
        return fixtures
    return [name for name in fixtures if name == fixture_filter]


def resolve_stack_name(options: RunOptions) -> str | None:
    if options.stack_name:
        return options.stack_name
    if options.use_package_name_fallback:
        return resolve_package_name(override=options.package_name)
    return None


def _describe_args(options: RunOptions) -> str:
    return " ".join(part for part in (options.mode, options.fixture_filter) if part)


def run_all(
    options: RunOptions,
    *,
    reporter: Reporter | None = None,
) -> dict[str, InvocationResult]:
    if options.mode not in MODES:
        raise InputError("second argument must be 'remote' or 'local'")

    options.output_dir.mkdir(parents=True, exist_ok=True)

    fixtures = select_fixtures(discover_fixtures(options.events_dir), options.fixture_filter)
    if not fixtures:
        raise InputError(f"no lambdas specified; args: {_describe_args(options)}")

    if options.mode == MODE_REMOTE:
        options = replace(options, stack_name=resolve_stack_name(options))
    template = load_template(options.template_path)
    reporter = reporter or PlainReporter()
    logger.debug("Running %d fixture(s) in %s mode", len(fixtures), options.mode)

    results: dict[str, InvocationResult] = {}
    max_workers = options.max_workers or len(fixtures)
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_fixture = {
            executor.submit(run_lambda, fixture, template, options, reporter): fixture
            for fixture in fixtures
        }
        for future in as_completed(future_to_fixture):
            fixture = future_to_fixture[future]
            try:
                results[fixture] = future.result()
            except Exception as exc:
                logger.exception("Unexpected error while running %s", fixture)
                reporter.error(fixture, exc)
    return results
