# Where: sam_runner/models.py
# What: Dataclasses and outcome constants for event runs.
# Why: Keep run inputs explicit and make per-fixture outcomes testable.
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

MODE_LOCAL = "local"
MODE_REMOTE = "remote"
MODES = (MODE_LOCAL, MODE_REMOTE)

OUTCOME_NOT_FOUND = "not_found"
OUTCOME_LOOKUP_FAILED = "lookup_failed"
OUTCOME_PROCESS_FAILED = "process_failed"
OUTCOME_EMPTY_RESPONSE = "empty_response"
OUTCOME_SUCCESS = "success"
OUTCOME_FAILURE = "failure"


@dataclass(frozen=True)
class RunOptions:
    mode: str
    events_dir: Path
    output_dir: Path
    template_path: Path
    fixture_filter: str | None = None
    stack_name: str | None = None
    use_package_name_fallback: bool = True
    package_name: str | None = None
    verbose: bool = False
    max_workers: int | None = None

    @property
    def show_responses(self) -> bool:
        return bool(self.fixture_filter) or self.verbose

    def event_path(self, fixture: str) -> Path:
        return self.events_dir / f"{fixture}.json"

    def output_path(self, fixture: str) -> Path:
        return self.output_dir / f"{fixture}.json"


@dataclass(frozen=True)
class InvocationResult:
    fixture: str
    outcome: str
    function_name: str | None = None
    exit_code: int | None = None
    payload: Any = None
    detail: str | None = None

    @property
    def passed(self) -> bool:
        return self.outcome == OUTCOME_SUCCESS
