# Where: sam_runner/ui.py
# What: Plain per-fixture reporter for event runs.
# Why: Keep console wording in one place, separate from execution.
from __future__ import annotations

import json
import os
import sys
from typing import Any

from sam_runner.logging import render_cmd, safe_print, safe_print_block
from sam_runner.models import (
    OUTCOME_EMPTY_RESPONSE,
    OUTCOME_FAILURE,
    OUTCOME_LOOKUP_FAILED,
    OUTCOME_NOT_FOUND,
    OUTCOME_PROCESS_FAILED,
    OUTCOME_SUCCESS,
    InvocationResult,
)

_COLOR_RESET = "\033[0m"
_COLOR_GREEN = "\033[32m"
_COLOR_RED = "\033[31m"
_COLOR_YELLOW = "\033[33m"
_COLOR_GRAY = "\033[90m"

_ICON_PASS = "✅"
_ICON_FAIL = "❌"
_ICON_CRASH = "💥"


def _resolve_feature(flag: bool | None, default: bool) -> bool:
    if flag is None:
        return default
    return bool(flag)


class Reporter:
    def command(self, fixture: str, cmd: list[str]) -> None:
        return None

    def result(self, result: InvocationResult) -> None:
        raise NotImplementedError

    def response(self, fixture: str, payload: Any) -> None:
        return None

    def error(self, fixture: str, exc: BaseException) -> None:
        return None


class PlainReporter(Reporter):
    def __init__(self, *, color: bool | None = None, emoji: bool | None = None) -> None:
        is_tty = sys.stdout.isatty()
        term = os.environ.get("TERM", "").lower()
        color_default = is_tty and term != "dumb" and not os.environ.get("NO_COLOR")
        # Status icons are part of the report text, so piped output keeps them.
        emoji_default = term != "dumb" and not os.environ.get("NO_EMOJI")
        self._color = _resolve_feature(color, color_default)
        self._emoji = _resolve_feature(emoji, emoji_default)

    def _colorize(self, text: str, color: str) -> str:
        if not self._color:
            return text
        return f"{color}{text}{_COLOR_RESET}"

    def _icon(self, emoji: str, word: str) -> str:
        return emoji if self._emoji else word

    def command(self, fixture: str, cmd: list[str]) -> None:
        safe_print(self._colorize(f"command: {render_cmd(cmd)}", _COLOR_GRAY))

    def result(self, result: InvocationResult) -> None:
        safe_print(self.format_result(result))

    def format_result(self, result: InvocationResult) -> str:
        fixture = result.fixture
        if result.outcome == OUTCOME_NOT_FOUND:
            return self._colorize(f"could not find function name for {fixture}", _COLOR_YELLOW)
        if result.outcome == OUTCOME_LOOKUP_FAILED:
            icon = self._icon(_ICON_CRASH, "ERROR")
            return self._colorize(f"{icon} {fixture} - {result.detail}", _COLOR_RED)
        if result.outcome == OUTCOME_PROCESS_FAILED:
            icon = self._icon(_ICON_CRASH, "ERROR")
            return self._colorize(
                f"{icon} {fixture} exited with code {result.exit_code}", _COLOR_RED
            )
        if result.outcome == OUTCOME_EMPTY_RESPONSE:
            icon = self._icon(_ICON_FAIL, "FAIL")
            return self._colorize(f"{icon} {fixture} - empty response", _COLOR_RED)
        if result.outcome == OUTCOME_SUCCESS:
            icon = self._icon(_ICON_PASS, "PASS")
            return self._colorize(f"{icon} {fixture}", _COLOR_GREEN)
        if result.outcome == OUTCOME_FAILURE:
            icon = self._icon(_ICON_FAIL, "FAIL")
            line = f"{icon} {fixture} - {result.detail}" if result.detail else f"{icon} {fixture}"
            return self._colorize(line, _COLOR_RED)
        return f"{fixture}: {result.outcome}"

    def response(self, fixture: str, payload: Any) -> None:
        rendered = json.dumps(payload, indent=2, ensure_ascii=False, default=str)
        safe_print_block(rendered.splitlines())

    def error(self, fixture: str, exc: BaseException) -> None:
        icon = self._icon(_ICON_CRASH, "ERROR")
        safe_print(self._colorize(f"{icon} {fixture} - {exc}", _COLOR_RED), file=sys.stderr)
