# Where: sam_runner/invoker.py
# What: Invoke one Lambda with one event fixture and judge the response.
# Why: Keep the per-fixture process lifecycle independent of batch scheduling.
from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import IO, Any, Callable

from sam_runner.errors import RemoteLookupError
from sam_runner.models import (
    MODE_LOCAL,
    OUTCOME_EMPTY_RESPONSE,
    OUTCOME_FAILURE,
    OUTCOME_LOOKUP_FAILED,
    OUTCOME_NOT_FOUND,
    OUTCOME_PROCESS_FAILED,
    OUTCOME_SUCCESS,
    InvocationResult,
    RunOptions,
)
from sam_runner.remote import AWS_CLI_BIN, resolve_function_name
from sam_runner.template import iter_function_names
from sam_runner.ui import Reporter

logger = logging.getLogger("sam_runner.invoker")

SAM_CLI_BIN = "sam"
# Exit code used when the command could not be started at all.
LAUNCH_FAILURE_EXIT_CODE = 127
SUCCESS_STATUS_CODE = 200


def build_local_cmd(function_name: str, event_path: Path) -> list[str]:
    return [SAM_CLI_BIN, "local", "invoke", function_name, "--event", str(event_path)]


def build_remote_cmd(function_name: str, event_path: Path, output_path: Path) -> list[str]:
    # `sam remote invoke` cannot disable the botocore read timeout, which cuts
    # off invocations longer than the default socket timeout.
    return [
        AWS_CLI_BIN,
        "lambda",
        "invoke",
        "--function-name",
        function_name,
        "--payload",
        f"file://{event_path}",
        "--cli-binary-format",
        "raw-in-base64-out",
        "--cli-read-timeout",
        "0",
        str(output_path),
    ]


def _noop() -> None:
    return None


def _open_output_channel(
    mode: str, output_path: Path
) -> tuple[IO[bytes] | int, Callable[[], None]]:
    """Return the child's stdout target and its closer."""
    if mode == MODE_LOCAL:
        handle = output_path.open("wb")
        return handle, handle.close
    # aws lambda invoke writes the response to output_path itself.
    return subprocess.DEVNULL, _noop


def _spawn_and_wait(cmd: list[str], stdout: IO[bytes] | int) -> int:
    try:
        proc = subprocess.Popen(cmd, stdin=None, stdout=stdout, stderr=None)
    except OSError as exc:
        logger.error("Failed to start %s: %s", cmd[0], exc)
        return LAUNCH_FAILURE_EXIT_CODE
    return proc.wait()


def _decode_body(raw_body: Any) -> Any:
    if raw_body is None:
        return {}
    if isinstance(raw_body, (bytes, str)):
        return json.loads(raw_body)
    return raw_body


def classify_response(payload: Any) -> tuple[str, str | None]:
    """Return (outcome, detail) for a decoded Lambda response."""
    if not isinstance(payload, dict):
        return OUTCOME_FAILURE, "invalid JSON response: expected an object"
    try:
        body = _decode_body(payload.get("body", "{}"))
    except json.JSONDecodeError as exc:
        return OUTCOME_FAILURE, f"invalid JSON response: body {exc}"

    body_errors = body.get("errors") if isinstance(body, dict) else None
    if (
        payload.get("statusCode") == SUCCESS_STATUS_CODE
        and not payload.get("errors")
        and not body_errors
    ):
        return OUTCOME_SUCCESS, None
    return OUTCOME_FAILURE, None


def judge_output(
    fixture: str,
    exit_code: int,
    output_path: Path,
    *,
    function_name: str | None = None,
) -> InvocationResult:
    if exit_code != 0:
        return InvocationResult(
            fixture, OUTCOME_PROCESS_FAILED, exit_code=exit_code, function_name=function_name
        )

    raw = output_path.read_bytes() if output_path.is_file() else b""
    if not raw:
        return InvocationResult(
            fixture, OUTCOME_EMPTY_RESPONSE, exit_code=exit_code, function_name=function_name
        )

    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        return InvocationResult(
            fixture,
            OUTCOME_FAILURE,
            exit_code=exit_code,
            detail=f"invalid JSON response: {exc}",
            function_name=function_name,
        )
    outcome, detail = classify_response(payload)
    return InvocationResult(
        fixture,
        outcome,
        function_name=function_name,
        exit_code=exit_code,
        payload=payload,
        detail=detail,
    )


def resolve_declared_name(template: Any, fixture: str) -> str | None:
    candidates = list(iter_function_names(template, fixture))
    if len(candidates) > 1:
        logger.warning(
            "CodeUri suffix %r matches several functions (%s); using %s",
            fixture,
            ", ".join(str(name) for name in candidates),
            candidates[0],
        )
    return candidates[0] if candidates else None


def run_lambda(
    fixture: str,
    template: Any,
    options: RunOptions,
    reporter: Reporter,
) -> InvocationResult:
    """Invoke the function whose CodeUri ends with ``fixture`` and report the outcome."""
    event_path = options.event_path(fixture)
    output_path = options.output_path(fixture)

    function_name = resolve_declared_name(template, fixture)
    if function_name is None:
        result = InvocationResult(fixture, OUTCOME_NOT_FOUND)
        reporter.result(result)
        return result

    if options.mode == MODE_LOCAL:
        cmd = build_local_cmd(function_name, event_path)
    else:
        try:
            deployed_name = resolve_function_name(function_name, stack_name=options.stack_name)
        except RemoteLookupError as exc:
            result = InvocationResult(
                fixture, OUTCOME_LOOKUP_FAILED, function_name=function_name, detail=str(exc)
            )
            reporter.result(result)
            return result
        cmd = build_remote_cmd(deployed_name, event_path, output_path)

    reporter.command(fixture, cmd)
    stdout, close = _open_output_channel(options.mode, output_path)
    try:
        exit_code = _spawn_and_wait(cmd, stdout)
    finally:
        close()

    result = judge_output(fixture, exit_code, output_path, function_name=function_name)
    reporter.result(result)
    if options.show_responses and result.payload is not None:
        reporter.response(fixture, result.payload)
    return result
