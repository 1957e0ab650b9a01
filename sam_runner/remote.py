# Where: sam_runner/remote.py
# What: Resolve the deployed Lambda name for a template logical id.
# Why: Deployed names carry a stack prefix and a generated suffix.
from __future__ import annotations

import logging
import subprocess

from sam_runner.errors import FunctionNotFoundError, LookupFailedError

logger = logging.getLogger("sam_runner.remote")

AWS_CLI_BIN = "aws"
NO_RESULT = "None"


def function_prefix(function_name: str, stack_name: str | None = None) -> str:
    if stack_name:
        return f"{stack_name}-{function_name}"
    return function_name


def build_list_functions_cmd(prefix: str) -> list[str]:
    return [
        AWS_CLI_BIN,
        "lambda",
        "list-functions",
        "--query",
        f"Functions[?starts_with(FunctionName, '{prefix}')].FunctionName | [0]",
        "--output",
        "text",
    ]


def resolve_function_name(function_name: str, *, stack_name: str | None = None) -> str:
    """Return the first deployed function whose name starts with the stack prefix."""
    prefix = function_prefix(function_name, stack_name)
    cmd = build_list_functions_cmd(prefix)
    logger.debug("Resolving deployed function: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=True)
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or "").strip()
        message = f"{exc}: {stderr}" if stderr else str(exc)
        raise LookupFailedError(f"Failed to resolve function: {message}") from exc
    except OSError as exc:
        raise LookupFailedError(f"Failed to resolve function: {exc}") from exc

    output = (result.stdout or "").strip()
    if not output or output == NO_RESULT:
        raise FunctionNotFoundError(f"No function found with prefix: {prefix}")
    return output
