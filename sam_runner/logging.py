# Where: sam_runner/logging.py
# What: Thread-safe console output helpers for event runs.
# Why: Fixtures run on worker threads; their lines must not interleave.
from __future__ import annotations

import shlex
import sys
import threading
from typing import TextIO

_OUTPUT_LOCK = threading.Lock()


def safe_print(message: str = "", *, file: TextIO | None = None) -> None:
    stream = file or sys.stdout
    with _OUTPUT_LOCK:
        print(message, file=stream, flush=True)


def safe_print_block(lines: list[str], *, file: TextIO | None = None) -> None:
    """Print several lines without letting other threads write in between."""
    stream = file or sys.stdout
    with _OUTPUT_LOCK:
        for line in lines:
            print(line, file=stream)
        stream.flush()


def render_cmd(cmd: list[str]) -> str:
    return shlex.join(cmd)
