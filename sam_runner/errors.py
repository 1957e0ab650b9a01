# Where: sam_runner/errors.py
# What: Exception types raised by the event runner.
# Why: Let the CLI tell caller mistakes apart from unexpected failures.
from __future__ import annotations


class SamRunnerError(Exception):
    """Base class for runner errors."""


class InputError(SamRunnerError):
    """Raised when the runner is invoked with unusable arguments."""


class RemoteLookupError(SamRunnerError):
    """Raised when a deployed function name cannot be resolved."""


class FunctionNotFoundError(RemoteLookupError):
    pass


class LookupFailedError(RemoteLookupError):
    pass
