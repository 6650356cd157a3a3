"""
Error types raised by the sync pipeline.
"""

from typing import Optional, Sequence


class SyncError(Exception):
    """Base class for fatal pipeline errors."""

    exit_code = 1
    kind = "operation_error"


class ConfigurationError(SyncError):
    """A precondition of the run is not met (raised before any mutating step)."""

    exit_code = 2
    kind = "configuration_error"


class OperationError(SyncError):
    """A mutating git step failed."""

    exit_code = 1
    kind = "operation_error"

    def __init__(self, message: str, step: Optional[str] = None):
        super().__init__(message)
        self.step = step


class GitCommandError(Exception):
    """A git invocation exited non-zero or could not be started."""

    def __init__(
        self,
        args: Sequence[str],
        returncode: Optional[int],
        stderr: str = "",
    ):
        self.command = tuple(args)
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = self.stderr or f"exit status {returncode}"
        super().__init__(f"{' '.join(self.command)} failed: {detail}")
