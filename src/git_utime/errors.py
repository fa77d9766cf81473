"""Custom exceptions for git-utime.

This module defines typed exceptions for better error handling and clearer
error messages throughout the application. Every error is terminal for the
current invocation; ``exit_code`` is the process status the CLI reports.
"""

from pathlib import Path
from typing import Optional, Sequence, Union


class UtimeError(RuntimeError):
    """Base class for all git-utime errors."""

    exit_code = 1


# Repository Errors
class NotARepositoryError(UtimeError):
    """Target path is not inside a git working tree."""

    def __init__(self, path: Union[str, Path], returncode: Optional[int] = None):
        self.path = path
        self.returncode = returncode
        if returncode:
            self.exit_code = returncode
        super().__init__(f"not a git repository: {path}")


class ExternalToolError(UtimeError):
    """A git process could not be started or exited non-zero."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        if returncode:
            self.exit_code = returncode

        detail = stderr.strip().splitlines()[0] if stderr.strip() else ""
        if returncode is None:
            message = f"failed to run {self.command[0]}"
        else:
            message = f"{' '.join(self.command)} exited with status {returncode}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


# Log Stream Errors
class MalformedRecordError(UtimeError):
    """The commit stream does not have the expected shape."""

    def __init__(self, line: str, reason: str):
        self.line = line
        self.reason = reason
        super().__init__(f"malformed log record ({reason}): {line!r}")


class MalformedTimestampError(MalformedRecordError):
    """A commit date could not be parsed."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(value, "unparsable date")


# Filesystem Errors
class TimestampSetError(UtimeError):
    """Setting access/modification times failed."""

    def __init__(self, path: Union[str, Path], cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"cannot set times on {path}: {cause}")


# Configuration Errors
class ConfigError(UtimeError):
    """Invalid configuration value."""
    pass
