"""Git-backed providers for working sets, history, and submodules.

This module is the only place that spawns git. ``GitRepository`` implements
the ``StatusProvider``, ``HistoryProvider`` and ``SubmoduleLister`` protocols
from ``service_types``.
"""

import io
import logging
import os
import subprocess
import sys
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Set, Sized, Union

from .constants import (
    DEFAULT_GIT,
    GIT_BASE_OPTIONS,
    GIT_ENV_VAR,
    GIT_LOCALE_ENV,
    LOG_FORMAT,
    LOG_OPTIONS,
)
from .core import CommitRecord, DiffMode
from .errors import ExternalToolError, NotARepositoryError
from .logparse import parse_log

logger = logging.getLogger(__name__)


class GitProcess:
    """A running git command with stdout streamed as text.

    Use as a context manager. If the body leaves before stdout reached EOF
    (early termination or an exception), the process is killed and reaped;
    its exit status is then irrelevant. Otherwise a non-zero exit status is
    raised as ``ExternalToolError`` carrying git's stderr.
    """

    def __init__(self, args: Sequence[str], git: str = DEFAULT_GIT):
        self.command = [git, *GIT_BASE_OPTIONS, *args]
        self._proc: Optional[subprocess.Popen] = None
        self._stdout: Optional[io.TextIOWrapper] = None
        self._stderr = None
        self._drained = False

    def __enter__(self) -> "GitProcess":
        logger.debug("Running %s", " ".join(self.command))
        self._stderr = tempfile.TemporaryFile()
        try:
            self._proc = subprocess.Popen(
                self.command,
                stdin=subprocess.DEVNULL,
                env={**os.environ, **GIT_LOCALE_ENV},
                stdout=subprocess.PIPE,
                stderr=self._stderr,
            )
        except OSError as e:
            self._stderr.close()
            raise ExternalToolError(self.command, stderr=str(e)) from e

        # Only "\n" ends a line; paths are decoded the way os.fsdecode does
        self._stdout = io.TextIOWrapper(
            self._proc.stdout,
            encoding=sys.getfilesystemencoding(),
            errors=sys.getfilesystemencodeerrors(),
            newline="\n",
        )
        return self

    def lines(self) -> Iterator[str]:
        """Iterate over stdout lines, terminators included."""
        for line in self._stdout:
            yield line
        self._drained = True

    def read(self) -> str:
        """Read all of stdout."""
        data = self._stdout.read()
        self._drained = True
        return data

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            if exc_type is not None or not self._drained:
                self._proc.kill()
                self._stdout.close()
                self._proc.wait()
                if exc_type is None:
                    logger.debug("Stopped %s before end of output", " ".join(self.command))
                return False

            self._stdout.close()
            returncode = self._proc.wait()
            if returncode != 0:
                self._stderr.seek(0)
                stderr = self._stderr.read().decode("utf-8", "replace")
                logger.debug("%s failed with status %d:\n%s", " ".join(self.command), returncode, stderr)
                raise ExternalToolError(self.command, returncode, stderr)
        finally:
            self._stderr.close()
        return False


class GitRepository:
    """Answers questions about git worktrees by running the git CLI."""

    def __init__(self, git: Optional[str] = None):
        """Initialize with the git executable to run.

        Args:
            git: Executable name or path (default: $GIT_UTIME_GIT or "git")
        """
        self.git = git or os.environ.get(GIT_ENV_VAR) or DEFAULT_GIT

    def run(self, args: Sequence[str]) -> GitProcess:
        """Prepare a git command; enter the result to start it."""
        return GitProcess(args, git=self.git)

    def _output(self, args: Sequence[str], path: Union[str, Path]) -> str:
        try:
            with self.run(args) as proc:
                return proc.read()
        except ExternalToolError as e:
            if "not a git repository" in e.stderr:
                raise NotARepositoryError(path, e.returncode) from e
            raise

    def toplevel(self, path: Union[str, Path]) -> Path:
        """Return the root of the worktree containing ``path``.

        Raises:
            NotARepositoryError: If ``path`` is not inside a worktree
        """
        out = self._output(["-C", str(path), "rev-parse", "--show-toplevel"], path)
        top = out.split("\n", 1)[0].rstrip("\r")
        if not top:
            raise NotARepositoryError(path)
        return Path(top)

    def tracked_files(self, root: Path) -> Set[str]:
        """Return every path in the index, relative to ``root``."""
        out = self._output(["-C", str(root), "ls-files", "-z"], root)
        return {p for p in out.split("\0") if p}

    def changed_files(self, root: Path) -> Set[str]:
        """Return paths reported by ``git status``, including both rename/copy endpoints.

        Porcelain records look like ``XY path``; for renames and copies (``X``
        is ``R`` or ``C``) the next NUL-separated field is the source path.
        """
        out = self._output(["-C", str(root), "status", "-z", "--porcelain"], root)
        fields = out.split("\0")
        changed = set()
        i = 0
        while i < len(fields):
            record = fields[i]
            i += 1
            if len(record) < 4:
                continue
            changed.add(record[3:])
            if record[0] in ("R", "C") and i < len(fields):
                changed.add(fields[i])
                i += 1
        return changed

    def submodules(self, root: Path) -> List[Path]:
        """Return initialized submodule roots below ``root``, recursively.

        ``git submodule status --recursive`` lists a submodule before the
        submodules nested inside it; that parent-before-child order is part
        of this method's contract. Uninitialized submodules (``-`` prefix)
        are skipped.
        """
        out = self._output(["-C", str(root), "submodule", "status", "--recursive"], root)
        mods = []
        for line in out.split("\n"):
            line = line.rstrip("\r")
            if not line or line[0] == "-":
                continue
            # "<flag><sha1> <path> (<describe>)"
            parts = line[1:].split(" ", 2)
            if len(parts) < 2:
                continue
            mods.append(root / parts[1])
        return mods

    @contextmanager
    def commits(
        self,
        root: Path,
        diff_mode: DiffMode,
        remaining: Optional[Sized] = None,
    ) -> Iterator[Iterator[CommitRecord]]:
        """Stream the worktree's history as commit records, most recent first.

        The git process is killed if the caller leaves the block early.
        """
        args = ["-C", str(root), "log", LOG_FORMAT, diff_mode.log_option, *LOG_OPTIONS]
        with self.run(args) as proc:
            yield parse_log(proc.lines(), remaining)
