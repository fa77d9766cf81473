"""Carriage-return progress line shared by all worktrees of a run."""

import sys
from pathlib import Path
from typing import Optional, TextIO

from .constants import PROGRESS_FORMAT


class ConsoleProgress:
    """Single running percentage across every worktree.

    The numerator counts each finished worktree's whole working set plus the
    files resolved so far in the current one, against the total of all
    working sets. A newline is written only when the last worktree's scan
    resolved at least one file.
    """

    def __init__(self, total: int, stream: Optional[TextIO] = None):
        self.total = total
        self._stream = stream
        self._base = 0
        self._touched = False

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so redirected sys.stdout is honoured
        return self._stream if self._stream is not None else sys.stdout

    def on_worktree_start(self, root: Path, size: int) -> None:
        self._base += size
        self._touched = False

    def on_file_complete(self, path: str, remaining: int) -> None:
        done = self._base - remaining
        self.stream.write(PROGRESS_FORMAT % (done * 100 // self.total, done, self.total))
        self.stream.flush()
        self._touched = True

    def on_worktree_complete(self, root: Path) -> None:
        if self._touched and self._base == self.total:
            self.stream.write("\n")
            self.stream.flush()
