"""Service layer interfaces for git-utime.

The resolution core only talks to these protocols. ``repository.GitRepository``
implements the provider protocols on top of the git CLI, and
``timestamps.lutime`` is the default timestamp setter.
"""

from datetime import datetime
from pathlib import Path
from typing import ContextManager, Iterator, List, Optional, Protocol, Set, Sized

from .core import CommitRecord, DiffMode


class HistoryProvider(Protocol):
    """Source of commit records, most recent first."""

    def commits(
        self,
        root: Path,
        diff_mode: DiffMode,
        remaining: Optional[Sized] = None,
    ) -> ContextManager[Iterator[CommitRecord]]:
        """Open a history walk for a worktree.

        The returned iterator is lazy. Leaving the context before the
        iterator is exhausted cancels the walk and releases its resources.

        Args:
            root: Worktree root
            diff_mode: How merge commits report touched files
            remaining: When given, reading stops as soon as it is empty
        """
        ...


class StatusProvider(Protocol):
    """Tracked and locally changed files of a worktree."""

    def tracked_files(self, root: Path) -> Set[str]:
        """Return all version-controlled paths, relative to ``root``."""
        ...

    def changed_files(self, root: Path) -> Set[str]:
        """Return modified, added, deleted, and rename/copy endpoint paths."""
        ...


class SubmoduleLister(Protocol):
    """Discovery of nested worktrees."""

    def submodules(self, root: Path) -> List[Path]:
        """Return initialized submodule roots, recursively.

        Parents must come before their children: the orchestrator processes
        worktrees in reverse of this order so that nested submodules are
        finalized before their parents.
        """
        ...


class TimestampSetter(Protocol):
    """Sets atime and mtime of a path without following symlinks."""

    def __call__(self, path: Path, when: datetime) -> None:
        ...


class ProgressCallback(Protocol):
    """Progress reporting interface."""

    def on_worktree_start(self, root: Path, size: int) -> None:
        """Called before a worktree's history is scanned."""
        ...

    def on_file_complete(self, path: str, remaining: int) -> None:
        """Called after a file received its timestamp."""
        ...

    def on_worktree_complete(self, root: Path) -> None:
        """Called when a worktree's scan has finished."""
        ...
