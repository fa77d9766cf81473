"""Stable API for git-utime.

This module provides a minimal, stable entry point for tools (build scripts,
CI steps) that want to restore timestamps without going through the CLI or
depending on internal module layout.
"""

from pathlib import Path
from typing import Optional, Union

from .config import load_utime_config
from .core import DiffMode
from .ops import get_worktree_root, utime_all
from .repository import GitRepository
from .service_types import ProgressCallback


def restore_mtimes(
    path: Union[str, Path] = ".",
    recurse: Optional[bool] = None,
    diff_mode: Optional[DiffMode] = None,
    progress: Optional[ProgressCallback] = None,
) -> int:
    """Restore file and directory times of the worktree containing ``path``.

    Args:
        path: Any path inside the worktree (defaults to current dir)
        recurse: Also process submodules (default: from .git-utime.yaml, else False)
        diff_mode: Merge diff mode (default: from .git-utime.yaml, else DEFAULT)
        progress: Optional progress callback (default: progress line on stdout)

    Returns:
        Number of files that received a timestamp

    Raises:
        NotARepositoryError: If ``path`` is not inside a worktree
        ExternalToolError: If a git command fails
        TimestampSetError: If a file's times cannot be set

    Example:
        >>> from git_utime.api import restore_mtimes
        >>> restore_mtimes(".", recurse=True)
        42
    """
    repo = GitRepository()
    root = get_worktree_root(path, repo)

    config = load_utime_config(root)
    if recurse is not None:
        config.recurse = recurse
    if diff_mode is not None:
        config.diff_mode = diff_mode

    return utime_all(root, config, repo=repo, progress=progress)
