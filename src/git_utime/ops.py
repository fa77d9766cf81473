"""Core operations for git-utime."""

import logging
from pathlib import Path
from typing import List, Optional, Union

from .config import UtimeConfig
from .core import Worktree
from .progress import ConsoleProgress
from .repository import GitRepository
from .resolver import utime_worktree
from .service_types import ProgressCallback, TimestampSetter
from .timestamps import lutime
from .working_state import load_worktree

logger = logging.getLogger(__name__)


def get_worktree_root(path: Union[str, Path] = ".", repo: Optional[GitRepository] = None) -> Path:
    """Resolve the top level of the worktree containing ``path``.

    Raises:
        NotARepositoryError: If ``path`` is not inside a worktree
    """
    repo = repo or GitRepository()
    return repo.toplevel(path)


def worktree_order(root: Path, recurse: bool, repo: GitRepository) -> List[Path]:
    """Return ``root`` followed by its submodules in discovery order."""
    order = [root]
    if recurse:
        order.extend(repo.submodules(root))
    return order


def utime_all(
    root: Path,
    config: Optional[UtimeConfig] = None,
    repo: Optional[GitRepository] = None,
    setter: TimestampSetter = lutime,
    progress: Optional[ProgressCallback] = None,
) -> int:
    """Restore timestamps in a worktree and, optionally, its submodules.

    Every working set is built before any timestamp is written, so progress
    can be reported against the grand total. Worktrees are then processed
    in reverse of discovery order: nested submodules first, the main
    worktree last. A parent's entry for a submodule directory is therefore
    written after the submodule's own contents.

    Args:
        root: Top level of the main worktree
        config: Run options (default: no recursion, merges skipped)
        repo: Git provider (default: GitRepository())
        setter: Timestamp setter (default: lutime)
        progress: Progress callback (default: ConsoleProgress on stdout)

    Returns:
        Number of files that received a timestamp
    """
    config = config or UtimeConfig()
    repo = repo or GitRepository()

    worktrees: List[Worktree] = [
        load_worktree(path, repo)
        for path in worktree_order(root, config.recurse, repo)
    ]
    total = sum(wt.remaining for wt in worktrees)
    if progress is None:
        progress = ConsoleProgress(total)
    logger.debug(
        "Processing %d worktree(s), %d files, merges: %s",
        len(worktrees), total, config.diff_mode.value,
    )

    resolved = 0
    for worktree in reversed(worktrees):
        progress.on_worktree_start(worktree.root, worktree.remaining)
        try:
            resolved += utime_worktree(worktree, repo, setter, config.diff_mode, progress)
        finally:
            progress.on_worktree_complete(worktree.root)
    return resolved
