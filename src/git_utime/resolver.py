"""Timestamp resolution for a single worktree.

``resolve_worktree`` walks history newest first and gives each file in the
working set the time of the first commit that touches it, queueing every
containing directory on the way. ``propagate_directories`` then writes the
queued directory times, deepest first.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from .core import DiffMode, Worktree
from .service_types import HistoryProvider, ProgressCallback, TimestampSetter

logger = logging.getLogger(__name__)


def record_ancestors(path: Path, root: Path, when: datetime, dirs: Dict[Path, datetime]) -> None:
    """Queue ``when`` for every directory from ``path``'s parent up to ``root``.

    Stops at the first directory already queued: its ancestors were queued
    together with it, by a more recent commit.
    """
    current = path
    while current != root and current.parent != current:
        current = current.parent
        if current in dirs:
            break
        dirs[current] = when


def resolve_worktree(
    worktree: Worktree,
    history: HistoryProvider,
    setter: TimestampSetter,
    diff_mode: DiffMode = DiffMode.DEFAULT,
    progress: Optional[ProgressCallback] = None,
) -> int:
    """Assign history timestamps to the files of one worktree.

    Files are removed from ``worktree.files`` as they are resolved; the scan
    ends when the set is empty or history is exhausted. Files never touched
    by any commit keep their current times.

    Args:
        worktree: Worktree state; ``files`` and ``dirs`` are updated in place
        history: Commit source
        setter: Applies a timestamp to a path
        diff_mode: How merge commits report touched files
        progress: Optional progress callback

    Returns:
        Number of files that received a timestamp
    """
    files = worktree.files
    if not files:
        return 0

    resolved = 0
    with history.commits(worktree.root, diff_mode, remaining=files) as records:
        for record in records:
            for name in record.paths:
                if name not in files:
                    continue
                files.remove(name)

                path = worktree.root / name
                setter(path, record.timestamp)
                record_ancestors(path, worktree.root, record.timestamp, worktree.dirs)

                resolved += 1
                if progress is not None:
                    progress.on_file_complete(name, len(files))
            if not files:
                break

    logger.debug(
        "%s: resolved %d files, %d untouched by history",
        worktree.root, resolved, len(files),
    )
    return resolved


def propagate_directories(dirs: Dict[Path, datetime], setter: TimestampSetter) -> None:
    """Apply queued directory timestamps, descendants before ancestors.

    Paths are written in reverse lexicographic order; a directory's path is
    a prefix of all its descendants', so every descendant sorts first.
    """
    for path in sorted(dirs, key=str, reverse=True):
        setter(path, dirs[path])
    logger.debug("Applied timestamps to %d directories", len(dirs))


def utime_worktree(
    worktree: Worktree,
    history: HistoryProvider,
    setter: TimestampSetter,
    diff_mode: DiffMode = DiffMode.DEFAULT,
    progress: Optional[ProgressCallback] = None,
) -> int:
    """Resolve a worktree's files, then its directories."""
    resolved = resolve_worktree(worktree, history, setter, diff_mode, progress)
    propagate_directories(worktree.dirs, setter)
    return resolved
