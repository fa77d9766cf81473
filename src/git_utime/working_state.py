"""Working set construction: tracked files whose content matches HEAD."""

import logging
from pathlib import Path
from typing import Set

from .core import Worktree
from .service_types import StatusProvider

logger = logging.getLogger(__name__)


def build_working_set(root: Path, provider: StatusProvider) -> Set[str]:
    """Compute the paths eligible for a history-derived timestamp.

    All tracked paths, minus every path git status reports: modified, added,
    deleted, and both the old and new name of a rename or copy. Only files
    whose on-disk content is exactly the committed version remain.

    Raises:
        NotARepositoryError: If ``root`` is not a worktree
    """
    files = provider.tracked_files(root)
    changed = provider.changed_files(root)
    files -= changed
    logger.debug(
        "%s: %d tracked files eligible, %d paths reported by status",
        root, len(files), len(changed),
    )
    return files


def load_worktree(root: Path, provider: StatusProvider) -> Worktree:
    """Create the resolution state for one worktree."""
    return Worktree(root=root, files=build_working_set(root, provider))
