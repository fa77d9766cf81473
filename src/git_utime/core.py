"""Core data models for git-utime.

Most-Recent-Wins Resolution:
----------------------------
git log walks history newest first. Each tracked file is assigned the time of
the first commit in that walk that touches it, and each containing directory
keeps the first time recorded for it. Because the walk is reverse
chronological, "first" always means "most recent".
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, Set, Tuple

from pydantic import BaseModel


# ============= Merge Diff Mode =============

class DiffMode(str, Enum):
    """How merge commits report the files they touch."""

    DEFAULT = "default"        # merges are skipped entirely
    COMBINED = "combined"      # files differing from all parents
    PER_PARENT = "per-parent"  # files differing from any parent

    @property
    def log_option(self) -> str:
        """The git log option selecting this mode."""
        return _LOG_OPTIONS[self]


_LOG_OPTIONS = {
    DiffMode.DEFAULT: "--no-merges",
    DiffMode.COMBINED: "-c",
    DiffMode.PER_PARENT: "-m",
}


def select_diff_mode(current: DiffMode, mode: DiffMode, enabled: bool) -> DiffMode:
    """Apply one ``-c``/``-m`` style switch to the current mode.

    Enabling a mode selects it (clearing the other). Disabling a mode only
    resets to ``DEFAULT`` when that mode is the one currently selected.

    Examples:
        select_diff_mode(DiffMode.COMBINED, DiffMode.PER_PARENT, True) -> PER_PARENT
        select_diff_mode(DiffMode.COMBINED, DiffMode.PER_PARENT, False) -> COMBINED
        select_diff_mode(DiffMode.COMBINED, DiffMode.COMBINED, False) -> DEFAULT
    """
    if enabled:
        return mode
    if current == mode:
        return DiffMode.DEFAULT
    return current


# ============= Commit Records =============

class CommitRecord(BaseModel):
    """One commit from the history walk.

    ``paths`` is empty for merge commits when merges are suppressed.
    """

    model_config = {"frozen": True}

    timestamp: datetime
    paths: Tuple[str, ...] = ()


# ============= Worktrees =============

@dataclass
class Worktree:
    """Per-worktree resolution state.

    ``files`` holds repository-relative paths still awaiting a timestamp and
    only ever shrinks. ``dirs`` maps absolute directory paths to the time
    they will receive; an entry is never overwritten once recorded.
    """
    root: Path
    files: Set[str] = field(default_factory=set)
    dirs: Dict[Path, datetime] = field(default_factory=dict)

    @property
    def remaining(self) -> int:
        """Number of files still awaiting a timestamp."""
        return len(self.files)
