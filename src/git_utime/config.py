"""git-utime configuration helpers."""

import logging
from dataclasses import dataclass
from pathlib import Path

import yaml

from .constants import CONFIG_FILE
from .core import DiffMode
from .errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class UtimeConfig:
    """Options controlling a run."""

    recurse: bool = False
    diff_mode: DiffMode = DiffMode.DEFAULT


def load_utime_config(root: Path) -> UtimeConfig:
    """Load defaults from .git-utime.yaml at the worktree root if present.

    Recognised keys are ``recurse`` (bool) and ``diff_merges``
    (``default``, ``combined`` or ``per-parent``). Command-line flags take
    precedence over anything read here.

    Raises:
        ConfigError: If ``diff_merges`` names an unknown mode or ``recurse``
            is not a boolean
    """
    cfg_path = root / CONFIG_FILE
    if not cfg_path.exists():
        return UtimeConfig()

    try:
        data = yaml.safe_load(cfg_path.read_text()) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable %s: %s", cfg_path, e)
        return UtimeConfig()
    if not isinstance(data, dict):
        logger.warning("Ignoring %s: expected a mapping", cfg_path)
        return UtimeConfig()

    raw_mode = data.get("diff_merges", DiffMode.DEFAULT.value)
    try:
        diff_mode = DiffMode(str(raw_mode))
    except ValueError:
        choices = ", ".join(m.value for m in DiffMode)
        raise ConfigError(f"{cfg_path}: diff_merges must be one of {choices}, got {raw_mode!r}")

    recurse = data.get("recurse", False)
    if not isinstance(recurse, bool):
        raise ConfigError(f"{cfg_path}: recurse must be true or false, got {recurse!r}")

    return UtimeConfig(
        recurse=recurse,
        diff_mode=diff_mode,
    )
