"""Constants for git-utime."""

# Per-worktree configuration file (at the worktree root)
CONFIG_FILE = ".git-utime.yaml"

# Environment variable overriding the git executable
GIT_ENV_VAR = "GIT_UTIME_GIT"
DEFAULT_GIT = "git"

# Options shared by every git invocation
GIT_BASE_OPTIONS = ["-c", "core.quotepath=false"]

# Untranslated git messages, matched by NotARepositoryError detection
GIT_LOCALE_ENV = {"LC_ALL": "C"}

# git log format: a blank line, NUL, then the committer date in RFC 2822
LOG_FORMAT = "--pretty=%n%x00%cD"
LOG_OPTIONS = ["-z", "--name-only", "--no-color", "--no-renames"]

# Progress line written to stdout
PROGRESS_FORMAT = "\rutime: %3d%% (%d/%d)"

# Version
UTIME_VERSION = "0.1.0"
