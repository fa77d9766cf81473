"""Restore file modification times from git history."""

from .constants import UTIME_VERSION as __version__

__all__ = ["__version__"]
