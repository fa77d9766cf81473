"""Setting file times without following symbolic links."""

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Union

from .errors import TimestampSetError

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def to_ns(when: datetime) -> int:
    """Convert an aware datetime to integer nanoseconds since the epoch."""
    delta = when - EPOCH
    return (delta.days * 86400 + delta.seconds) * 1_000_000_000 + delta.microseconds * 1000


def lutimes(path: Union[str, Path], atime: datetime, mtime: datetime) -> None:
    """Set access and modification times of ``path``.

    A symbolic link gets its own times changed, never its target's. Where
    ``os.utime`` cannot act on a link itself (Windows), links are skipped and
    keep their current times.

    Raises:
        TimestampSetError: If the OS rejects the update
    """
    ns = (to_ns(atime), to_ns(mtime))
    try:
        if os.utime in os.supports_follow_symlinks:
            os.utime(path, ns=ns, follow_symlinks=False)
        elif os.path.islink(path):
            logger.debug("Skipping symlink %s: link times not supported", path)
        else:
            os.utime(path, ns=ns)
    except (OSError, ValueError) as e:
        # ValueError: embedded NUL in the path
        raise TimestampSetError(path, e) from e


def lutime(path: Union[str, Path], when: datetime) -> None:
    """Set both access and modification time of ``path`` to ``when``."""
    lutimes(path, when, when)
