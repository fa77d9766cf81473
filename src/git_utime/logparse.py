"""Streaming parser for ``git log --pretty=%n%x00%cD -z --name-only`` output.

Each commit starts with a header line ``\\0<date>\\0``. What follows the date
depends on the commit and the merge diff mode:

    \\0<date>\\0               plain commit, paths on the next line
    \\0<date>\\0\\0             merge commit, no paths (--no-merges never emits it)
    \\0<date>\\0\\0p1\\0p2...   merge commit, paths inline (-c / -m)

Path lines are NUL-separated lists belonging to the preceding header.
"""

import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Iterable, Iterator, Optional, Sized

from .core import CommitRecord
from .errors import MalformedRecordError, MalformedTimestampError

logger = logging.getLogger(__name__)


def parse_date(value: str) -> datetime:
    """Parse an RFC 2822 date such as ``Wed, 7 Jul 2021 12:00:00 +0900``.

    Raises:
        MalformedTimestampError: If the value is not a valid RFC 2822 date
    """
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        raise MalformedTimestampError(value)
    if parsed is None:
        raise MalformedTimestampError(value)
    if parsed.tzinfo is None:
        # "-0000" means the offset is unknown
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _split_paths(field: str) -> tuple:
    return tuple(p for p in field.split("\0") if p)


def parse_log(
    lines: Iterable[str],
    remaining: Optional[Sized] = None,
) -> Iterator[CommitRecord]:
    """Yield commit records from git log output, most recent first.

    Lines are pulled one at a time. When ``remaining`` is given, no further
    line is requested once it is empty, so callers can stop the walk as soon
    as they have nothing left to resolve. End of input, even in the middle of
    a record, simply ends the sequence.

    Args:
        lines: Output lines, with or without line terminators
        remaining: Optional sized container checked before every read

    Raises:
        MalformedTimestampError: If a header carries an unparsable date
        MalformedRecordError: If a header is truncated or paths precede any header
    """
    it = iter(lines)
    timestamp: Optional[datetime] = None

    while remaining is None or len(remaining) > 0:
        line = next(it, None)
        if line is None:
            return
        line = line.rstrip("\r\n")
        if not line:
            continue

        if line[0] == "\0":
            header = line[1:]
            end = header.find("\0")
            if end < 0:
                raise MalformedRecordError(line, "unterminated date")
            timestamp = parse_date(header[:end])
            tail = header[end:]
            if tail == "\0":
                # plain commit: paths follow on the next line
                continue
            if tail == "\0\0":
                # merge commit without paths
                yield CommitRecord(timestamp=timestamp)
                continue
            # merge commit: paths on the same line
            yield CommitRecord(timestamp=timestamp, paths=_split_paths(tail[2:]))
            continue

        if timestamp is None:
            raise MalformedRecordError(line, "paths before any commit header")
        yield CommitRecord(timestamp=timestamp, paths=_split_paths(line))

    logger.debug("Nothing left to resolve, stopped reading history")
