"""Timestamp grammar for hand-typed chapter offsets.

Authors write offsets as 1 to 4 numeric groups separated by ``:`` or ``.``
(the two are interchangeable)::

    45          -> 45 s
    1:23        -> 83 s               (minutes:seconds)
    1:23:45     -> 5025 s             (hours:minutes:seconds)
    25:38:00    -> 1538 s             (minutes:seconds:frames, frames dropped)
    1.06.08.00  -> 3968 s             (hours:minutes:seconds:frames)

Three groups are ambiguous between H:MM:SS and MM:SS:frames.  The
tie-breaks below were tuned against the existing corpus of chapter files
and must stay exactly as they are: a first group above 23 cannot be an
hour, and a trailing ``00`` group is treated as frame noise.  When the
guess is wrong it usually breaks chapter ordering, which
``chronology.repair_chronology`` detects and corrects with
``TimestampMode.FORCE_MINUTES_SECONDS``.
"""

from __future__ import annotations

import enum

from .errors import MalformedTimestamp

MAX_HOUR_GROUP = 23


class TimestampMode(enum.Enum):
    AUTO = "auto"
    FORCE_MINUTES_SECONDS = "force_minutes_seconds"


def _split_groups(token: str) -> list[int]:
    parts = token.strip().replace(".", ":").split(":")
    if not all(p.isdigit() for p in parts):
        raise MalformedTimestamp(token, "groups must be non-negative integers")
    return [int(p) for p in parts]


def parse_timestamp(token: str, mode: TimestampMode = TimestampMode.AUTO) -> int:
    """Convert *token* to whole seconds under *mode*.

    Raises ``MalformedTimestamp`` for anything other than 1-4 integer groups.
    """
    groups = _split_groups(token)

    if len(groups) == 1:
        return groups[0]
    if len(groups) == 2:
        minutes, seconds = groups
        return minutes * 60 + seconds
    if len(groups) == 3:
        a, b, c = groups
        if (
            mode is TimestampMode.FORCE_MINUTES_SECONDS
            or a > MAX_HOUR_GROUP
            or c == 0
        ):
            # minutes:seconds:frames, the third group is sub-second noise.
            return a * 60 + b
        return a * 3600 + b * 60 + c
    if len(groups) == 4:
        hours, minutes, seconds, _frames = groups
        return hours * 3600 + minutes * 60 + seconds

    raise MalformedTimestamp(token, f"{len(groups)} groups (expected 1-4)")


def format_timestamp(seconds: int) -> str:
    """Render *seconds* as ``M:SS`` below an hour, else ``H:MM:SS``."""
    if seconds < 0:
        raise ValueError(f"Cannot format negative offset {seconds}")
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"
