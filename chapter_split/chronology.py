"""Chronology repair for misread three-group timestamps.

Chapter offsets within a volume always increase in the source material.
When the three-group heuristic in ``timestamps`` reads a
minutes:seconds:frames token (``16.44.12``) as hours:minutes:seconds, the
result is hours too large and breaks that ordering.

The repair is all-or-nothing for a volume: if the list is out of order,
every entry is re-read with ``TimestampMode.FORCE_MINUTES_SECONDS``.  If
that alternate reading is in order it replaces the original wholesale;
otherwise the original list is kept and the volume is reported as
ambiguous so a human can look at the source text.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
from typing import Sequence

from .models import ChapterEntry
from .timestamps import TimestampMode, format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)


class ChronologyStatus(enum.Enum):
    ORDERED = "ordered"        # already non-decreasing, untouched
    REPAIRED = "repaired"      # minutes:seconds reading adopted
    AMBIGUOUS = "ambiguous"    # neither reading is in order, original kept


def first_disorder(chapters: Sequence[ChapterEntry]) -> int | None:
    """Index of the first entry that starts before its predecessor."""
    for i in range(1, len(chapters)):
        if chapters[i].start_seconds < chapters[i - 1].start_seconds:
            return i
    return None


def is_monotonic(chapters: Sequence[ChapterEntry]) -> bool:
    return first_disorder(chapters) is None


def reinterpret(chapters: Sequence[ChapterEntry]) -> list[ChapterEntry]:
    """Re-read every tokened entry as minutes:seconds, returning new entries."""
    alternate: list[ChapterEntry] = []
    for entry in chapters:
        if entry.source_token is None:
            alternate.append(entry)
            continue
        seconds = parse_timestamp(entry.source_token, TimestampMode.FORCE_MINUTES_SECONDS)
        alternate.append(dataclasses.replace(entry, start_seconds=seconds))
    return alternate


def repair_chronology(
    chapters: Sequence[ChapterEntry],
) -> tuple[list[ChapterEntry], ChronologyStatus]:
    """Return the chapter list to use for a volume and how it was obtained.

    The input is never modified.
    """
    bad = first_disorder(chapters)
    if bad is None:
        return list(chapters), ChronologyStatus.ORDERED

    alternate = reinterpret(chapters)
    if is_monotonic(alternate):
        changed = sum(
            1 for old, new in zip(chapters, alternate)
            if old.start_seconds != new.start_seconds
        )
        logger.info(
            "Timestamps out of order at %r; re-read as minutes:seconds "
            "(%d of %d entries changed)",
            chapters[bad].source_token,
            changed,
            len(chapters),
        )
        return alternate, ChronologyStatus.REPAIRED

    logger.warning(
        "Chapter %r (%s) starts before %r (%s) and no minutes:seconds "
        "reading fixes the order; keeping the timestamps as written",
        chapters[bad].title,
        format_timestamp(chapters[bad].start_seconds),
        chapters[bad - 1].title,
        format_timestamp(chapters[bad - 1].start_seconds),
    )
    return list(chapters), ChronologyStatus.AMBIGUOUS
