"""Extract a ``(timestamp, title)`` chapter from one raw text line.

Typical lines::

    1:23 Top Juji Vs Bottom Juji
    Overview 4:52 - 7:23
    Intro To Armbars<TAB>0
    12.05.00 — Leg Drag Pass

The title is derived by running the line through ``TITLE_PIPELINE``, an
ordered list of pure string transforms.  Each step can be tested on its
own, and the order matters: timestamps must be gone before the dash and
whitespace cleanup can see what is left of a stripped range.
"""

from __future__ import annotations

import re
from typing import Callable

from .models import ChapterEntry
from .timestamps import TimestampMode, parse_timestamp

TIMESTAMP_RE = re.compile(r"\d{1,2}[:.]\d{1,2}(?:[:.]\d{1,2})?(?:[:.]\d{1,2})?")

# Some authors mark the zero-offset chapter with a bare "0" and no
# separator, either first or last on the line.
LEADING_ZERO_RE = re.compile(r"^0(?=\s)")
TRAILING_ZERO_RE = re.compile(r"(?<=\s)0$")

DASHES = r"\-–—"
EDGE_DASH_RE = re.compile(rf"^[\s{DASHES}]+|[\s{DASHES}]+$")
INNER_DASH_RE = re.compile(rf"\s[{DASHES}]+(?=\s)")
WHITESPACE_RE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Title pipeline
# ---------------------------------------------------------------------------

def strip_timestamps(text: str) -> str:
    """Remove every timestamp-shaped substring (both ends of a range)."""
    return TIMESTAMP_RE.sub(" ", text)


def strip_bare_zero(text: str) -> str:
    """Remove a bare ``0`` offset at the start or end of the line."""
    text = text.strip()
    text = LEADING_ZERO_RE.sub("", text)
    return TRAILING_ZERO_RE.sub("", text)


def strip_dashes(text: str) -> str:
    """Remove separator dashes at the edges and stray ones between words.

    Hyphens inside words (``Half-Guard``) are kept.
    """
    text = INNER_DASH_RE.sub(" ", f" {text} ")
    return EDGE_DASH_RE.sub("", text)


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_RE.sub(" ", text).strip()


TITLE_PIPELINE: list[Callable[[str], str]] = [
    strip_timestamps,
    strip_bare_zero,
    strip_dashes,
    collapse_whitespace,
]


def clean_title(line: str, *, bare_zero: bool = False) -> str:
    """Run *line* through ``TITLE_PIPELINE`` in order.

    ``strip_bare_zero`` only runs when the offset came from the bare-zero
    fallback; otherwise a title that legitimately ends in `` 0`` keeps it.
    """
    for step in TITLE_PIPELINE:
        if step is strip_bare_zero and not bare_zero:
            continue
        line = step(line)
    return line


# ---------------------------------------------------------------------------
# Line parsing
# ---------------------------------------------------------------------------

def find_timestamp_token(line: str) -> tuple[str, bool] | None:
    """Return ``(token, used_bare_zero)`` for *line*, or ``None``.

    The first timestamp-shaped match wins, so in ``"Overview 4:52 - 7:23"``
    the chapter starts at 4:52.  Failing that, a bare ``0`` at either end
    of the line counts as a zero offset.
    """
    match = TIMESTAMP_RE.search(line)
    if match:
        return match.group(0), False
    if LEADING_ZERO_RE.search(line) or TRAILING_ZERO_RE.search(line):
        return "0", True
    return None


def parse_chapter_line(line: str) -> ChapterEntry | None:
    """Parse one line into a ``ChapterEntry``.

    Returns ``None`` for blank lines, lines without a timestamp and lines
    that are only a timestamp.  Raises ``MalformedTimestamp`` if the token
    cannot be resolved; the file parser records that against the line.
    """
    line = line.strip()
    if not line:
        return None

    found = find_timestamp_token(line)
    if found is None:
        return None
    token, bare_zero = found

    start_seconds = parse_timestamp(token, TimestampMode.AUTO)

    title = clean_title(line, bare_zero=bare_zero)
    if not title:
        return None

    return ChapterEntry(title=title, start_seconds=start_seconds, source_token=token)
