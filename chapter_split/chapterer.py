"""Chapter file parser.

Reads a free-form, hand-typed text file of chapters, optionally grouped
into volumes by header lines::

    VOLUME 1
    0:00 Intro
    1:23 Top Juji Vs Bottom Juji
    Some descriptive text that gets ignored
    VOLUME 2
    1:13 Grip Fighting
    ...

Each line is classified as a chapter, a volume header or noise.  Chapters
collect in an accumulator for the open volume; a header (or end of input)
finalizes it: chronology repair, stable sort by start, and an ``Intro``
chapter at 0:00 if the author did not write one.

A file with no header lines is a single volume named ``"chapters"``.  An
empty result is a valid ``ChapterFile``; callers must check ``is_empty``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence

from .chronology import ChronologyStatus, first_disorder, repair_chronology
from .errors import ChapterFileNotFound, MalformedTimestamp
from .headers import is_volume_header
from .line_parser import parse_chapter_line
from .models import ChapterEntry, ChapterFile, ParseIssue, Volume

logger = logging.getLogger(__name__)

DEFAULT_VOLUME_NAME = "chapters"
INTRO_TITLE = "Intro"


# ---------------------------------------------------------------------------
# Finalize
# ---------------------------------------------------------------------------

def finalize_volume(
    name: str | None,
    entries: Sequence[ChapterEntry],
) -> tuple[Volume, ChronologyStatus]:
    """Turn an accumulator's raw entries into a ``Volume``.

    1. Repair misread timestamps (``chronology.repair_chronology``).
    2. Stable-sort by start, so equal starts keep their file order.
    3. Prepend ``Intro`` at 0 when the first chapter starts later.
    """
    repaired, status = repair_chronology(entries)
    ordered = sorted(repaired, key=lambda c: c.start_seconds)
    if ordered and ordered[0].start_seconds > 0:
        ordered.insert(0, ChapterEntry(title=INTRO_TITLE, start_seconds=0))
    return Volume(name=name, chapters=tuple(ordered)), status


# ---------------------------------------------------------------------------
# Line scan
# ---------------------------------------------------------------------------

@dataclass
class _Accumulator:
    """Chapters collected for the volume that is currently open."""

    name: str | None
    entries: list[ChapterEntry] = field(default_factory=list)


@dataclass
class _ScanState:
    """Everything threaded through the line loop.

    ``current is None`` is the "no volume yet" state.
    """

    current: _Accumulator | None = None
    saw_header: bool = False
    volumes: list[Volume] = field(default_factory=list)
    issues: list[ParseIssue] = field(default_factory=list)

    def add_chapter(self, entry: ChapterEntry) -> None:
        if self.current is None:
            self.current = _Accumulator(name=None)
        self.current.entries.append(entry)

    def open_volume(self, name: str) -> None:
        self.saw_header = True
        self.close_volume()
        self.current = _Accumulator(name=name)

    def close_volume(self) -> None:
        acc = self.current
        if acc is None or not acc.entries:
            return
        name = acc.name
        if name is None and not self.saw_header:
            name = DEFAULT_VOLUME_NAME
        volume, status = finalize_volume(name, acc.entries)
        if status is ChronologyStatus.AMBIGUOUS:
            self.issues.append(_ambiguous_issue(name, acc.entries))
        self.volumes.append(volume)
        self.current = None

    def result(self) -> ChapterFile:
        return ChapterFile(volumes=tuple(self.volumes), issues=tuple(self.issues))


def _ambiguous_issue(name: str | None, entries: Sequence[ChapterEntry]) -> ParseIssue:
    """Point at the first chapter that starts before the one above it."""
    entry = entries[first_disorder(entries) or 0]
    where = f"volume {name!r}" if name else "chapters before the first header"
    return ParseIssue(
        kind="chronology_ambiguous",
        line_number=None,
        text=f"{entry.source_token} {entry.title}",
        message=f"timestamps in {where} are out of order under every reading; "
        "check the source text",
    )


def _malformed_issue(line_number: int, line: str, exc: MalformedTimestamp) -> ParseIssue:
    logger.warning("Line %d: %s: %r", line_number, exc, line)
    return ParseIssue(
        kind="malformed_timestamp",
        line_number=line_number,
        text=line,
        message=str(exc),
    )


def _numbered_lines(lines: Iterable[str]) -> Iterable[tuple[int, str]]:
    for line_number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if line:
            yield line_number, line


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def parse_chapter_text(text: str) -> ChapterFile:
    """Parse chapter *text* into one or more volumes."""
    state = _ScanState()

    for line_number, line in _numbered_lines(text.splitlines()):
        try:
            entry = parse_chapter_line(line)
        except MalformedTimestamp as exc:
            state.issues.append(_malformed_issue(line_number, line, exc))
            continue

        if entry is not None:
            state.add_chapter(entry)
        elif is_volume_header(line):
            state.open_volume(line)
        else:
            logger.debug("Ignoring line %d: %r", line_number, line)

    state.close_volume()
    return state.result()


def parse_single_volume(text: str) -> ChapterFile:
    """Parse *text* as exactly one volume, ignoring header boundaries.

    The first non-empty line names the volume when it is not a chapter;
    otherwise the volume is named ``"chapters"``.
    """
    issues: list[ParseIssue] = []
    entries: list[ChapterEntry] = []
    name: str | None = None

    for index, (line_number, line) in enumerate(_numbered_lines(text.splitlines())):
        try:
            entry = parse_chapter_line(line)
        except MalformedTimestamp as exc:
            issues.append(_malformed_issue(line_number, line, exc))
            continue

        if entry is not None:
            entries.append(entry)
        elif index == 0:
            name = line

    if not entries:
        return ChapterFile(volumes=(), issues=tuple(issues))

    name = name or DEFAULT_VOLUME_NAME
    volume, status = finalize_volume(name, entries)
    if status is ChronologyStatus.AMBIGUOUS:
        issues.append(_ambiguous_issue(name, entries))
    return ChapterFile(volumes=(volume,), issues=tuple(issues))


def read_chapter_text(chapter_file: Path) -> str:
    """Read a chapter file as UTF-8 (a leading BOM is dropped).

    Raises ``ChapterFileNotFound`` if *chapter_file* does not exist.
    """
    if not chapter_file.is_file():
        raise ChapterFileNotFound(chapter_file)
    return chapter_file.read_text(encoding="utf-8-sig")


def parse_chapter_file(chapter_file: Path, *, single_volume: bool = False) -> ChapterFile:
    """Read and parse *chapter_file*.

    Raises ``ChapterFileNotFound`` if *chapter_file* does not exist.
    """
    text = read_chapter_text(chapter_file)
    parsed = parse_single_volume(text) if single_volume else parse_chapter_text(text)
    logger.info(
        "Parsed %s: %d volume(s), %d chapter(s), %d issue(s)",
        chapter_file.name,
        len(parsed.volumes),
        parsed.chapter_count,
        len(parsed.issues),
    )
    return parsed
