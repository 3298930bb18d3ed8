"""Split a video into one file per chapter of its matched volume.

Output layout::

    <export_dir>/
        01 - volume 1/
            01 - intro.mp4
            02 - top juji vs bottom juji.mp4
        02 - volume 2/
            ...
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from .ffmpeg_utils import extract_segment
from .models import ChapterSpan, MatchedPair, SplitConfig, Volume
from .naming import numbered_name
from .timestamps import format_timestamp

logger = logging.getLogger(__name__)


def chapter_spans(volume: Volume, total_duration: int | None) -> list[ChapterSpan]:
    """Start/end pairs for every chapter of *volume*.

    A chapter ends where the next begins; the last ends at
    *total_duration* (``None`` when the duration is unknown).
    """
    chapters = volume.chapters
    spans: list[ChapterSpan] = []
    for i, chapter in enumerate(chapters):
        end = chapters[i + 1].start_seconds if i + 1 < len(chapters) else total_duration
        spans.append(
            ChapterSpan(title=chapter.title, start_seconds=chapter.start_seconds, end_seconds=end)
        )
    return spans


def validate_spans(spans: list[ChapterSpan], total_duration: int | None) -> list[str]:
    """Human-readable problems with *spans*; empty when they look sane.

    Catches what chronology repair leaves behind: chapters past the end of
    the video (usually a misread timestamp) and zero-length chapters.
    """
    problems: list[str] = []
    for span in spans:
        if total_duration is not None and span.start_seconds >= total_duration:
            problems.append(
                f"{span.title!r} starts at {format_timestamp(span.start_seconds)}, "
                f"past the end of the video ({format_timestamp(total_duration)})"
            )
        elif span.duration == 0:
            problems.append(
                f"{span.title!r} at {format_timestamp(span.start_seconds)} has zero length"
            )
    return problems


def volume_dir(export_dir: Path, pair: MatchedPair) -> Path:
    name = pair.volume.name or pair.video.path.stem
    return export_dir / numbered_name(pair.volume_index, name)


def split_volume(
    pair: MatchedPair,
    spans: list[ChapterSpan],
    config: SplitConfig,
    total_duration: int | None = None,
) -> list[Path]:
    """Write one file per span and return the paths written.

    A chapter whose ffmpeg call fails is logged and skipped; the remaining
    chapters are still split.  Spans that start past the end of the video
    are skipped too.  In ``dry_run`` mode nothing is written and the
    planned paths are returned.
    """
    out_dir = volume_dir(config.export_dir, pair)
    suffix = pair.video.path.suffix
    written: list[Path] = []

    if not config.dry_run:
        out_dir.mkdir(parents=True, exist_ok=True)

    for i, span in enumerate(spans, start=1):
        if total_duration is not None and span.start_seconds >= total_duration:
            logger.warning(
                "Skipping chapter %r: starts past the end of %s",
                span.title,
                pair.video.path.name,
            )
            continue
        if span.duration is not None and span.duration <= 0:
            logger.warning("Skipping empty chapter %r in %s", span.title, pair.video.path.name)
            continue

        dest = out_dir / f"{numbered_name(i, span.title)}{suffix}"
        if config.dry_run:
            logger.info(
                "[dry run] %s %s-%s -> %s",
                pair.video.path.name,
                format_timestamp(span.start_seconds),
                format_timestamp(span.end_seconds) if span.end_seconds is not None else "end",
                dest,
            )
            written.append(dest)
            continue

        try:
            extract_segment(
                pair.video.path,
                dest,
                span.start_seconds,
                span.end_seconds,
                reencode=config.reencode,
            )
        except subprocess.CalledProcessError:
            logger.warning("Failed to split chapter %r of %s", span.title, pair.video.path.name)
            continue
        written.append(dest)

    logger.info(
        "Split %s: %d/%d chapters -> %s",
        pair.video.path.name,
        len(written),
        len(spans),
        out_dir,
    )
    return written
