"""Course folder discovery.

A course folder holds the videos for one course plus exactly one chapter
(timestamp) text file.  Videos are ordered by filename, which is how
authors number them.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from .errors import TimestampFileError
from .models import DEFAULT_VIDEO_EXTENSIONS, VideoCandidate

logger = logging.getLogger(__name__)

TIMESTAMP_SUFFIXES = (".txt",)


def _files(folder: Path) -> list[Path]:
    if not folder.is_dir():
        raise NotADirectoryError(f"Not a folder: {folder}")
    return sorted((p for p in folder.iterdir() if p.is_file()), key=lambda p: p.name)


def list_videos(
    folder: Path,
    extensions: Iterable[str] = DEFAULT_VIDEO_EXTENSIONS,
) -> list[VideoCandidate]:
    wanted = {ext.lower() for ext in extensions}
    videos = [p for p in _files(folder) if p.suffix.lower() in wanted]
    return [VideoCandidate(path=p, order=i) for i, p in enumerate(videos)]


def list_timestamp_files(folder: Path) -> list[Path]:
    return [p for p in _files(folder) if p.suffix.lower() in TIMESTAMP_SUFFIXES]


def select_timestamp_file(folder: Path) -> Path:
    """Return the folder's single timestamp file.

    Raises ``TimestampFileError`` when there is none or more than one.
    """
    candidates = list_timestamp_files(folder)
    if not candidates:
        raise TimestampFileError(f"No timestamp file (.txt) in {folder}")
    if len(candidates) > 1:
        names = ", ".join(p.name for p in candidates)
        raise TimestampFileError(f"Several timestamp files in {folder}: {names}")
    logger.info("Using timestamp file %s", candidates[0])
    return candidates[0]
