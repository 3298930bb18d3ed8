"""Chapter splitting pipeline: parse hand-typed chapter files, split videos.

Quick start::

    from pathlib import Path
    from chapter_split import parse_chapter_file

    parsed = parse_chapter_file(Path("course/timestamps.txt"))
    for volume in parsed.volumes:
        print(volume.name, [(c.title, c.start_seconds) for c in volume.chapters])

Batch splitting::

    from chapter_split import SplitConfig, process_batch

    summary = process_batch([Path("course")], SplitConfig(export_dir=Path("out")))
"""

__version__ = "0.1.0"

from .chapterer import parse_chapter_file, parse_chapter_text, parse_single_volume
from .handler import lambda_handler, process_batch, process_folder
from .matcher import match_videos
from .models import ChapterEntry, ChapterFile, SplitConfig, Volume
from .timestamps import TimestampMode, format_timestamp, parse_timestamp

__all__ = [
    "__version__",
    "lambda_handler",
    "process_batch",
    "process_folder",
    "parse_chapter_file",
    "parse_chapter_text",
    "parse_single_volume",
    "match_videos",
    "ChapterEntry",
    "ChapterFile",
    "SplitConfig",
    "Volume",
    "TimestampMode",
    "format_timestamp",
    "parse_timestamp",
]
