"""Folder and batch orchestration.

Exposes three functions:

- ``process_folder(folder, config)``: parse one course folder's chapter
  file, pair its videos with the parsed volumes and split them.
- ``process_batch(folders, config)``: run ``process_folder`` over many
  folders, isolating failures so one bad chapter file never stops the rest.
- ``lambda_handler(event, context)``: AWS Lambda entry point.

Every folder gets its own export directory
(``<export_dir>/<safe folder name>/``) with a ``manifest.json`` describing
what was parsed, matched and written.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import Any, Iterable

from .chapterer import parse_chapter_file
from .errors import ChapterSplitError, EmptyChapterFile
from .ffmpeg_utils import check_dependencies, probe_duration
from .matcher import match_videos
from .models import BatchSummary, ChapterSpan, FolderResult, MatchedPair, SplitConfig
from .naming import safe_filename
from .scanner import list_videos, select_timestamp_file
from .splitter import chapter_spans, split_volume, validate_spans

logger = logging.getLogger(__name__)

MANIFEST_NAME = "manifest.json"


# ---------------------------------------------------------------------------
# Lambda entry point
# ---------------------------------------------------------------------------

def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """AWS Lambda handler.

    Expects *event* keys matching ``SplitConfig.from_event`` plus:

    - ``folders`` (list[str], required): course folders to process.
    - ``single_volume`` (bool, optional): ignore volume headers.

    Returns the batch summary dict.
    """
    config = SplitConfig.from_event(event)
    folders = [Path(f) for f in event["folders"]]
    summary = process_batch(
        folders, config, single_volume=bool(event.get("single_volume", False)),
    )
    return summary.to_dict()


# ---------------------------------------------------------------------------
# Batch
# ---------------------------------------------------------------------------

def process_batch(
    folders: Iterable[Path],
    config: SplitConfig,
    *,
    single_volume: bool = False,
) -> BatchSummary:
    """Process every folder, collecting a summary instead of stopping early."""
    if not config.dry_run:
        check_dependencies()

    summary = BatchSummary()
    for folder in folders:
        try:
            result = process_folder(folder, config, single_volume=single_volume)
        except Exception as exc:
            logger.error("Failed to process %s: %s", folder, exc, exc_info=True)
            result = FolderResult(folder=folder, error=str(exc))
        summary.results.append(result)

    logger.info(
        "Batch finished: %d succeeded, %d failed",
        len(summary.succeeded),
        len(summary.failed),
    )
    return summary


# ---------------------------------------------------------------------------
# Single folder
# ---------------------------------------------------------------------------

def process_folder(
    folder: Path,
    config: SplitConfig,
    *,
    single_volume: bool = False,
) -> FolderResult:
    """Parse, match and split one course folder.

    Steps:
    1. Pick the folder's timestamp file and parse it.
    2. Reject an empty result ("no chapters found").
    3. Pair the folder's videos with the parsed volumes.
    4. For each pair: probe the duration, build and validate chapter
       spans, split.
    5. Write ``manifest.json``.

    Data-quality problems (parse issues, unmatched videos, suspicious
    spans) are logged and collected in ``FolderResult.warnings``.
    """
    result = FolderResult(folder=folder)

    chapter_path = select_timestamp_file(folder)
    parsed = parse_chapter_file(chapter_path, single_volume=single_volume)
    if parsed.is_empty:
        raise EmptyChapterFile(chapter_path)
    result.chapter_file = parsed

    for issue in parsed.issues:
        where = f"line {issue.line_number}" if issue.line_number else "volume"
        result.warnings.append(f"{chapter_path.name} {where}: {issue.message}: {issue.text!r}")

    videos = list_videos(folder, config.video_extensions)
    if not videos:
        raise ChapterSplitError(f"No videos in {folder}")

    matches = match_videos(videos, parsed.volumes)
    result.matches = matches
    for miss in matches.unmatched:
        result.warnings.append(f"{miss.video.path.name}: {miss.reason}")

    folder_config = dataclasses.replace(
        config, export_dir=config.export_dir / safe_filename(folder.name),
    )

    manifest_pairs: list[dict[str, Any]] = []
    for pair in matches.pairs:
        duration = None if config.dry_run else probe_duration(pair.video.path)
        spans = chapter_spans(pair.volume, duration)

        for problem in validate_spans(spans, duration):
            logger.warning("%s: %s", pair.video.path.name, problem)
            result.warnings.append(f"{pair.video.path.name}: {problem}")

        result.outputs.extend(split_volume(pair, spans, folder_config, duration))
        manifest_pairs.append(_pair_entry(pair, duration, spans))

    if config.write_manifest and not config.dry_run:
        manifest = {
            "folder": folder.name,
            "chapter_file": chapter_path.name,
            **parsed.to_dict(),
            "pairs": manifest_pairs,
            "unmatched": [
                {"video": m.video.path.name, "reason": m.reason} for m in matches.unmatched
            ],
        }
        folder_config.export_dir.mkdir(parents=True, exist_ok=True)
        manifest_path = folder_config.export_dir / MANIFEST_NAME
        manifest_path.write_text(
            json.dumps(manifest, indent=2, ensure_ascii=False), encoding="utf-8",
        )
        logger.info("Wrote manifest: %s", manifest_path)

    return result


def _pair_entry(
    pair: MatchedPair,
    duration: int | None,
    spans: list[ChapterSpan],
) -> dict[str, Any]:
    return {
        "video": pair.video.path.name,
        "volume": pair.volume.name,
        "index": pair.volume_index,
        "duration": duration,
        "spans": [s.to_dict() for s in spans],
    }
