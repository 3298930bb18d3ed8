"""Pair the videos found in a course folder with the parsed volumes.

When there are as many videos as volumes they pair by position, which is
the common case.  Otherwise each video's filename must end in a number
(``lesson 2.mp4``) and is paired with the volume whose name contains that
same number (``VOLUME 2``).  Videos that cannot be paired are reported and
the rest of the batch carries on.
"""

from __future__ import annotations

import logging
import re
from typing import Sequence

from .models import MatchedPair, MatchResult, UnmatchedVideo, VideoCandidate, Volume

logger = logging.getLogger(__name__)

TRAILING_NUMBER_RE = re.compile(r"\s*(\d+)$")
# Whole words only ("Vol2" carries no number); compared by value, so 02 == 2.
NUMBER_RE = re.compile(r"\b\d+\b")


def trailing_number(video: VideoCandidate) -> int | None:
    """The integer at the end of the video's base name, if any."""
    match = TRAILING_NUMBER_RE.search(video.path.stem)
    return int(match.group(1)) if match else None


def volume_numbers(volume: Volume) -> set[int]:
    """Every whole number in the volume's name (``"VOL 12"`` -> {12}, not 1 or 2)."""
    if not volume.name:
        return set()
    return {int(n) for n in NUMBER_RE.findall(volume.name)}


def match_videos(
    videos: Sequence[VideoCandidate],
    volumes: Sequence[Volume],
) -> MatchResult:
    result = MatchResult()

    if len(videos) == len(volumes):
        for i, (video, volume) in enumerate(zip(videos, volumes)):
            result.pairs.append(MatchedPair(video=video, volume=volume, volume_index=i + 1))
        return result

    logger.info(
        "%d video(s) for %d volume(s); matching by filename number",
        len(videos),
        len(volumes),
    )
    # volume position -> the video already paired with it
    taken: dict[int, VideoCandidate] = {}
    for video in videos:
        number = trailing_number(video)
        if number is None:
            _unmatched(result, video, "filename does not end in a number")
            continue

        position = next(
            (i for i, v in enumerate(volumes) if number in volume_numbers(v)), None,
        )
        if position is None:
            _unmatched(result, video, f"no volume is numbered {number}")
            continue
        if position in taken:
            _unmatched(
                result,
                video,
                f"volume {volumes[position].name!r} is already paired with "
                f"{taken[position].path.name}",
            )
            continue

        taken[position] = video
        result.pairs.append(
            MatchedPair(video=video, volume=volumes[position], volume_index=number)
        )

    return result


def _unmatched(result: MatchResult, video: VideoCandidate, reason: str) -> None:
    logger.warning("Unmatched video %s: %s", video.path.name, reason)
    result.unmatched.append(UnmatchedVideo(video=video, reason=reason))
