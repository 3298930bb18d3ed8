"""FFmpeg and ffprobe subprocess wrappers.

The parser never touches media; these wrappers are the two things the
rest of the pipeline needs from the encoder: a video's total duration
(the end of its last chapter) and cutting one chapter out of a video.

Every call goes through ``run_ffmpeg`` which logs the command, checks the
return code, and raises on failure.
"""

from __future__ import annotations

import json
import logging
import math
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Dependency check
# ---------------------------------------------------------------------------

def check_dependencies() -> None:
    """Verify that ffmpeg and ffprobe are on the PATH.

    Call once before a batch.  A missing binary otherwise shows up as a
    failure on every single chapter.
    """
    for tool in ("ffmpeg", "ffprobe"):
        try:
            subprocess.run(
                [tool, "-version"],
                capture_output=True,
                check=True,
            )
        except (subprocess.CalledProcessError, FileNotFoundError) as exc:
            raise RuntimeError(
                f"{tool} not found. Ensure it is installed and on the PATH."
            ) from exc


# ---------------------------------------------------------------------------
# Core command runner
# ---------------------------------------------------------------------------

def run_ffmpeg(
    args: list[str],
    *,
    description: str = "",
) -> subprocess.CompletedProcess[str]:
    """Run an ffmpeg / ffprobe command and return the completed process.

    Arguments are passed as a list (never a shell string), so paths with
    spaces are safe.

    Raises ``subprocess.CalledProcessError`` if the process exits non-zero.
    """
    logger.info("Running: %s  [%s]", " ".join(args), description)
    result = subprocess.run(args, capture_output=True, text=True, check=False)
    if result.returncode != 0:
        logger.error(
            "Command failed (rc=%d): %s\nstderr: %s",
            result.returncode,
            " ".join(args),
            result.stderr,
        )
        raise subprocess.CalledProcessError(
            result.returncode, args, result.stdout, result.stderr
        )
    return result


# ---------------------------------------------------------------------------
# Probing
# ---------------------------------------------------------------------------

def probe_duration(src: Path) -> int | None:
    """Container duration of *src* in whole seconds, or ``None``.

    ``None`` means "unknown": the last chapter then runs to the end of the
    input instead of a fixed end time.
    """
    try:
        result = run_ffmpeg(
            [
                "ffprobe", "-v", "quiet",
                "-print_format", "json",
                "-show_format",
                str(src),
            ],
            description=f"probe {src.name}",
        )
    except (subprocess.CalledProcessError, FileNotFoundError):
        logger.warning("Could not probe %s; duration unknown", src)
        return None

    data = json.loads(result.stdout or "{}")
    raw = data.get("format", {}).get("duration")
    if raw in (None, "N/A"):
        logger.warning("ffprobe reported no duration for %s", src)
        return None
    return int(math.floor(float(raw)))


# ---------------------------------------------------------------------------
# Segment extraction
# ---------------------------------------------------------------------------

def _secs_to_timecode(s: int) -> str:
    """Convert integer seconds to HH:MM:SS format for ffmpeg ``-ss``/``-to``."""
    hours = s // 3600
    minutes = (s % 3600) // 60
    secs = s % 60
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def extract_segment(
    src: Path,
    dest: Path,
    start: int,
    end: int | None,
    *,
    reencode: bool = False,
) -> None:
    """Cut ``[start, end)`` out of *src* into *dest*.

    *end* of ``None`` copies to the end of the input.  Stream copy cuts on
    keyframes, so boundaries can drift by a second or two; *reencode*
    trades speed for exact cuts.
    """
    args = [
        "ffmpeg", "-y",
        "-i", str(src),
        "-ss", _secs_to_timecode(start),
    ]
    if end is not None:
        args += ["-to", _secs_to_timecode(end)]
    if reencode:
        args += ["-c:v", "libx264", "-preset", "medium", "-crf", "18", "-c:a", "aac"]
    else:
        args += ["-c", "copy"]
    args += ["-map_chapters", "-1", "-movflags", "+faststart", str(dest)]

    run_ffmpeg(
        args,
        description=f"segment {_secs_to_timecode(start)}-"
        f"{_secs_to_timecode(end) if end is not None else 'end'} of {src.name}",
    )
