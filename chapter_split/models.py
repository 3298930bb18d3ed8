"""Data models for the chapter-splitting pipeline.

All parsed data flows through these dataclasses.  The parsing types are
frozen: repair and finalisation build *new* entries and volumes instead of
mutating the ones they were given.  Serialization methods (to_dict /
to_list) produce the plain-JSON shape written to ``manifest.json``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_VIDEO_EXTENSIONS = (".mp4", ".mkv", ".mov", ".m4v", ".avi", ".webm")


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@dataclass
class SplitConfig:
    """Input configuration for a split run.

    Shared by the CLI, the batch orchestrator and the Lambda handler.
    """

    export_dir: Path
    video_extensions: tuple[str, ...] = DEFAULT_VIDEO_EXTENSIONS
    reencode: bool = False        # False = ffmpeg stream copy (fast, keyframe-aligned cuts)
    dry_run: bool = False         # parse + match + validate, but never call ffmpeg
    write_manifest: bool = True   # write manifest.json next to the split files

    @classmethod
    def from_event(cls, event: dict[str, Any]) -> SplitConfig:
        """Construct from an AWS Lambda event / SQS message dict."""
        extensions = event.get("video_extensions")
        return cls(
            export_dir=Path(event["export_dir"]),
            video_extensions=(
                tuple(ext.lower() for ext in extensions)
                if extensions else DEFAULT_VIDEO_EXTENSIONS
            ),
            reencode=bool(event.get("reencode", False)),
            dry_run=bool(event.get("dry_run", False)),
            write_manifest=bool(event.get("write_manifest", True)),
        )


# ---------------------------------------------------------------------------
# Parsed chapter data
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ChapterEntry:
    """A single chapter marker.

    ``source_token`` is the raw timestamp text the offset came from, kept
    so the chronology repair can reinterpret it.  It is ``None`` for the
    synthesized Intro chapter.
    """

    title: str
    start_seconds: int
    source_token: str | None = None

    def __post_init__(self) -> None:
        if self.start_seconds < 0:
            raise ValueError(
                f"Chapter {self.title!r} has negative start {self.start_seconds}"
            )

    def to_list(self) -> list:
        """Serialize to the [title, seconds] pair used in the manifest."""
        return [self.title, self.start_seconds]


@dataclass(frozen=True)
class Volume:
    """A named, finalized group of chapters.

    Build these through ``chapterer.finalize_volume``; the constructor only
    checks the result: non-empty, ascending by start, first chapter at 0.
    """

    name: str | None
    chapters: tuple[ChapterEntry, ...]

    def __post_init__(self) -> None:
        if not self.chapters:
            raise ValueError(f"Volume {self.name!r} has no chapters")
        if self.chapters[0].start_seconds != 0:
            raise ValueError(f"Volume {self.name!r} does not start at 0")
        starts = [c.start_seconds for c in self.chapters]
        if any(b < a for a, b in zip(starts, starts[1:])):
            raise ValueError(f"Volume {self.name!r} chapters are not in order")

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "chapters": [c.to_list() for c in self.chapters],
        }


@dataclass(frozen=True)
class ParseIssue:
    """A data-quality problem found while parsing a chapter file.

    ``kind`` is ``"malformed_timestamp"`` or ``"chronology_ambiguous"``.
    ``text`` is the offending raw line (or the timestamp and title of the first
    out-of-order chapter) so the author can find it in the source file.
    """

    kind: str
    line_number: int | None
    text: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "line": self.line_number,
            "text": self.text,
            "message": self.message,
        }


@dataclass(frozen=True)
class ChapterFile:
    """Every volume parsed from one chapter text file, in file order."""

    volumes: tuple[Volume, ...]
    issues: tuple[ParseIssue, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.volumes

    @property
    def chapter_count(self) -> int:
        return sum(len(v.chapters) for v in self.volumes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "volumes": [v.to_dict() for v in self.volumes],
            "issues": [i.to_dict() for i in self.issues],
        }


# ---------------------------------------------------------------------------
# Video matching
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class VideoCandidate:
    """A video discovered in a course folder; ``order`` is its filename rank."""

    path: Path
    order: int


@dataclass(frozen=True)
class MatchedPair:
    """A video paired with the volume whose chapters describe it.

    ``volume_index`` is the 1-based position in positional mode and the
    number taken from the filename in filename-number mode.
    """

    video: VideoCandidate
    volume: Volume
    volume_index: int


@dataclass(frozen=True)
class UnmatchedVideo:
    video: VideoCandidate
    reason: str


@dataclass
class MatchResult:
    pairs: list[MatchedPair] = field(default_factory=list)
    unmatched: list[UnmatchedVideo] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Splitter input / batch output
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ChapterSpan:
    """One chapter as the splitter sees it.

    ``end_seconds`` is ``None`` for the last chapter when the video
    duration is unknown (the segment then runs to the end of the input).
    """

    title: str
    start_seconds: int
    end_seconds: int | None

    @property
    def duration(self) -> int | None:
        if self.end_seconds is None:
            return None
        return self.end_seconds - self.start_seconds

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "start": self.start_seconds, "end": self.end_seconds}


@dataclass
class FolderResult:
    """Outcome of processing one course folder."""

    folder: Path
    chapter_file: ChapterFile | None = None
    matches: MatchResult | None = None
    outputs: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "folder": str(self.folder),
            "ok": self.ok,
            "outputs": [str(p) for p in self.outputs],
            "warnings": self.warnings,
            "error": self.error,
        }


@dataclass
class BatchSummary:
    results: list[FolderResult] = field(default_factory=list)

    @property
    def succeeded(self) -> list[FolderResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> list[FolderResult]:
        return [r for r in self.results if not r.ok]

    def to_dict(self) -> dict[str, Any]:
        return {
            "succeeded": len(self.succeeded),
            "failed": len(self.failed),
            "results": [r.to_dict() for r in self.results],
        }
