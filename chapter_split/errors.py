"""Exception types raised by the chapter-splitting pipeline.

Data-quality conditions that do not stop processing (an unmatched video,
a volume whose timestamps cannot be put in order) are *reported* rather
than raised; see ``MatchResult.unmatched`` and ``ParseIssue``.
"""

from __future__ import annotations

from pathlib import Path


class ChapterSplitError(Exception):
    """Base class for every error raised by this package."""


class ChapterFileNotFound(ChapterSplitError, FileNotFoundError):
    """The chapter text file does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Chapter file not found: {path}")
        self.path = path


class MalformedTimestamp(ChapterSplitError, ValueError):
    """A timestamp token has an unsupported shape (bad group count)."""

    def __init__(self, token: str, reason: str = "unsupported group count") -> None:
        super().__init__(f"Malformed timestamp {token!r}: {reason}")
        self.token = token


class EmptyChapterFile(ChapterSplitError):
    """A chapter file parsed cleanly but contained no chapters."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"No chapters found in {path}")
        self.path = path


class TimestampFileError(ChapterSplitError):
    """A folder has no timestamp file, or more than one."""
