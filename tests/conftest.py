from __future__ import annotations

from pathlib import Path

import pytest

from chapter_split import handler as batch


@pytest.fixture
def fake_media(monkeypatch):
    """Replace ffmpeg/ffprobe with recorders; every video is 600 s long."""
    calls: list[tuple[Path, Path, int, int | None]] = []

    def fake_extract(src, dest, start, end, reencode=False):
        dest.write_bytes(b"")
        calls.append((src, dest, start, end))

    monkeypatch.setattr(batch, "check_dependencies", lambda: None)
    monkeypatch.setattr(batch, "probe_duration", lambda path: 600)
    monkeypatch.setattr("chapter_split.splitter.extract_segment", fake_extract)
    return calls


def make_course(folder: Path, chapters: str, *videos: str) -> Path:
    folder.mkdir(parents=True)
    (folder / "timestamps.txt").write_text(chapters, encoding="utf-8")
    for name in videos:
        (folder / name).write_bytes(b"")
    return folder
