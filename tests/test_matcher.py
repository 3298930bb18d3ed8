"""Tests for pairing videos with volumes."""

from __future__ import annotations

from pathlib import Path

from chapter_split.matcher import match_videos, trailing_number, volume_numbers
from chapter_split.models import ChapterEntry, VideoCandidate, Volume


def _volume(name):
    return Volume(name=name, chapters=(ChapterEntry("Intro", 0),))


def _videos(*names):
    return [VideoCandidate(path=Path("/course") / n, order=i) for i, n in enumerate(names)]


def test_equal_counts_pair_by_position():
    videos = _videos("b.mp4", "a.mp4", "c 9.mp4")
    volumes = [_volume("VOLUME 1"), _volume("VOLUME 2"), _volume("VOLUME 3")]

    result = match_videos(videos, volumes)

    assert result.unmatched == []
    assert [(p.video.path.name, p.volume.name, p.volume_index) for p in result.pairs] == [
        ("b.mp4", "VOLUME 1", 1),
        ("a.mp4", "VOLUME 2", 2),
        ("c 9.mp4", "VOLUME 3", 3),
    ]


def test_mismatched_counts_match_by_trailing_number():
    videos = _videos("lesson 2.mp4", "bonus.mp4", "lesson 3.mp4")
    volumes = [_volume("VOLUME 1"), _volume("VOLUME 2"), _volume("VOLUME 3"), _volume("VOLUME 4")]

    result = match_videos(videos, volumes)

    assert [(p.video.path.name, p.volume.name, p.volume_index) for p in result.pairs] == [
        ("lesson 2.mp4", "VOLUME 2", 2),
        ("lesson 3.mp4", "VOLUME 3", 3),
    ]
    assert len(result.unmatched) == 1
    assert result.unmatched[0].video.path.name == "bonus.mp4"


def test_number_must_be_whole():
    videos = _videos("part2.mp4")
    volumes = [_volume("VOLUME 12"), _volume("VOLUME 21")]

    result = match_videos(videos, volumes)

    assert result.pairs == []
    assert "2" in result.unmatched[0].reason


def test_leading_zeros_compare_by_value():
    result = match_videos(_videos("vid 02.mp4"), [_volume("Vol 1"), _volume("Vol 2")])
    assert result.pairs[0].volume.name == "Vol 2"
    assert result.pairs[0].volume_index == 2


def test_unnamed_volume_never_matches_by_number():
    result = match_videos(_videos("x 1.mp4"), [Volume(None, (ChapterEntry("A", 0),)), _volume("1")])
    assert result.pairs[0].volume.name == "1"


def test_unmatched_is_logged(caplog):
    with caplog.at_level("WARNING"):
        match_videos(_videos("trailer.mp4"), [_volume("1"), _volume("2")])
    assert "trailer.mp4" in caplog.text


def test_second_video_for_same_volume_is_unmatched():
    videos = _videos("extra 2.mp4", "lesson 02.mp4", "lesson 3.mp4")
    volumes = [_volume("VOLUME 1"), _volume("VOLUME 2"), _volume("VOLUME 3"), _volume("VOLUME 4")]

    result = match_videos(videos, volumes)

    assert [(p.video.path.name, p.volume.name) for p in result.pairs] == [
        ("extra 2.mp4", "VOLUME 2"),
        ("lesson 3.mp4", "VOLUME 3"),
    ]
    assert [m.video.path.name for m in result.unmatched] == ["lesson 02.mp4"]
    assert "already paired with extra 2.mp4" in result.unmatched[0].reason


def test_helpers():
    assert trailing_number(_videos("lesson 2.mp4")[0]) == 2
    assert trailing_number(_videos("lesson2.mkv")[0]) == 2
    assert trailing_number(_videos("2 lesson.mp4")[0]) is None
    assert volume_numbers(_volume("Disc 3: Part 10")) == {3, 10}
    assert volume_numbers(_volume("Vol2 2nd cut")) == set()
    assert volume_numbers(_volume("Vol. 007")) == {7}
    assert volume_numbers(Volume(None, (ChapterEntry("A", 0),))) == set()
