"""Tests for whole-file chapter parsing."""

from __future__ import annotations

import textwrap

import pytest

from chapter_split.chapterer import (
    finalize_volume,
    parse_chapter_file,
    parse_chapter_text,
    parse_single_volume,
)
from chapter_split.chronology import ChronologyStatus
from chapter_split.errors import ChapterFileNotFound, MalformedTimestamp
from chapter_split.models import ChapterEntry, Volume


def _text(s: str) -> str:
    return textwrap.dedent(s).strip("\n")


def _pairs(volume):
    return [(c.title, c.start_seconds) for c in volume.chapters]


def test_no_headers_is_one_volume_named_chapters_with_intro():
    parsed = parse_chapter_text(
        _text(
            """
            1:13 Grip Fighting
            3:40 Collar Drag
            2:05 Arm Drag
            """
        )
    )
    assert len(parsed.volumes) == 1
    volume = parsed.volumes[0]
    assert volume.name == "chapters"
    assert _pairs(volume) == [
        ("Intro", 0),
        ("Grip Fighting", 73),
        ("Arm Drag", 125),
        ("Collar Drag", 220),
    ]
    assert volume.chapters[0].source_token is None


def test_no_intro_when_file_starts_at_zero():
    parsed = parse_chapter_text("0:00 Welcome\n1:00 Basics")
    assert _pairs(parsed.volumes[0]) == [("Welcome", 0), ("Basics", 60)]


def test_multi_volume_split_on_headers():
    parsed = parse_chapter_text(
        _text(
            """
            VOLUME 1
            Intro To Armbars\t0
            1:23 Top Juji Vs Bottom Juji
            Notes about the instructional go here

            VOLUME 2
            0:45 Belly Down Armbar
            Overview 4:52 - 7:23
            """
        )
    )
    assert [v.name for v in parsed.volumes] == ["VOLUME 1", "VOLUME 2"]
    assert _pairs(parsed.volumes[0]) == [("Intro To Armbars", 0), ("Top Juji Vs Bottom Juji", 83)]
    assert _pairs(parsed.volumes[1]) == [
        ("Intro", 0),
        ("Belly Down Armbar", 45),
        ("Overview", 292),
    ]
    assert parsed.issues == ()


def test_chapters_before_first_header_form_unnamed_volume():
    parsed = parse_chapter_text("0:00 Welcome\nVol 2\n0:30 Drill")
    assert [v.name for v in parsed.volumes] == [None, "Vol 2"]


def test_header_without_chapters_is_replaced():
    parsed = parse_chapter_text("Disc 1\nDisc 2\n0:10 Start")
    assert [v.name for v in parsed.volumes] == ["Disc 2"]


def test_trailing_header_without_chapters_dropped():
    parsed = parse_chapter_text("Part 1\n0:10 Start\nPart 2")
    assert [v.name for v in parsed.volumes] == ["Part 1"]


def test_bare_number_header():
    parsed = parse_chapter_text("1\n0:00 A\n2\n0:00 B")
    assert [v.name for v in parsed.volumes] == ["1", "2"]


def test_empty_file_is_empty_result():
    parsed = parse_chapter_text("just some text\n\n")
    assert parsed.is_empty
    assert parsed.chapter_count == 0


def test_duplicate_titles_allowed():
    parsed = parse_chapter_text("0:00 Drill\n1:00 Drill")
    assert [c.title for c in parsed.volumes[0].chapters] == ["Drill", "Drill"]


def test_equal_starts_keep_file_order():
    parsed = parse_chapter_text("0:00 A\n1:00 B\n1:00 C")
    assert [c.title for c in parsed.volumes[0].chapters] == ["A", "B", "C"]


def test_volume_repaired_per_volume():
    parsed = parse_chapter_text(
        _text(
            """
            Volume 1
            0.00.00 Intro
            16.44.12 Sweeps
            17.02.00 Passing
            Volume 2
            0:00 Intro
            1:10:05 Long One
            """
        )
    )
    assert _pairs(parsed.volumes[0]) == [("Intro", 0), ("Sweeps", 1004), ("Passing", 1022)]
    assert _pairs(parsed.volumes[1]) == [("Intro", 0), ("Long One", 4205)]
    assert parsed.issues == ()


def test_ambiguous_volume_reported_and_sorted():
    parsed = parse_chapter_text("Volume 3\n5:00 A\n2:00 B\n9:00 C")
    volume = parsed.volumes[0]
    assert _pairs(volume) == [("Intro", 0), ("B", 120), ("A", 300), ("C", 540)]
    assert len(parsed.issues) == 1
    issue = parsed.issues[0]
    assert issue.kind == "chronology_ambiguous"
    assert issue.text == "2:00 B"
    assert "'Volume 3'" in issue.message


def test_ambiguous_without_headers_names_offending_chapter():
    parsed = parse_chapter_text("5:00 A\n2:00 B\n9:00 C\n")
    assert [i.text for i in parsed.issues] == ["2:00 B"]


def test_ambiguous_before_first_header_names_offending_chapter():
    parsed = parse_chapter_text("5:00 A\n2:00 B\nVolume 2\n0:00 C\n")
    assert [i.text for i in parsed.issues] == ["2:00 B"]
    assert "before the first header" in parsed.issues[0].message


def test_malformed_line_recorded_and_skipped(monkeypatch):
    from chapter_split import chapterer

    real = chapterer.parse_chapter_line

    def fake(line):
        if "bad" in line:
            raise MalformedTimestamp("1:2:3:4:5")
        return real(line)

    monkeypatch.setattr(chapterer, "parse_chapter_line", fake)
    parsed = chapterer.parse_chapter_text("0:00 Good\n1:00 bad line\n2:00 Also good")

    assert [c.title for c in parsed.volumes[0].chapters] == ["Good", "Also good"]
    assert len(parsed.issues) == 1
    issue = parsed.issues[0]
    assert issue.kind == "malformed_timestamp"
    assert issue.line_number == 2
    assert issue.text == "1:00 bad line"


def test_single_volume_ignores_headers_and_takes_name():
    parsed = parse_single_volume("Armbar Masterclass\n0:30 A\nVolume 2\n1:00 B")
    assert len(parsed.volumes) == 1
    volume = parsed.volumes[0]
    assert volume.name == "Armbar Masterclass"
    assert _pairs(volume) == [("Intro", 0), ("A", 30), ("B", 60)]


def test_single_volume_default_name():
    parsed = parse_single_volume("0:30 A\n1:00 B")
    assert parsed.volumes[0].name == "chapters"


def test_single_volume_empty():
    assert parse_single_volume("Title only").is_empty


def test_finalize_volume():
    entries = [ChapterEntry("B", 90, "1:30"), ChapterEntry("A", 30, "0:30")]
    volume, status = finalize_volume("V", entries)
    assert status is ChronologyStatus.AMBIGUOUS
    assert _pairs(volume) == [("Intro", 0), ("A", 30), ("B", 90)]


def test_volume_rejects_invalid_chapters():
    with pytest.raises(ValueError):
        Volume(name="x", chapters=())
    with pytest.raises(ValueError):
        Volume(name="x", chapters=(ChapterEntry("A", 5),))
    with pytest.raises(ValueError):
        Volume(name="x", chapters=(ChapterEntry("A", 0), ChapterEntry("B", 9), ChapterEntry("C", 3)))


def test_chapter_entry_rejects_negative_start():
    with pytest.raises(ValueError):
        ChapterEntry("A", -1)


def test_parse_chapter_file(tmp_path):
    path = tmp_path / "timestamps.txt"
    path.write_text("\ufeff1:13 Grip Fighting\n", encoding="utf-8")
    parsed = parse_chapter_file(path)
    assert _pairs(parsed.volumes[0]) == [("Intro", 0), ("Grip Fighting", 73)]


def test_parse_chapter_file_missing(tmp_path):
    with pytest.raises(ChapterFileNotFound):
        parse_chapter_file(tmp_path / "nope.txt")
    with pytest.raises(FileNotFoundError):
        parse_chapter_file(tmp_path / "nope.txt")


def test_to_dict():
    parsed = parse_chapter_text("VOLUME 1\n1:00 A")
    assert parsed.to_dict() == {
        "volumes": [{"name": "VOLUME 1", "chapters": [["Intro", 0], ["A", 60]]}],
        "issues": [],
    }
