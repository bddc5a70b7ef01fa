from pathlib import Path

import pytest

from transcript_pipeline.caption_filter import (
    clean_caption_file,
    filter_lines,
    is_discarded,
    is_subtitle_file,
    read_caption_lines,
)
from transcript_pipeline.errors import ReadFailureError


VTT_SAMPLE = """WEBVTT
Kind: captions
Language: en

NOTE This is a comment

1
00:00:01.000 --> 00:00:02.000 align:start position:0%
Hello and welcome.

2
00:00:02.500 --> 00:00:04.000
[music]
<i>In this course</i>
  we will learn Python.  
"""

SRT_SAMPLE = """1
00:00:01,000 --> 00:00:02,000
First line

2
0:00:03,000 --> 0:00:05,000
Second line
continues here
"""


def test_vtt_keeps_only_spoken_text():
    assert filter_lines(VTT_SAMPLE.splitlines()) == ["Hello and welcome.", "we will learn Python."]


def test_srt_keeps_only_spoken_text():
    assert filter_lines(SRT_SAMPLE.splitlines()) == ["First line", "Second line", "continues here"]


def test_noise_lines_are_discarded():
    for line in [
        "WEBVTT",
        "NOTE",
        "NOTE some comment",
        "STYLE",
        "00:00:01.000 --> 00:00:02.000",
        "1:02:03,456 --> 1:02:04,000",
        "42",
        "",
        "   ",
        "Kind: captions",
        "Language: en",
        "[APPLAUSE]",
        "[laughs] [music]",
        "<b>text</b>",
        "<c.yellow>",
    ]:
        assert is_discarded(line), line


def test_spoken_lines_are_kept():
    for line in [
        "webvtt",
        "WEBVTT is a format",
        "NOTED, thanks",
        "12 apples",
        "At 10:00:00 we start",
        "Say [music] please",
        "<b>bold</b> and plain text after",
        "He said <wow>!",
        "Kind of interesting",
    ]:
        assert not is_discarded(line), line


def test_discard_depends_only_on_trimmed_text():
    assert is_discarded("   [music]   ") == is_discarded("[music]")
    assert is_discarded("\t123\t") == is_discarded("123")


def test_filter_is_idempotent():
    once = filter_lines(VTT_SAMPLE.splitlines())
    assert filter_lines(once) == once


def test_lines_are_not_transformed_beyond_trim():
    assert filter_lines(["  Hello, World!  ", "MiXeD case..."]) == ["Hello, World!", "MiXeD case..."]


def test_subtitle_extensions_are_case_insensitive():
    assert is_subtitle_file(Path("a/Lecture.VTT"))
    assert is_subtitle_file(Path("lecture.Srt"))
    assert not is_subtitle_file(Path("lecture.txt"))


def test_read_caption_lines_strips_bom(tmp_path):
    path = tmp_path / "bom.vtt"
    path.write_bytes(b"\xef\xbb\xbfWEBVTT\n\nHi there\n")
    assert read_caption_lines(path) == ["WEBVTT", "", "Hi there"]


def test_read_caption_lines_raises_read_failure(tmp_path):
    missing = tmp_path / "missing.srt"
    with pytest.raises(ReadFailureError) as exc:
        read_caption_lines(missing)
    assert exc.value.path == missing
    assert isinstance(exc.value.cause, OSError)


def test_clean_caption_file_yields_nothing_for_undecodable_file(tmp_path):
    path = tmp_path / "broken.srt"
    path.write_bytes(b"1\n00:00:01,000 --> 00:00:02,000\n\xff\xfe\xfa bad\n")
    assert clean_caption_file(path) == []


def test_clean_caption_file_logs_the_unreadable_path(tmp_path, caplog):
    path = tmp_path / "broken.vtt"
    path.write_bytes(b"WEBVTT\n\n\xff bad\n")
    clean_caption_file(path)
    assert str(path) in caplog.text
