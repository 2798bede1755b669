"""Tests for SubRip decoding and parsing.

WHY: Every conversion starts here. A wrong codec turns accented text
into mojibake, and a misparsed timestamp shifts a cue for good.

HOW: Tests feed the shared SAMPLE_SRT through each entry point (text,
bytes, file) and compare against SRT_CUES. Encoding detection is only
exercised with UTF-8 input; legacy codepages are tested with an
explicit encoding.

RULES:
- No network access; files are written to tmp_path
"""

import pytest

from dfxp_converter.adapters.srt_adapter import (
    SubtitleDecodeError,
    decode_subtitle_bytes,
    encoding_exists,
    load_srt_file,
    parse_srt,
    track_from_bytes,
)
from dfxp_converter.core.ir import Cue, Episode, Film


class TestEncodingExists:

    @pytest.mark.parametrize("name", ["utf-8", "CP1252", "koi8-r", "latin-1"])
    def test_known(self, name):
        assert encoding_exists(name)

    @pytest.mark.parametrize("name", [None, "", "no-such-codec"])
    def test_unknown(self, name):
        assert not encoding_exists(name)


class TestDecodeSubtitleBytes:

    def test_explicit_encoding(self, sample_srt, sample_srt_cp1252):
        assert decode_subtitle_bytes(sample_srt_cp1252, "cp1252") == sample_srt

    def test_detects_utf8(self, sample_srt):
        text = decode_subtitle_bytes(sample_srt.encode("utf-8"))
        assert "Café & crème" in text

    def test_unknown_encoding_falls_back_to_detection(self):
        assert decode_subtitle_bytes(b"Hello world", "no-such-codec") == "Hello world"

    def test_invalid_bytes_replaced(self):
        text = decode_subtitle_bytes(b"abc\xffdef", "utf-8")
        assert text == "abc\ufffddef"


class TestParseSrt:

    def test_sample(self, sample_srt, srt_cues):
        assert parse_srt(sample_srt) == srt_cues

    def test_crlf_line_endings(self, sample_srt, srt_cues):
        assert parse_srt(sample_srt.replace("\n", "\r\n")) == srt_cues

    def test_byte_order_mark_stripped(self, sample_srt, srt_cues):
        assert parse_srt("\ufeff" + sample_srt) == srt_cues

    def test_multiline_text_kept_raw(self, sample_srt):
        cue = parse_srt(sample_srt)[1]
        assert cue.text == "<i>Where are we?</i>\n{\\b1}Nowhere{\\b0}."

    def test_millisecond_timings(self):
        cues = parse_srt("1\n01:02:03,456 --> 01:02:04,000\nx\n")
        assert cues == [Cue(start=3723456, end=3724000, text="x")]

    def test_empty_raises(self):
        with pytest.raises(SubtitleDecodeError, match="empty"):
            parse_srt("")

    def test_garbage_raises(self):
        with pytest.raises(SubtitleDecodeError):
            parse_srt("this is not a subtitle file")


class TestTrackFromBytes:

    def test_base_name_from_filename(self, sample_srt):
        track = track_from_bytes(sample_srt.encode("utf-8"), "Movie.2019.SRT")
        assert track.base_name == "Movie.2019"
        assert track.content is None

    def test_filename_without_extension(self, sample_srt):
        track = track_from_bytes(sample_srt.encode("utf-8"), "subs")
        assert track.base_name == "subs"

    def test_base_name_from_content(self, sample_srt_cp1252, srt_cues):
        track = track_from_bytes(
            sample_srt_cp1252,
            "whatever.srt",
            language_name="French",
            content=Episode(series_title="Dark", season=2, episode=10),
            encoding="cp1252",
        )
        assert track.base_name == "Dark - S02E10 - French"
        assert track.language_name == "French"
        assert track.cues == srt_cues

    def test_empty_file_raises(self):
        with pytest.raises(SubtitleDecodeError):
            track_from_bytes(b"", "empty.srt")


class TestLoadSrtFile:

    def test_reads_from_disk(self, tmp_path, sample_srt_cp1252, srt_cues):
        path = tmp_path / "Heat.srt"
        path.write_bytes(sample_srt_cp1252)
        track = load_srt_file(
            path,
            language_name="English",
            content=Film(title="Heat"),
            encoding="cp1252",
        )
        assert track.cues == srt_cues
        assert track.base_name == "Heat - English"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_srt_file(tmp_path / "missing.srt")
