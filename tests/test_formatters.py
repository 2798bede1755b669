"""Tests for filename construction and the DFXP formatter.

WHY: The filename is what users see in their media folder, and the
formatter is shared by the CLI and the server. Both must agree on the
name, the media type, and how the offset is applied.

HOW: Naming helpers are tested directly; the formatter is tested with
the shared sample_track fixture.
"""

import pytest

from dfxp_converter.core.assembler import assemble_dfxp, resync_dfxp
from dfxp_converter.core.ir import Episode, Film, SubtitleTrack
from dfxp_converter.core.naming import (
    build_base_name,
    build_filename,
    content_name,
    zero_pad,
)
from dfxp_converter.formatters import DFXPFormatter, FormatterOutput


# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------


class TestZeroPad:

    @pytest.mark.parametrize("number, expected", [
        (0, "00"),
        (3, "03"),
        (12, "12"),
        (123, "123"),
    ])
    def test_default_width(self, number, expected):
        assert zero_pad(number) == expected

    def test_custom_width(self):
        assert zero_pad(7, width=3) == "007"


class TestContentName:

    def test_film(self):
        assert content_name(Film(title="Heat")) == "Heat"

    def test_episode(self):
        episode = Episode(series_title="Dark", season=1, episode=3)
        assert content_name(episode) == "Dark - S01E03"

    def test_episode_large_numbers(self):
        episode = Episode(series_title="Simpsons", season=32, episode=110)
        assert content_name(episode) == "Simpsons - S32E110"


class TestBuildNames:

    def test_base_name_with_language(self):
        assert build_base_name(Film(title="Heat"), "English") == "Heat - English"

    def test_base_name_without_language(self):
        assert build_base_name(Film(title="Heat"), "") == "Heat"

    def test_filename_appends_extension(self):
        assert build_filename("Heat - English") == "Heat - English.dfxp"


# ---------------------------------------------------------------------------
# DFXPFormatter
# ---------------------------------------------------------------------------


class TestDFXPFormatter:

    def test_name(self):
        assert DFXPFormatter().name == "DFXP Captions"

    def test_output_fields(self, sample_track):
        output = DFXPFormatter().format(sample_track)
        assert isinstance(output, FormatterOutput)
        assert output.filename == "Dark - S01E03 - English.dfxp"
        assert output.media_type == "application/ttml+xml"
        assert output.content == assemble_dfxp(sample_track.cues)

    def test_offset_applied(self, sample_track):
        output = DFXPFormatter().format(sample_track, offset_ms=-500)
        assert output.content == resync_dfxp(sample_track.cues, -500)
        assert 'begin="5000000t"' in output.content

    def test_track_not_modified(self, sample_track):
        before = list(sample_track.cues)
        DFXPFormatter().format(sample_track, offset_ms=2000)
        assert sample_track.cues == before

    def test_default_base_name(self):
        output = DFXPFormatter().format(SubtitleTrack())
        assert output.filename == "subtitles.dfxp"
