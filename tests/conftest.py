"""Shared test fixtures for the dfxp_converter test suite.

WHY: Several test modules need the same sample subtitle: a short SubRip
file mixing plain text, HTML tags, and ASS override codes. Centralizing
it here keeps expectations consistent across modules.

HOW: Pytest fixtures provide the raw SRT text, the same file encoded in
a legacy codepage, the parsed Cue list, a cue list with an empty cue,
and a SubtitleTrack.

RULES:
- SRT_CUES matches SAMPLE_SRT exactly (timings in milliseconds)
- SAMPLE_CUES has an empty third cue on purpose (skipped by the assembler)
"""

from typing import List

import pytest

from dfxp_converter.core.ir import Cue, Episode, SubtitleTrack


SAMPLE_SRT = (
    "1\n"
    "00:00:01,000 --> 00:00:02,500\n"
    "Hello there.\n"
    "\n"
    "2\n"
    "00:00:03,000 --> 00:00:04,000\n"
    "<i>Where are we?</i>\n"
    "{\\b1}Nowhere{\\b0}.\n"
    "\n"
    "3\n"
    "00:00:07,250 --> 00:00:09,000\n"
    "Café & crème\n"
)

SRT_CUES: List[Cue] = [
    Cue(start=1000, end=2500, text="Hello there."),
    Cue(start=3000, end=4000, text="<i>Where are we?</i>\n{\\b1}Nowhere{\\b0}."),
    Cue(start=7250, end=9000, text="Café & crème"),
]

SAMPLE_CUES: List[Cue] = [
    Cue(start=1000, end=2500, text="Hello there."),
    Cue(start=3000, end=4000, text="<i>Where are we?</i>\n{\\b1}Nowhere{\\b0}."),
    Cue(start=5000, end=6000, text=""),
    Cue(start=7250, end=9000, text="Café & crème"),
]


@pytest.fixture
def sample_srt() -> str:
    return SAMPLE_SRT


@pytest.fixture
def sample_srt_cp1252() -> bytes:
    """The sample file as a Windows-1252 encoded upload."""
    return SAMPLE_SRT.encode("cp1252")


@pytest.fixture
def srt_cues() -> List[Cue]:
    return list(SRT_CUES)


@pytest.fixture
def sample_cues() -> List[Cue]:
    return list(SAMPLE_CUES)


@pytest.fixture
def sample_track() -> SubtitleTrack:
    return SubtitleTrack(
        cues=list(SAMPLE_CUES),
        language_name="English",
        content=Episode(series_title="Dark", season=1, episode=3),
        base_name="Dark - S01E03 - English",
    )
