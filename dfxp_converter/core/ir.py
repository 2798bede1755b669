"""Intermediate representation dataclasses for parsed subtitles.

WHY: SubRip parsers, the OpenSubtitles client, the assembler, and the
HTTP layer all pass subtitles around. A single, well-typed
representation decouples how subtitles are obtained from how they
are converted.

HOW: Four dataclasses:
  Cue           — one timed subtitle entry with raw (unconverted) text
  Film          — content identification for a movie
  Episode       — content identification for a series episode
  SubtitleTrack — the base cue list plus the metadata used for naming

RULES:
- All times are integer milliseconds (no float seconds in the IR)
- Cue text is raw: HTML tags and ASS override codes are kept verbatim
- Cues are immutable; a resync builds new Cue objects
- SubtitleTrack.cues is the *base* list; offsets are applied on output
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass(frozen=True)
class Cue:
    """One timed subtitle entry.

    RULES:
    - start: milliseconds, >= 0 for parsed input (may go negative after a resync)
    - end: milliseconds, > start
    - text: raw cue text, may be empty
    """

    start: int
    end: int
    text: str


@dataclass
class Film:
    """A movie being played, identified by its title."""

    title: str


@dataclass
class Episode:
    """A series episode being played.

    RULES:
    - season and episode are 1-based numbers as shown by the player
    """

    series_title: str
    season: int
    episode: int


ContentInfo = Union[Film, Episode]


@dataclass
class SubtitleTrack:
    """A parsed subtitle file ready for conversion.

    WHY: A resync must always start from the original timings, so the
    base cues are kept together with the naming metadata instead of
    being replaced by shifted copies.

    RULES:
    - cues: base cue list in file order (indices drive xml:id values)
    - language_name: display name such as "English", used for filenames
    - content: what is playing, or None for a plain file upload
    - base_name: filename stem used when content is None
    """

    cues: List[Cue] = field(default_factory=list)
    language_name: str = ""
    content: Optional[ContentInfo] = None
    base_name: str = "subtitles"
