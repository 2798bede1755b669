"""DFXP Subtitle Converter — external subtitles for TTML-based players.

WHY: Streaming players that only accept DFXP/TTML caption tracks cannot
load the SubRip files found in public subtitle databases. Those files
also mix SubRip line breaks, HTML formatting tags, and ASS inline
override codes. This package turns such subtitles into a strict,
well-formed DFXP document the player can render.

HOW: Three-stage pipeline: ingest (SRT decoding, OpenSubtitles download),
core (inline markup transcoder + caption document assembler), and
output (formatter, CLI, downloadable resource server). Each stage is
independently testable.

RULES:
- The core is pure: no I/O, no exceptions on malformed cue text
- Every output document is rebuilt from the base cue list (resync never
  patches a previous document)
- The Cue IR is the stable contract between ingest and the core
"""

__version__ = "0.1.0"
