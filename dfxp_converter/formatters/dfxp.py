"""DFXP formatter — a SubtitleTrack rendered as a downloadable DFXP file.

WHY: Every consumer (CLI, resource server) needs the same packaging of
the assembled document: resync applied, filename computed, MIME type
set. Keeping it in one place keeps both outputs identical.

HOW: Shifts the track's base cues by the offset, assembles the DFXP
document, and names it "<base name>.dfxp".

RULES:
- Never modifies the SubtitleTrack (the base cues stay unshifted)
- Media type is always "application/ttml+xml"
"""

from __future__ import annotations

from dfxp_converter.core.assembler import resync_dfxp
from dfxp_converter.core.ir import SubtitleTrack
from dfxp_converter.core.naming import DFXP_MEDIA_TYPE, build_filename
from dfxp_converter.formatters.base import FormatterOutput


class DFXPFormatter:
    """Formatter that produces a Netflix-profile DFXP caption file."""

    @property
    def name(self) -> str:
        return "DFXP Captions"

    def format(self, track: SubtitleTrack, offset_ms: int = 0) -> FormatterOutput:
        """Convert a SubtitleTrack into a DFXP file.

        Args:
            track: The parsed subtitle with its naming metadata.
            offset_ms: Resync offset applied to every cue.

        Returns:
            The DFXP document with its filename and media type.
        """
        return FormatterOutput(
            filename=build_filename(track.base_name),
            content=resync_dfxp(track.cues, offset_ms),
            media_type=DFXP_MEDIA_TYPE,
        )
