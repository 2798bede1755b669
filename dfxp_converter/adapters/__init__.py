"""Adapter modules for converting external subtitle formats into the IR.

WHY: The converter core only understands Cue objects. Subtitle files
arrive as raw bytes in arbitrary encodings and in SubRip syntax, which
is handled by the third-party ``srt`` library. Adapters bridge these
representations so each side can evolve independently.

RULES:
- SubRip syntax parsing is delegated to ``srt``; adapters only map types
- Adapters must not apply any styling or timing changes
"""

from dfxp_converter.adapters.srt_adapter import (
    SubtitleDecodeError,
    decode_subtitle_bytes,
    load_srt_file,
    parse_srt,
    track_from_bytes,
)

__all__ = [
    "SubtitleDecodeError",
    "decode_subtitle_bytes",
    "load_srt_file",
    "parse_srt",
    "track_from_bytes",
]
