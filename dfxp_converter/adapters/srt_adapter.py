"""SubRip ingest: raw bytes → decoded text → Cue list.

WHY: Subtitle files come from users' disks and from OpenSubtitles in
whatever encoding the uploader used (cp1252, cp1250, koi8-r, ...). They
have to be decoded to text and split into timed cues before the core
can convert them.

HOW: Bytes are decoded with the declared encoding when Python knows it,
otherwise the encoding is guessed with charset_normalizer, falling back
to UTF-8. The decoded text is handed to the ``srt`` library and each
srt.Subtitle becomes a Cue with integer millisecond timings.

RULES:
- Decoding never fails: undecodable bytes become U+FFFD
- Line endings are normalized to "\\n" before parsing
- A file the library rejects, or one with no cues, raises SubtitleDecodeError
- Cue text is kept raw (markup is the transcoder's job)
"""

from __future__ import annotations

import codecs
import logging
from datetime import timedelta
from pathlib import Path
from typing import List, Optional

import srt
from charset_normalizer import from_bytes

from dfxp_converter.core.ir import ContentInfo, Cue, SubtitleTrack
from dfxp_converter.core.naming import build_base_name

logger = logging.getLogger(__name__)

_ONE_MS = timedelta(milliseconds=1)


class SubtitleDecodeError(ValueError):
    """Raised when subtitle text cannot be turned into a non-empty cue list."""


def encoding_exists(encoding: Optional[str]) -> bool:
    """Return True if Python has a codec registered under *encoding*."""
    if not encoding:
        return False
    try:
        codecs.lookup(encoding)
    except LookupError:
        return False
    return True


def decode_subtitle_bytes(data: bytes, encoding: Optional[str] = None) -> str:
    """Decode a subtitle file body to text.

    Args:
        data: Raw file content.
        encoding: Declared encoding (e.g. OpenSubtitles' SubEncoding), or
                  None to detect it.

    Returns:
        The decoded text.
    """
    if encoding_exists(encoding):
        return data.decode(encoding, errors="replace")

    match = from_bytes(data).best()
    if match is not None:
        logger.debug("Detected subtitle encoding %s", match.encoding)
        return str(match)

    return data.decode("utf-8", errors="replace")


def parse_srt(text: str) -> List[Cue]:
    """Parse SubRip text into cues, in file order.

    Raises:
        SubtitleDecodeError: If the text is not valid SubRip or holds no cues.
    """
    normalized = text.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")
    try:
        subtitles = list(srt.parse(normalized))
    except srt.SRTParseError as exc:
        raise SubtitleDecodeError("Could not parse SRT: {}".format(exc)) from exc

    if not subtitles:
        raise SubtitleDecodeError("Decoded SRT was empty.")

    return [
        Cue(
            start=subtitle.start // _ONE_MS,
            end=subtitle.end // _ONE_MS,
            text=subtitle.content,
        )
        for subtitle in subtitles
    ]


def track_from_bytes(
    data: bytes,
    filename: str,
    language_name: str = "",
    content: Optional[ContentInfo] = None,
    encoding: Optional[str] = None,
) -> SubtitleTrack:
    """Decode and parse an SRT file body into a SubtitleTrack.

    Without content metadata the base name is the file name minus its
    ``.srt`` extension; with it, the "<content> - <language>" name is used.

    Raises:
        SubtitleDecodeError: If the file is not usable SubRip.
    """
    cues = parse_srt(decode_subtitle_bytes(data, encoding))

    if content is not None:
        base_name = build_base_name(content, language_name)
    elif filename.lower().endswith(".srt"):
        base_name = filename[:-len(".srt")]
    else:
        base_name = filename

    return SubtitleTrack(
        cues=cues,
        language_name=language_name,
        content=content,
        base_name=base_name,
    )


def load_srt_file(
    path: Path,
    language_name: str = "",
    content: Optional[ContentInfo] = None,
    encoding: Optional[str] = None,
) -> SubtitleTrack:
    """Read an SRT file from disk into a SubtitleTrack."""
    path = Path(path)
    return track_from_bytes(
        path.read_bytes(),
        path.name,
        language_name=language_name,
        content=content,
        encoding=encoding,
    )
