"""Output container shared by formatters.

WHY: The CLI writes converted subtitles to disk and the server hands
them out as downloads. Both need the same three things: the content,
a suggested filename, and the MIME type.

RULES:
- filename is complete (base name + extension), never a path
- media_type identifies the captioning format, e.g. "application/ttml+xml"
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        filename: Suggested download filename, e.g. ``"Movie - English.dfxp"``.
        content: The file content.
        media_type: MIME type for the content.
    """

    filename: str
    content: str
    media_type: str
