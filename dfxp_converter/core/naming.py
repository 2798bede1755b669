"""Download filename construction for converted subtitles.

WHY: Users keep the converted file next to their media library, so the
name has to say what it is for: the title (or series + episode) and the
subtitle language.

RULES:
- Film: "<title>"
- Episode: "<series> - S<season:02>E<episode:02>"
- Base name: "<content name> - <language name>" (just the content name
  when the language is unknown)
- Filename: base name + ".dfxp"
"""

from __future__ import annotations

from dfxp_converter.core.ir import ContentInfo, Episode

DFXP_EXTENSION = ".dfxp"
DFXP_MEDIA_TYPE = "application/ttml+xml"


def zero_pad(number: int, width: int = 2) -> str:
    """Left-pad *number* with zeros to at least *width* digits."""
    return str(number).rjust(width, "0")


def content_name(content: ContentInfo) -> str:
    if isinstance(content, Episode):
        return "{} - S{}E{}".format(
            content.series_title,
            zero_pad(content.season),
            zero_pad(content.episode),
        )
    return content.title


def build_base_name(content: ContentInfo, language_name: str) -> str:
    name = content_name(content)
    if not language_name:
        return name
    return "{} - {}".format(name, language_name)


def build_filename(base_name: str) -> str:
    return base_name + DFXP_EXTENSION
