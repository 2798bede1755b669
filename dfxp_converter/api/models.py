"""OpenSubtitles record dataclasses.

WHY: OpenSubtitles describes each subtitle file as a flat JSON object
with PascalCase keys. A typed dataclass makes the fields the converter
relies on explicit and catches missing keys at the boundary.

HOW: SubtitleMetadata maps 1:1 to the fields of a search result record.
The from_dict factory handles parsing from the raw dict.

RULES:
- SubDownloadLink points at a gzip-compressed file (".gz" suffix); the
  plain file is served at the same URL without the suffix
- SubEncoding is the uploader's declared encoding and may be unknown to Python
- Only the fields used for download and naming are modelled
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SubtitleMetadata:
    """One subtitle file as listed by OpenSubtitles.

    RULES:
    - sub_file_name: original uploaded filename, e.g. "Movie.2019.srt"
    - download_link: gzip download URL
    - iso639: two-letter language code
    - language_name: display name such as "English"
    - encoding: declared character encoding, e.g. "CP1252"
    """

    sub_file_name: str
    download_link: str
    iso639: str
    language_name: str
    id_subtitle: str
    encoding: str = ""
    sub_format: str = "srt"

    @classmethod
    def from_dict(cls, data: dict) -> SubtitleMetadata:
        """Parse a SubtitleMetadata from an OpenSubtitles record dict.

        RULES:
        - SubFileName, SubDownloadLink, ISO639, LanguageName and
          IDSubtitle are required
        - SubEncoding and SubFormat are optional
        """
        return cls(
            sub_file_name=data["SubFileName"],
            download_link=data["SubDownloadLink"],
            iso639=data["ISO639"],
            language_name=data["LanguageName"],
            id_subtitle=str(data["IDSubtitle"]),
            encoding=data.get("SubEncoding") or "",
            sub_format=data.get("SubFormat") or "srt",
        )
