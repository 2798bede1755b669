"""OpenSubtitles download package — async HTTP access to subtitle files.

WHY: Subtitles found on OpenSubtitles have to be fetched and decoded
before they can be converted. This package encapsulates that HTTP
traffic behind one async client class.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. Records describing
subtitle files are parsed into the dataclasses defined in models.py.

RULES:
- All HTTP calls go through OpenSubtitlesClient (no direct httpx usage elsewhere)
- Search and login are not part of this package; callers supply records
"""

from dfxp_converter.api.client import OpenSubtitlesAPIError, OpenSubtitlesClient
from dfxp_converter.api.models import SubtitleMetadata

__all__ = ["OpenSubtitlesAPIError", "OpenSubtitlesClient", "SubtitleMetadata"]
