"""Async HTTP client for downloading subtitle files from OpenSubtitles.

WHY: A subtitle chosen on OpenSubtitles is only a record with a download
link and a declared encoding. The converter needs the decoded SubRip
text behind it, and OpenSubtitles' own re-encoding service is known to
be unreliable, so decoding locally is preferred whenever possible.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. The client is an
async context manager. Enter it to get a configured client, exit to
close the connection pool. download_subtitle() strips the ".gz" suffix
from the link (the server then returns the plain file) and either
decodes the bytes with the declared encoding or, if Python has no codec
for it, asks the server for its UTF-8 re-encoded variant.

RULES:
- Always use the async context manager (async with OpenSubtitlesClient() as client:)
- Known encoding → fetch bytes, decode locally
- Unknown encoding → fetch "download/subencoding-utf8/..." as text
- Non-200 responses raise OpenSubtitlesAPIError
"""

from __future__ import annotations

import logging
import re
from typing import Optional

import httpx

from dfxp_converter.adapters.srt_adapter import (
    decode_subtitle_bytes,
    encoding_exists,
    parse_srt,
)
from dfxp_converter.api.models import SubtitleMetadata
from dfxp_converter.config import OPENSUBTITLES_TIMEOUT_S, OPENSUBTITLES_USER_AGENT
from dfxp_converter.core.ir import ContentInfo, SubtitleTrack
from dfxp_converter.core.naming import build_base_name

logger = logging.getLogger(__name__)

_GZ_SUFFIX_RE = re.compile(r"\.gz$")
_SRT_SUFFIX_RE = re.compile(r"\.srt$")


class OpenSubtitlesAPIError(Exception):
    """Raised when OpenSubtitles returns an error response.

    RULES:
    - Always include status_code and message
    - message is the response body text or a summary
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"OpenSubtitles error {status_code}: {message}")


class OpenSubtitlesClient:
    """Async client for OpenSubtitles file downloads.

    HOW: Wraps httpx.AsyncClient with the configured User-Agent and
    redirect following. ``transport`` lets tests inject an
    httpx.MockTransport.

    RULES:
    - Use as: async with OpenSubtitlesClient() as client: ...
    - user_agent defaults to OPENSUBTITLES_USER_AGENT from config
    """

    def __init__(
        self,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._user_agent = user_agent or OPENSUBTITLES_USER_AGENT
        self._timeout = timeout or OPENSUBTITLES_TIMEOUT_S
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> OpenSubtitlesClient:
        self._client = httpx.AsyncClient(
            headers={"User-Agent": self._user_agent},
            timeout=httpx.Timeout(self._timeout, connect=30.0),
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "OpenSubtitlesClient must be used as an async context manager: "
                "async with OpenSubtitlesClient() as client: ..."
            )
        return self._client

    async def _get(self, url: str) -> httpx.Response:
        client = self._ensure_client()
        resp = await client.get(url)
        if resp.status_code != 200:
            raise OpenSubtitlesAPIError(resp.status_code, resp.text)
        return resp

    async def download_subtitle(self, metadata: SubtitleMetadata) -> str:
        """Download a subtitle file and return its decoded text.

        Args:
            metadata: The OpenSubtitles record of the file to fetch.

        Returns:
            The subtitle file content as text.
        """
        srt_url = _GZ_SUFFIX_RE.sub("", metadata.download_link)

        if encoding_exists(metadata.encoding):
            logger.info(
                "Downloading subtitle %s (%s)", metadata.id_subtitle, metadata.encoding
            )
            resp = await self._get(srt_url)
            return decode_subtitle_bytes(resp.content, metadata.encoding)

        logger.info(
            "Unknown encoding %r for subtitle %s, requesting UTF-8 variant",
            metadata.encoding,
            metadata.id_subtitle,
        )
        utf8_url = srt_url.replace("download/", "download/subencoding-utf8/", 1)
        resp = await self._get(utf8_url)
        return resp.text

    async def download_track(
        self,
        metadata: SubtitleMetadata,
        content: Optional[ContentInfo] = None,
    ) -> SubtitleTrack:
        """Download, decode, and parse a subtitle into a SubtitleTrack.

        The base name is "<content> - <language>" when content is known,
        otherwise the uploaded file name without its ".srt" extension.

        Raises:
            OpenSubtitlesAPIError: On a failed download.
            SubtitleDecodeError: If the file is not usable SubRip.
        """
        text = await self.download_subtitle(metadata)
        cues = parse_srt(text)

        if content is not None:
            base_name = build_base_name(content, metadata.language_name)
        else:
            base_name = _SRT_SUFFIX_RE.sub("", metadata.sub_file_name)

        return SubtitleTrack(
            cues=cues,
            language_name=metadata.language_name,
            content=content,
            base_name=base_name,
        )
