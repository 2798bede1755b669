"""FastAPI application serving converted DFXP subtitles as resources.

WHY: The player integration needs every converted subtitle at a URL it
can hand to the player, plus a way to swap that URL when the user
shifts the timing. This is the HTTP counterpart of creating and revoking
a blob URL in the page.

HOW: POST /subtitles accepts a multipart SRT upload with optional
content/language metadata, converts it, and stores the document in the
ResourceStore. GET .../document serves it with the TTML media type.
POST .../resync rebuilds it at a new offset under a new ID and revokes
the old one. DELETE revokes explicitly.

RULES:
- All endpoints have OpenAPI descriptions on every parameter and response
- Error responses use a consistent ErrorResponse schema
- Only .srt uploads are accepted; undecodable or empty SRT → 422
- Uploads larger than MAX_UPLOAD_BYTES → 413
- Decoding, parsing and assembly run in the threadpool, never on the
  event loop
- The resource store is a module-level singleton
- Documents are downloaded with Content-Disposition: attachment
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Annotated, Optional
from urllib.parse import quote

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from dfxp_converter import __version__
from dfxp_converter.adapters.srt_adapter import SubtitleDecodeError, track_from_bytes
from dfxp_converter.config import MAX_UPLOAD_BYTES, SUPPORTED_SUBTITLE_FORMATS
from dfxp_converter.core.assembler import seconds_to_offset_ms
from dfxp_converter.core.ir import ContentInfo, Episode, Film
from dfxp_converter.server.models import (
    ErrorResponse,
    HealthResponse,
    ResourceResponse,
    ResyncRequest,
)
from dfxp_converter.server.resources import ResourceStore, SubtitleResource

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App and store setup
# ---------------------------------------------------------------------------

resource_store = ResourceStore()


async def _periodic_cleanup() -> None:
    """Expire stale resources every 5 minutes."""
    while True:
        await asyncio.sleep(300)
        resource_store.cleanup_expired()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start periodic cleanup on startup, cancel on shutdown."""
    task = asyncio.create_task(_periodic_cleanup())
    yield
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass


app = FastAPI(
    lifespan=lifespan,
    title="DFXP Subtitle Converter API",
    description=(
        "Converts SubRip subtitles (including HTML tags and ASS override "
        "codes) into Netflix-profile DFXP documents and serves them as "
        "downloadable resources that can be resynced."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _document_url(resource_id: str) -> str:
    return "/subtitles/{}/document".format(resource_id)


def _resource_to_response(resource: SubtitleResource) -> ResourceResponse:
    """Convert an internal SubtitleResource to a ResourceResponse model."""
    return ResourceResponse(
        id=resource.id,
        filename=resource.filename,
        media_type=resource.media_type,
        url=_document_url(resource.id),
        language_name=resource.track.language_name,
        offset=resource.offset_ms / 1000.0,
        cue_count=len(resource.track.cues),
        created_at=resource.created_at,
    )


def _get_or_404(resource_id: str) -> SubtitleResource:
    resource = resource_store.get(resource_id)
    if resource is None:
        raise HTTPException(
            status_code=404,
            detail="Subtitle not found: {}".format(resource_id),
        )
    return resource


def _validate_file_extension(filename: str) -> None:
    """Raise HTTPException if the file extension is not supported."""
    ext = Path(filename).suffix.lower()
    if ext not in SUPPORTED_SUBTITLE_FORMATS:
        raise HTTPException(
            status_code=400,
            detail="Unsupported file type '{}'. Supported formats: {}".format(
                ext, ", ".join(sorted(SUPPORTED_SUBTITLE_FORMATS))
            ),
        )


def _content_from_form(
    title: Optional[str],
    series_title: Optional[str],
    season: Optional[int],
    episode: Optional[int],
) -> Optional[ContentInfo]:
    """Build content identification from form fields, or None if absent."""
    if title:
        return Film(title=title)
    if series_title:
        if season is None or episode is None:
            raise HTTPException(
                status_code=422,
                detail="series_title requires both season and episode",
            )
        return Episode(series_title=series_title, season=season, episode=episode)
    return None


def _convert_upload(
    data: bytes,
    filename: str,
    language_name: str,
    content: Optional[ContentInfo],
    encoding: Optional[str],
    offset_ms: int,
) -> SubtitleResource:
    """Decode, parse and assemble an upload, then store it (blocking)."""
    track = track_from_bytes(
        data,
        filename,
        language_name=language_name,
        content=content,
        encoding=encoding,
    )
    return resource_store.create(track, offset_ms)


def _content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback and an RFC 5987 UTF-8 name."""
    fallback = filename.encode("ascii", "replace").decode("ascii").replace('"', "'")
    return "attachment; filename=\"{}\"; filename*=UTF-8''{}".format(
        fallback, quote(filename)
    )


# ---------------------------------------------------------------------------
# Endpoints: Subtitles
# ---------------------------------------------------------------------------


@app.post(
    "/subtitles",
    response_model=ResourceResponse,
    status_code=201,
    tags=["subtitles"],
    summary="Convert an SRT file to DFXP",
    description=(
        "Upload a SubRip file. It is decoded (encoding detected when not "
        "given), converted to DFXP, and stored. The response carries the "
        "download URL and the suggested filename."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Unsupported file type"},
        413: {"model": ErrorResponse, "description": "File too large"},
        422: {"model": ErrorResponse, "description": "File is not usable SubRip"},
        429: {"model": ErrorResponse, "description": "Too many stored subtitles"},
    },
)
async def create_subtitle(
    file: Annotated[
        UploadFile,
        File(description="SubRip (.srt) file to convert"),
    ],
    language_name: Annotated[
        str,
        Form(description="Subtitle language display name, e.g. 'English'."),
    ] = "",
    title: Annotated[
        Optional[str],
        Form(description="Film title, used for the download filename."),
    ] = None,
    series_title: Annotated[
        Optional[str],
        Form(description="Series title; requires season and episode."),
    ] = None,
    season: Annotated[
        Optional[int],
        Form(description="Season number of the episode."),
    ] = None,
    episode: Annotated[
        Optional[int],
        Form(description="Episode number within the season."),
    ] = None,
    encoding: Annotated[
        Optional[str],
        Form(description="Character encoding of the file. Detected when omitted."),
    ] = None,
    offset: Annotated[
        float,
        Form(description="Initial resync offset in seconds."),
    ] = 0.0,
) -> ResourceResponse:
    # Sanitize filename to prevent path traversal
    filename = Path(file.filename or "upload.srt").name
    _validate_file_extension(filename)

    content = _content_from_form(title, series_title, season, episode)
    data = await file.read(MAX_UPLOAD_BYTES + 1)
    if len(data) > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail="File too large. Maximum size is {} bytes".format(MAX_UPLOAD_BYTES),
        )

    try:
        resource = await run_in_threadpool(
            _convert_upload,
            data,
            filename,
            language_name,
            content,
            encoding,
            seconds_to_offset_ms(offset),
        )
    except SubtitleDecodeError as exc:
        logger.warning("Rejected upload %s: %s", filename, exc)
        raise HTTPException(status_code=422, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=429, detail=str(exc))

    return _resource_to_response(resource)


@app.get(
    "/subtitles/{resource_id}",
    response_model=ResourceResponse,
    tags=["subtitles"],
    summary="Get subtitle resource metadata",
    responses={
        404: {"model": ErrorResponse, "description": "Subtitle not found"},
    },
)
async def get_subtitle(resource_id: str) -> ResourceResponse:
    return _resource_to_response(_get_or_404(resource_id))


@app.get(
    "/subtitles/{resource_id}/document",
    tags=["subtitles"],
    summary="Download the DFXP document",
    description="Returns the converted document as an attachment.",
    responses={
        404: {"model": ErrorResponse, "description": "Subtitle not found"},
    },
)
async def download_subtitle(resource_id: str) -> Response:
    resource = _get_or_404(resource_id)
    return Response(
        content=resource.document.encode("utf-8"),
        media_type=resource.media_type,
        headers={"Content-Disposition": _content_disposition(resource.filename)},
    )


@app.post(
    "/subtitles/{resource_id}/resync",
    response_model=ResourceResponse,
    status_code=201,
    tags=["subtitles"],
    summary="Resync a subtitle",
    description=(
        "Rebuilds the document from the original timings shifted by the "
        "given offset. The result has a new ID; the old one is revoked."
    ),
    responses={
        404: {"model": ErrorResponse, "description": "Subtitle not found"},
    },
)
async def resync_subtitle(resource_id: str, body: ResyncRequest) -> ResourceResponse:
    resource = await run_in_threadpool(
        resource_store.resync, resource_id, seconds_to_offset_ms(body.offset)
    )
    if resource is None:
        raise HTTPException(
            status_code=404,
            detail="Subtitle not found: {}".format(resource_id),
        )
    return _resource_to_response(resource)


@app.delete(
    "/subtitles/{resource_id}",
    status_code=204,
    tags=["subtitles"],
    summary="Revoke a subtitle resource",
    responses={
        404: {"model": ErrorResponse, "description": "Subtitle not found"},
    },
)
async def revoke_subtitle(resource_id: str) -> Response:
    if not resource_store.revoke(resource_id):
        raise HTTPException(
            status_code=404,
            detail="Subtitle not found: {}".format(resource_id),
        )
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Endpoints: Health
# ---------------------------------------------------------------------------


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=__version__,
        resources=len(resource_store.list_resources()),
    )


def run_api(host: str, port: int) -> None:
    """Serve the app with uvicorn."""
    import uvicorn
    uvicorn.run(app, host=host, port=port)
