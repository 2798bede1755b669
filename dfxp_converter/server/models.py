"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation.

HOW: Each endpoint's body or response has its own model. All models
include Field descriptions for rich OpenAPI docs.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Offsets cross the API in seconds (float), matching what users type
- Response models never expose the document body (download it instead)
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ResyncRequest(BaseModel):
    """Body of POST /subtitles/{id}/resync."""

    offset: float = Field(
        description=(
            "Resync offset in seconds relative to the original timings. "
            "Negative values show subtitles earlier."
        ),
    )


class ResourceResponse(BaseModel):
    """A converted subtitle document available for download.

    RULES:
    - url is relative to the server root
    - offset is the absolute resync offset in seconds
    """

    id: str = Field(description="Unique resource identifier.")
    filename: str = Field(description="Suggested download filename.")
    media_type: str = Field(description="MIME type of the document.")
    url: str = Field(description="Path at which the document can be downloaded.")
    language_name: str = Field(description="Subtitle language display name.")
    offset: float = Field(description="Applied resync offset in seconds.")
    cue_count: int = Field(description="Number of cues in the source subtitle.")
    created_at: float = Field(description="Creation timestamp (Unix epoch seconds).")

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "id": "550e8400e29b41d4a716446655440000",
                "filename": "Dark - S01E03 - English.dfxp",
                "media_type": "application/ttml+xml",
                "url": "/subtitles/550e8400e29b41d4a716446655440000/document",
                "language_name": "English",
                "offset": -1.5,
                "cue_count": 812,
                "created_at": 1739959200.0,
            }
        ]
    }}


class ErrorResponse(BaseModel):
    """Standard error response body."""

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
    resources: Optional[int] = Field(
        default=None,
        description="Number of live subtitle resources.",
    )
