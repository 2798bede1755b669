"""Configuration constants and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. Server limits, OpenSubtitles endpoints, and
logging defaults are plain module-level values, not buried in logic.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level strings, ints, and sets. Every value can be overridden
via an environment variable of the same name.

RULES:
- SUPPORTED_SUBTITLE_FORMATS lists accepted upload extensions
- OpenSubtitles settings are only used by the download client
- RESOURCE_TTL_SECONDS / MAX_RESOURCES bound the server's in-memory store
- MAX_UPLOAD_BYTES caps the size of one uploaded subtitle file
- The core (transcoder, assembler) never reads configuration
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Input formats
# ---------------------------------------------------------------------------

SUPPORTED_SUBTITLE_FORMATS: set[str] = {".srt"}
"""Subtitle file extensions accepted for conversion (lowercase, with dot)."""

# ---------------------------------------------------------------------------
# OpenSubtitles download defaults
# ---------------------------------------------------------------------------

OPENSUBTITLES_USER_AGENT = os.getenv(
    "OPENSUBTITLES_USER_AGENT", "dfxp-converter v0.1.0"
)
OPENSUBTITLES_TIMEOUT_S = float(os.getenv("OPENSUBTITLES_TIMEOUT_S", "60"))

# ---------------------------------------------------------------------------
# Resource server
# ---------------------------------------------------------------------------

RESOURCE_TTL_SECONDS = int(os.getenv("RESOURCE_TTL_SECONDS", "3600"))
MAX_RESOURCES = int(os.getenv("MAX_RESOURCES", "100"))
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))
DFXP_SERVER_HOST = os.getenv("DFXP_SERVER_HOST", "127.0.0.1")
DFXP_SERVER_PORT = int(os.getenv("DFXP_SERVER_PORT", "8000"))

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING").upper()
