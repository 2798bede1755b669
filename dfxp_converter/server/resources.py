"""In-memory store of downloadable subtitle documents with TTL cleanup.

WHY: Each conversion is exposed as a locally-addressable resource (the
server-side counterpart of a browser blob URL). A resync produces a new
document, and the old handle must be released, otherwise repeated
resyncs would accumulate documents without bound.

HOW: Two components work together:
  SubtitleResource — dataclass holding the base track, the applied
                     offset, and the assembled document
  ResourceStore    — thread-safe dict-based store with create/get/list/
                     revoke/resync and TTL cleanup

RULES:
- All store mutations are protected by threading.Lock for thread safety
- Documents are built outside the lock (assembly is pure)
- resync() builds from the *base* cues of the old resource, then swaps
  the new resource in and the old one out in a single locked step
- Resource IDs are UUID4 hex strings generated at creation time
- TTL is measured from created_at; default is 1 hour
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional

from dfxp_converter.config import MAX_RESOURCES, RESOURCE_TTL_SECONDS
from dfxp_converter.core.ir import SubtitleTrack
from dfxp_converter.formatters import DFXPFormatter

logger = logging.getLogger(__name__)


@dataclass
class SubtitleResource:
    """One converted document available for download.

    RULES:
    - id: UUID4 hex, unique and immutable
    - track: base (unshifted) subtitle track
    - offset_ms: resync offset baked into document
    - document / filename / media_type: formatter output
    - created_at: epoch timestamp used for TTL expiry
    """

    id: str
    track: SubtitleTrack
    offset_ms: int
    document: str
    filename: str
    media_type: str
    created_at: float


class ResourceStore:
    """Thread-safe in-memory store for converted subtitle documents.

    RULES:
    - create() raises ValueError when max_resources is reached
    - get() returns None for unknown IDs (no exceptions)
    - revoke() returns False for unknown IDs
    - resync() returns None for unknown IDs
    """

    def __init__(
        self,
        ttl_seconds: int = RESOURCE_TTL_SECONDS,
        max_resources: int = MAX_RESOURCES,
    ) -> None:
        self._resources: Dict[str, SubtitleResource] = {}
        self._lock = threading.Lock()
        self._ttl_seconds = ttl_seconds
        self.max_resources = max_resources
        self._formatter = DFXPFormatter()

    def _build(self, track: SubtitleTrack, offset_ms: int) -> SubtitleResource:
        output = self._formatter.format(track, offset_ms)
        return SubtitleResource(
            id=uuid.uuid4().hex,
            track=track,
            offset_ms=offset_ms,
            document=output.content,
            filename=output.filename,
            media_type=output.media_type,
            created_at=time.time(),
        )

    def create(self, track: SubtitleTrack, offset_ms: int = 0) -> SubtitleResource:
        """Assemble a document for *track* and register it as a new resource."""
        resource = self._build(track, offset_ms)

        with self._lock:
            if len(self._resources) >= self.max_resources:
                raise ValueError(
                    "Maximum number of stored subtitles ({}) reached".format(
                        self.max_resources
                    )
                )
            self._resources[resource.id] = resource

        logger.info("Created resource %s (%s)", resource.id, resource.filename)
        return resource

    def get(self, resource_id: str) -> Optional[SubtitleResource]:
        with self._lock:
            return self._resources.get(resource_id)

    def list_resources(self) -> List[SubtitleResource]:
        """Return all resources, oldest first."""
        with self._lock:
            return sorted(self._resources.values(), key=lambda r: r.created_at)

    def revoke(self, resource_id: str) -> bool:
        """Release a resource handle. Returns True if it existed."""
        with self._lock:
            resource = self._resources.pop(resource_id, None)

        if resource is None:
            return False

        logger.info("Revoked resource %s", resource_id)
        return True

    def resync(self, resource_id: str, offset_ms: int) -> Optional[SubtitleResource]:
        """Replace a resource with a new one rebuilt at *offset_ms*.

        WHY: A resync must never patch the old document. The new one is
        assembled from the base cues, and the old handle is revoked so
        that repeated resyncs keep exactly one live resource.

        RULES:
        - offset_ms is absolute (relative to the base cues), not cumulative
        - Returns None if resource_id is unknown or was revoked meanwhile
        """
        old = self.get(resource_id)
        if old is None:
            return None

        new = self._build(old.track, offset_ms)

        with self._lock:
            if self._resources.pop(resource_id, None) is None:
                return None
            self._resources[new.id] = new

        logger.info(
            "Resynced resource %s -> %s (offset %d ms)", resource_id, new.id, offset_ms
        )
        return new

    def cleanup_expired(self) -> int:
        """Revoke every resource older than the TTL. Returns the count removed."""
        now = time.time()

        with self._lock:
            expired = [
                resource_id
                for resource_id, resource in self._resources.items()
                if now - resource.created_at > self._ttl_seconds
            ]
            for resource_id in expired:
                del self._resources[resource_id]

        for resource_id in expired:
            logger.info("Expired resource %s", resource_id)

        return len(expired)
