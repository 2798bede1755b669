"""HTTP resource server for converted subtitles.

WHY: A player-side integration needs each converted document at a
fetchable URL, and needs to swap that URL when the user resyncs.

RULES:
- Documents live in memory only; handles are revoked explicitly or by TTL
- A resync always yields a new handle; the previous one is revoked
"""
