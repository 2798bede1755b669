"""Output formatters for converted subtitles.

WHY: The CLI and the HTTP server both need the converted document packaged
with a filename and MIME type. Formatters own that packaging so neither
caller reaches into the core directly.

RULES:
- Formatters consume a SubtitleTrack and never mutate it
- Every formatter must be importable without side effects
"""

from dfxp_converter.formatters.base import FormatterOutput
from dfxp_converter.formatters.dfxp import DFXPFormatter

__all__ = ["DFXPFormatter", "FormatterOutput"]
