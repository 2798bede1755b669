"""DFXP caption document assembly, tick conversion, and resync.

WHY: The player consumes a complete TTML document in Netflix's DFXP
profile, not individual cues. This module wraps a cue list into that
document: fixed head (profile, one style, two regions) followed by one
<p> per cue whose content comes from the inline markup transcoder.

HOW: Timestamps are expressed in ticks (ttp:tickRate 10,000,000 per
second, i.e. 10,000 ticks per millisecond) with a "t" suffix. A resync
builds shifted copies of the base cues and re-assembles from scratch;
previous documents are never patched.

RULES:
- Cues with empty text are skipped entirely (no empty <p>)
- xml:id is "subtitle<N>" where N is the cue's index in the *input* list,
  so ids stay stable when some cues are skipped
- Tick values are rounded half-up to the nearest integer
- Resync offsets are applied as-is: no clamping of negative timestamps
- assemble_dfxp() is pure and idempotent
"""

from __future__ import annotations

import dataclasses
import math
from typing import Iterable, List

from dfxp_converter.core.ir import Cue
from dfxp_converter.core.transcoder import convert

TICK_RATE = 10_000_000
"""Ticks per second declared in the document (ttp:tickRate)."""

TICKS_PER_MS = TICK_RATE // 1000

DFXP_HEADER = """<?xml version="1.0" encoding="UTF-8" standalone="no"?>
<tt xmlns:tt="http://www.w3.org/ns/ttml" xmlns:ttm="http://www.w3.org/ns/ttml#metadata" xmlns:ttp="http://www.w3.org/ns/ttml#parameter" xmlns:tts="http://www.w3.org/ns/ttml#styling" ttp:tickRate="10000000" ttp:timeBase="media" xmlns="http://www.w3.org/ns/ttml">
<head>
<ttp:profile use="http://netflix.com/ttml/profile/dfxp-ls-sdh"/>
<styling>
<style tts:backgroundColor="transparent" tts:textAlign="center" xml:id="style0"/>
</styling>
<layout>
<region tts:displayAlign="after" xml:id="region0"/>
<region tts:displayAlign="before" xml:id="region1"/>
</layout>
</head>
<body>
<div xml:space="preserve">"""

DFXP_FOOTER = """
</div>
</body>
</tt>"""

_CUE_TEMPLATE = (
    '\n<p begin="{begin}" end="{end}" region="region0" style="style0" '
    'tts:extent="80.00% 80.00%" tts:origin="10.00% 10.00%" '
    'xml:id="subtitle{index}">{content}</p>'
)


def ms_to_ticks(ms: float) -> str:
    """Convert milliseconds to a DFXP tick timestamp, e.g. 1500 → "15000000t"."""
    return "{}t".format(math.floor(ms * TICKS_PER_MS + 0.5))


def assemble_dfxp(cues: Iterable[Cue]) -> str:
    """Build a complete DFXP document from a cue list.

    Args:
        cues: Cues in display order. Their position determines xml:id.

    Returns:
        The document as a string. A list with no non-empty cues yields a
        valid, captionless document.
    """
    parts = [DFXP_HEADER]
    for index, cue in enumerate(cues):
        if not cue.text:
            continue
        parts.append(_CUE_TEMPLATE.format(
            begin=ms_to_ticks(cue.start),
            end=ms_to_ticks(cue.end),
            index=index,
            content=convert(cue.text),
        ))
    parts.append(DFXP_FOOTER)
    return "".join(parts)


def resync_cues(cues: Iterable[Cue], offset_ms: int) -> List[Cue]:
    """Return new cues with start and end shifted by *offset_ms*.

    A negative offset moves subtitles earlier. Resulting timestamps may
    be negative; they are passed through unchanged.
    """
    return [
        dataclasses.replace(cue, start=cue.start + offset_ms, end=cue.end + offset_ms)
        for cue in cues
    ]


def resync_dfxp(cues: Iterable[Cue], offset_ms: int) -> str:
    """Shift the base cues by *offset_ms* and assemble a fresh document."""
    return assemble_dfxp(resync_cues(cues, offset_ms))


def seconds_to_offset_ms(seconds: float) -> int:
    """Convert a user-facing resync offset in seconds to whole milliseconds."""
    return math.floor(seconds * 1000 + 0.5)
