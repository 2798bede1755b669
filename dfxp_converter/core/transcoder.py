"""Inline markup transcoder: SRT/HTML/ASS cue text → TTML inline markup.

WHY: Subtitle files from public databases are rarely clean SubRip. Cue
text mixes SubRip line breaks, HTML-ish formatting tags (<i>, <b>, <u>,
<s>, <font color>) and ASS inline override blocks ({\\b1}, {\\c&HFF&}),
often unbalanced. The player's TTML renderer rejects anything that is
not well-formed XML, so every cue must be rewritten into strictly valid
<span>/<br/> markup with the same visual styling.

HOW: ASS override blocks are first rewritten as self-closing <ass cmd="...">
pseudo-tags so that both dialects flow through one lenient streaming
tokenizer (html.parser). A StyleState tracks tag nesting depth, the font
color stack, and a flat ASS override record. On every text run the
computed style is rendered to a span opening tag; consecutive runs with
the same tag share one span, otherwise the previous span is closed and a
new one opened.

RULES:
- convert() never raises: unknown tags and commands are ignored,
  unbalanced closes are clamped at zero depth
- The override record is flat, not a stack: later commands overwrite
  earlier ones until {\\r} clears everything
- Underline wins over strikethrough (the renderer supports one decoration)
- Override color wins over font colors; the innermost font color wins
  over outer ones
- Span attribute order: fontWeight, fontStyle, textDecoration, color
- Text escapes & < > " ' and /; every line is wrapped in LRE/PDF
  control characters and lines are joined with <br/>
- Complete character references (``&amp;``, ``&#233;``) are decoded
  and re-escaped; any other "&" is literal text
- Characters XML 1.0 forbids are dropped
- Empty text runs produce no output and leave the open span untouched
"""

from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass, field
from html.entities import html5
from html.parser import HTMLParser
from typing import List, Optional

logger = logging.getLogger(__name__)

# An ASS override block: "{\" followed by one or more commands, up to "}".
_ASS_BLOCK_RE = re.compile(r"\{\\(.+?)\}")

# Primary fill color, BGR hex: \c&HBBGGRR& or \1c&HBBGGRR&
_ASS_COLOR_RE = re.compile(r"1?c&H([0-9a-fA-F]{0,6})&")

# Pseudo-tag carrying a rewritten ASS override block.
_ASS_TAG = "ass"

_XML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "/": "&#x2F;",
}
_XML_ESCAPE_RE = re.compile(r"[&<>\"'/]")

# Code points XML 1.0 does not allow in a document, even as references.
_XML_INVALID_RE = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

# A character reference candidate; only complete, known references survive.
_AMPERSAND_RE = re.compile(r"&(#[0-9]+;|#[xX][0-9a-fA-F]+;|[A-Za-z][A-Za-z0-9]*;)?")

# The player lays out loaded subtitles right-to-left; force LTR per line.
_LTR_EMBEDDING = "&#x202a;"
_POP_DIRECTIONAL = "&#x202c;"
_LINE_BREAK = "<br/>"

# Formatting tag → StyleState depth counter.
_DEPTH_TAGS = {
    "i": "italic",
    "b": "bold",
    "u": "underline",
    "s": "strikethrough",
}

_OVERRIDE_TOGGLES = {
    "b0": ("bold", False),
    "b1": ("bold", True),
    "i0": ("italic", False),
    "i1": ("italic", True),
    "u0": ("underline", False),
    "u1": ("underline", True),
    "s0": ("strikethrough", False),
    "s1": ("strikethrough", True),
}


@dataclass
class AssOverride:
    """Style forced by ASS override commands; None means "not overridden"."""

    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[bool] = None
    strikethrough: Optional[bool] = None
    color: Optional[str] = None


@dataclass(frozen=True)
class ComputedStyle:
    """Effective style of one text run."""

    bold: bool = False
    italic: bool = False
    decoration: Optional[str] = None
    color: Optional[str] = None

    def span_tag(self) -> Optional[str]:
        """Render the opening <span> for this style, or None if unstyled."""
        attributes = []
        if self.bold:
            attributes.append('tts:fontWeight="bold"')
        if self.italic:
            attributes.append('tts:fontStyle="italic"')
        if self.decoration:
            attributes.append('tts:textDecoration="{}"'.format(self.decoration))
        if self.color:
            attributes.append('tts:color="{}"'.format(escape_text(self.color)))
        if not attributes:
            return None
        return "<span {}>".format(" ".join(attributes))


@dataclass
class StyleState:
    """Mutable style stack for the conversion of a single cue.

    WHY: Tags and override commands arrive as a flat event stream, so the
    styling in effect for a text run is the accumulated result of every
    event before it.

    RULES:
    - Depth counters never go below zero
    - fonts holds one entry per open <font>; the entry is its color or None
    - override is replaced wholesale by {\\r}
    """

    italic: int = 0
    bold: int = 0
    underline: int = 0
    strikethrough: int = 0
    fonts: List[Optional[str]] = field(default_factory=list)
    override: AssOverride = field(default_factory=AssOverride)

    def open_tag(self, tag: str, color: Optional[str] = None) -> None:
        attr = _DEPTH_TAGS.get(tag)
        if attr is not None:
            setattr(self, attr, getattr(self, attr) + 1)
        elif tag == "font":
            # TODO: honour the size attribute once the renderer profile allows tts:fontSize
            self.fonts.append(color or None)

    def close_tag(self, tag: str) -> None:
        attr = _DEPTH_TAGS.get(tag)
        if attr is not None:
            setattr(self, attr, max(getattr(self, attr) - 1, 0))
        elif tag == "font" and self.fonts:
            self.fonts.pop()

    def apply_override(self, commands: str) -> None:
        """Apply the backslash-separated commands of one ASS override block."""
        for command in commands.split("\\"):
            command = command.strip()
            if not command:
                continue
            if command in _OVERRIDE_TOGGLES:
                attr, value = _OVERRIDE_TOGGLES[command]
                setattr(self.override, attr, value)
            elif command == "r":
                self.override = AssOverride()
            else:
                color = parse_ass_color(command)
                if color is not None:
                    self.override.color = color
                else:
                    logger.debug("Ignoring unsupported ASS override %r", command)

    def computed_style(self) -> ComputedStyle:
        override = self.override
        underline = _resolve(override.underline, self.underline)
        strikethrough = _resolve(override.strikethrough, self.strikethrough)
        if underline:
            decoration = "underline"
        elif strikethrough:
            decoration = "lineThrough"
        else:
            decoration = None

        color = override.color
        if color is None:
            color = next((c for c in reversed(self.fonts) if c), None)

        return ComputedStyle(
            bold=_resolve(override.bold, self.bold),
            italic=_resolve(override.italic, self.italic),
            decoration=decoration,
            color=color,
        )


def _resolve(override: Optional[bool], depth: int) -> bool:
    if override is not None:
        return override
    return depth > 0


def parse_ass_color(command: str) -> Optional[str]:
    """Convert an ASS color command (``c&HBBGGRR&``) to ``#RRGGBB``.

    The hex digits are one BGR number, so short values are left-padded
    with zeros before the blue and red byte pairs are swapped. Returns
    None when the command is not a primary color command.
    """
    match = _ASS_COLOR_RE.match(command)
    if not match:
        return None
    bgr = match.group(1).rjust(6, "0")
    return "#" + bgr[4:6] + bgr[2:4] + bgr[0:2]


def escape_text(text: str) -> str:
    """Escape the XML-reserved characters (and slash) in *text*.

    Characters that may not appear in an XML document at all (most C0
    controls, lone surrogates, U+FFFE and U+FFFF) are dropped.
    """
    text = _XML_INVALID_RE.sub("", text)
    return _XML_ESCAPE_RE.sub(lambda m: _XML_ESCAPES[m.group()], text)


def _protect_ampersand(match: re.Match) -> str:
    reference = match.group(1)
    if reference and (reference.startswith("#") or reference in html5):
        return match.group()
    return "&amp;"


def _protect_ampersands(text: str) -> str:
    """Escape every "&" that does not start a complete character reference.

    html.parser also decodes legacy entities written without a trailing
    ";" (``&copy 2020``, ``rock&not roll``); a bare ampersand is literal
    text in subtitles.
    """
    return _AMPERSAND_RE.sub(_protect_ampersand, text)


def _format_lines(text: str) -> str:
    lines = escape_text(text).split("\n")
    return _LINE_BREAK.join(
        _LTR_EMBEDDING + line + _POP_DIRECTIONAL for line in lines
    )


def _override_to_tag(match: re.Match) -> str:
    return '<{} cmd="{}" />'.format(_ASS_TAG, html.escape(match.group(1), quote=True))


class _CueMarkupParser(HTMLParser):
    """Streaming walker that emits TTML while tracking StyleState.

    html.parser may report one run of text in several chunks (a stray "<"
    is delivered on its own), so chunks are buffered and emitted as one
    run at the next tag or at the end of input.

    <script>, <style>, <title> and <textarea> get no raw-text treatment:
    subtitle markup has no such elements, so their tags are ignored like
    any other unknown tag and their content stays regular text.
    """

    CDATA_CONTENT_ELEMENTS = ()
    RCDATA_CONTENT_ELEMENTS = ()

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.state = StyleState()
        self.open_span: Optional[str] = None
        self.parts: List[str] = []
        self._pending: List[str] = []

    def handle_starttag(self, tag, attrs):
        self._flush_text()
        attributes = dict(attrs)
        if tag == _ASS_TAG:
            self.state.apply_override(attributes.get("cmd") or "")
        else:
            self.state.open_tag(tag, color=attributes.get("color"))

    def handle_endtag(self, tag):
        self._flush_text()
        self.state.close_tag(tag)

    def handle_data(self, data):
        self._pending.append(data)

    def _flush_text(self) -> None:
        text = "".join(self._pending)
        self._pending = []
        if not text:
            return
        span = self.state.computed_style().span_tag()
        if span != self.open_span:
            if self.open_span:
                self.parts.append("</span>")
            if span:
                self.parts.append(span)
            self.open_span = span
        self.parts.append(_format_lines(text))

    def result(self) -> str:
        self._flush_text()
        if self.open_span:
            self.parts.append("</span>")
            self.open_span = None
        return "".join(self.parts)


def convert(raw: str) -> str:
    """Convert one cue's raw text into well-formed TTML inline markup.

    Args:
        raw: Cue text as found in the subtitle file. May contain HTML
             formatting tags, ASS override blocks, and newlines.

    Returns:
        A markup fragment suitable as the content of a TTML <p> element.
    """
    normalized = _protect_ampersands(_ASS_BLOCK_RE.sub(_override_to_tag, raw))
    parser = _CueMarkupParser()
    parser.feed(normalized)
    parser.close()
    return parser.result()
