"""Command-line interface for the DFXP Subtitle Converter.

WHY: Users need a simple way to turn a subtitle file into a DFXP file the
player accepts, optionally shifted in time and named after what is
playing. The CLI wires together decoding, SRT parsing, conversion, and
file saving behind a single command, and can also start the HTTP server.

HOW: Uses argparse. The input is either a local .srt file or an
OpenSubtitles record (JSON file) to download. The resync offset is given
in seconds like in the player overlay. Status messages go to stderr;
the output file is saved next to the input (or to --output-dir).

RULES:
- Positional argument: input .srt path (not needed with --record or --serve)
- --title or --series/--season/--episode name the output
  "<content> - <language>.dfxp"; otherwise the input stem is used
- Output naming: numeric suffix for conflicts (Movie-2.dfxp)
- Decode/parse/download failures print an error and exit with status 1
- Status output goes to stderr (not stdout)
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import httpx

from dfxp_converter.adapters.srt_adapter import SubtitleDecodeError, load_srt_file
from dfxp_converter.api.client import OpenSubtitlesAPIError, OpenSubtitlesClient
from dfxp_converter.api.models import SubtitleMetadata
from dfxp_converter.config import (
    DFXP_SERVER_HOST,
    DFXP_SERVER_PORT,
    LOG_LEVEL,
    SUPPORTED_SUBTITLE_FORMATS,
)
from dfxp_converter.core.assembler import seconds_to_offset_ms
from dfxp_converter.core.ir import ContentInfo, Episode, Film, SubtitleTrack
from dfxp_converter.formatters import DFXPFormatter


def _status(msg: str) -> None:
    """Print a status message to stderr, flushed immediately."""
    print(msg, file=sys.stderr, flush=True)


def _resolve_output_path(filename: str, output_dir: Path) -> Path:
    """Resolve the output file path, adding numeric suffix on conflict.

    WHY: Users often convert the same subtitle several times while finding
    the right offset. Overwriting an earlier result would lose work.

    RULES:
    - First attempt: {filename} (e.g. Movie - English.dfxp)
    - Conflict: insert -N before the extension (Movie - English-2.dfxp)
    - Counter starts at 2 and increments

    Args:
        filename: Formatter's suggested filename.
        output_dir: Directory to save the output file.

    Returns:
        A Path that does not yet exist.
    """
    base_path = output_dir / filename
    if not base_path.exists():
        return base_path

    dot_idx = filename.rfind(".")
    if dot_idx > 0:
        name_part = filename[:dot_idx]
        ext_part = filename[dot_idx:]
    else:
        name_part = filename
        ext_part = ""

    counter = 2
    while True:
        candidate = output_dir / "{}-{}{}".format(name_part, counter, ext_part)
        if not candidate.exists():
            return candidate
        counter += 1


def _content_from_args(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
) -> Optional[ContentInfo]:
    if args.title and args.series:
        parser.error("--title and --series are mutually exclusive")
    if args.title:
        return Film(title=args.title)
    if args.series:
        if args.season is None or args.episode is None:
            parser.error("--series requires --season and --episode")
        return Episode(series_title=args.series, season=args.season, episode=args.episode)
    return None


def _load_record(path: Path) -> SubtitleMetadata:
    with open(path, encoding="utf-8") as f:
        return SubtitleMetadata.from_dict(json.load(f))


async def _download_track(
    record: SubtitleMetadata,
    content: Optional[ContentInfo],
) -> SubtitleTrack:
    async with OpenSubtitlesClient() as client:
        return await client.download_track(record, content)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dfxp-converter",
        description=(
            "Convert SubRip subtitles (with HTML tags and ASS override codes) "
            "into DFXP caption files."
        ),
    )
    parser.add_argument(
        "input",
        nargs="?",
        type=Path,
        help="SubRip (.srt) file to convert",
    )
    parser.add_argument(
        "--record",
        type=Path,
        help="OpenSubtitles record (JSON) of a subtitle to download instead of INPUT",
    )
    parser.add_argument(
        "--offset",
        type=float,
        default=0.0,
        help="Resync offset in seconds (negative shows subtitles earlier)",
    )
    parser.add_argument("--language", default="", help="Subtitle language name, e.g. English")
    parser.add_argument("--encoding", help="Character encoding of INPUT (detected if omitted)")
    parser.add_argument("--title", help="Film title for the output filename")
    parser.add_argument("--series", help="Series title for the output filename")
    parser.add_argument("--season", type=int, help="Season number")
    parser.add_argument("--episode", type=int, help="Episode number")
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory for the output file (default: next to INPUT)",
    )
    parser.add_argument("--serve", action="store_true", help="Start the HTTP server")
    parser.add_argument("--host", default=DFXP_SERVER_HOST, help="Server bind address")
    parser.add_argument("--port", type=int, default=DFXP_SERVER_PORT, help="Server port")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the dfxp-converter console script."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.serve:
        from dfxp_converter.server.app import run_api
        run_api(args.host, args.port)
        return

    if args.input is None and args.record is None:
        parser.error("an input .srt file or --record is required")

    content = _content_from_args(parser, args)

    try:
        if args.record is not None:
            record = _load_record(args.record)
            _status("Downloading {} ({})...".format(record.sub_file_name, record.language_name))
            track = asyncio.run(_download_track(record, content))
            default_dir = Path.cwd()
        else:
            input_path: Path = args.input
            if not input_path.is_file():
                _status("Error: file not found: {}".format(input_path))
                sys.exit(1)
            if input_path.suffix.lower() not in SUPPORTED_SUBTITLE_FORMATS:
                _status("Error: unsupported file type '{}'".format(input_path.suffix))
                sys.exit(1)
            track = load_srt_file(
                input_path,
                language_name=args.language,
                content=content,
                encoding=args.encoding,
            )
            default_dir = input_path.parent
    except (SubtitleDecodeError, OpenSubtitlesAPIError, httpx.HTTPError) as exc:
        _status("Error: {}".format(exc))
        sys.exit(1)

    _status("Parsed {} cues.".format(len(track.cues)))

    offset_ms = seconds_to_offset_ms(args.offset)
    output = DFXPFormatter().format(track, offset_ms)

    output_dir = args.output_dir or default_dir
    output_dir.mkdir(parents=True, exist_ok=True)
    out_path = _resolve_output_path(output.filename, output_dir)
    out_path.write_text(output.content, encoding="utf-8")

    if offset_ms:
        _status("Applied resync offset of {:+.3f}s.".format(offset_ms / 1000.0))
    _status("Saved: {}".format(out_path))
