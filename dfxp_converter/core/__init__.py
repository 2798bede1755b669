"""Core transcoding and assembly modules.

WHY: The core package contains the stable heart of the converter:
the Cue IR, the inline markup transcoder, and the DFXP document
assembler. Every output path (CLI, server) goes through it.

HOW: ir.py defines the data structures, transcoder.py converts one
cue's raw markup to TTML inline markup, assembler.py wraps a cue list
into a complete DFXP document, naming.py builds download filenames.

RULES:
- Everything here is a pure function of its inputs
- No I/O, no logging configuration, no HTTP
"""
