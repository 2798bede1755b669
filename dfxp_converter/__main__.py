"""Package entry point for ``python -m dfxp_converter``.

WHY: Users run the converter as ``python -m dfxp_converter movie.srt``
for a one-shot conversion, or ``python -m dfxp_converter --serve`` to
start the HTTP resource server.

HOW: Delegates to the CLI's main(), which handles both modes.
"""

from dfxp_converter.cli import main

if __name__ == "__main__":
    main()
