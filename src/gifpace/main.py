"""
gifpace Command Line
====================

Entry point: rewrite one GIF to a uniform frame delay.

Usage:
    gifpace anim.gif > uniform.gif

The rewritten GIF goes to standard output, diagnostics to standard error.
If the frame delays are already uniform nothing is written and the exit
status is still 0.

Exit Status:
    0 - success (including the already-uniform case)
    1 - usage, I/O, decoding or encoding error
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import BinaryIO, List, Optional

from gifpace.codec.errors import DecodingError, DecodingIoError, EncodingError
from gifpace.config import settings
from gifpace.timing.pipeline import retime_gif


logger = logging.getLogger(__name__)


USAGE = "usage: pass one file.gif, read stdout"

GIF_SUFFIX = ".gif"

EXIT_OK = 0
EXIT_FAILURE = 1


# =============================================================================
# Argument Handling
# =============================================================================

class UsageError(Exception):
    """Raised when the command line is not exactly one .gif path."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(USAGE)
        self.detail = detail


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting."""

    def error(self, message: str) -> None:
        raise UsageError(message)


def parse_args(argv: List[str]) -> Path:
    """
    Validate the command line.

    Args:
        argv: Arguments without the program name

    Returns:
        Path of the GIF to rewrite

    Raises:
        UsageError: Unless argv is exactly one path ending in ".gif"
            (case-sensitive)
    """
    parser = _ArgumentParser(
        prog="gifpace",
        description="Rewrite an animated GIF to a uniform frame delay.",
        add_help=False,
    )
    parser.add_argument("path", help="input .gif file")
    args = parser.parse_args(argv)

    path = Path(args.path)
    if not path.name or path.suffix != GIF_SUFFIX:
        raise UsageError(f"not a {GIF_SUFFIX} file: {args.path}")
    return path


def describe_error(error: Exception) -> str:
    """Message printed to stderr for a failed run."""
    if isinstance(error, DecodingIoError):
        return str(error.error)
    if isinstance(error, DecodingError):
        return f"gif decoding error: {error}"
    if isinstance(error, EncodingError):
        return f"gif encoding error: {error}"
    return str(error)


# =============================================================================
# Main Entry Point
# =============================================================================

def main(argv: Optional[List[str]] = None, stdout: Optional[BinaryIO] = None) -> int:
    """
    Run gifpace.

    Args:
        argv: Arguments without the program name (default: sys.argv[1:])
        stdout: Binary stream for the output GIF (default: sys.stdout.buffer)

    Returns:
        Process exit status
    """
    if argv is None:
        argv = sys.argv[1:]
    if stdout is None:
        stdout = sys.stdout.buffer

    try:
        path = parse_args(argv)
        changed = retime_gif(
            path,
            stdout,
            min_delay=settings.timing.min_delay,
            zero_delay=settings.timing.zero_delay,
            filler_min_ticks=settings.timing.filler_min_ticks,
            loop_forever=settings.output.loop_forever,
        )
        stdout.flush()
    except (UsageError, DecodingError, EncodingError, OSError) as e:
        logger.debug(f"gifpace failed: {e!r}", exc_info=True)
        print(describe_error(e), file=sys.stderr)
        return EXIT_FAILURE

    if not changed:
        logger.info(f"{path}: delays already uniform, no output written")
    return EXIT_OK


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
