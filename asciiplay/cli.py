"""
Command line interface - play a video file as colored ASCII art.

Usage:
    asciiplay [options] <file>

Examples:
    asciiplay movie.mp4                     # Play with the defaults
    asciiplay -r 40 movie.mp4               # Paint a frame every 40ms
    asciiplay -c h264 -f mp4 movie.mp4      # Pass decoder hints to ffmpeg
    asciiplay -d opencv movie.mp4           # Decode with OpenCV instead of ffmpeg

Controls:
    Space       - Pause/Resume
    Enter       - Stop
    ?           - Show/Hide help
    Q / Escape  - Quit
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
import traceback
from typing import Sequence

from . import __version__
from .color import AnsiColorCache
from .config import settings
from .controller import Controller
from .display import TerminalDisplay
from .media import MediaOptions
from .player import MediaPlayer

logger = logging.getLogger(__name__)

PROG = "asciiplay"


def positive_int(value: str) -> int:
    """argparse type accepting integers greater than zero."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be greater than zero: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        usage=f"{PROG} [options] <file>",
        description="Play videos in the terminal as colored ASCII art.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Controls:
  Space       - Pause/Resume
  Enter       - Stop
  ?           - Show/Hide help
  Q / Escape  - Quit

Settings can also be given as ASCIIPLAY_* environment variables,
e.g. ASCIIPLAY_REFRESH_RATE=40 or ASCIIPLAY_DECODER=opencv.
        """,
    )
    parser.add_argument("file", help="Path of the media file to play")
    parser.add_argument("-c", "--codec", metavar="<name>", help="video codec")
    parser.add_argument("-f", "--format", metavar="<name>", help="media format")
    parser.add_argument(
        "-r",
        "--refresh",
        metavar="<rate>",
        type=positive_int,
        default=None,
        help=f"refresh rate in milliseconds (default: {settings.REFRESH_RATE})",
    )
    parser.add_argument(
        "-d",
        "--decoder",
        choices=["ffmpeg", "opencv"],
        default=None,
        help=f"decoder used to read frames (default: {settings.DECODER})",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="log more details to stderr (-vv for debug output)",
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(verbosity: int = 0) -> None:
    """Log to stderr so log records do not corrupt the terminal display."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = getattr(logging, settings.LOG_LEVEL.upper(), logging.WARNING)

    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def report_error(error: BaseException) -> None:
    """Write ``error`` with its traceback to stderr."""
    traceback.print_exception(type(error), error, error.__traceback__, file=sys.stderr)


async def run(args: argparse.Namespace) -> int:
    """Play ``args.file`` until playback stops or the user quits.

    :return: Process exit code
    """
    ansi_cache = AnsiColorCache(settings.ANSI_CACHE_SIZE) if settings.ANSI_CACHE_SIZE else None
    display = TerminalDisplay(refresh_rate=args.refresh)
    player = MediaPlayer(decoder=args.decoder, ansi_cache=ansi_cache)
    controller = Controller(display, player)

    finished = asyncio.Event()
    errors: list[Exception] = []
    controller.on("error", errors.append)
    controller.on("stop", controller.destroy)
    controller.on("destroy", finished.set)

    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, controller.destroy)
        sigint_handled = True
    except NotImplementedError:
        # Not supported by the event loop on Windows
        sigint_handled = False

    try:
        await controller.play(args.file, MediaOptions(codec=args.codec, format=args.format))
        await finished.wait()
    except Exception as e:
        controller.destroy()
        report_error(e)
        return 1
    finally:
        if sigint_handled:
            loop.remove_signal_handler(signal.SIGINT)

    if errors:
        report_error(errors[0])
        return 1
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
