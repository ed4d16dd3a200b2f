"""timeln - annotate stdin lines with elapsed and delta times."""

import logging
import sys
import time
from argparse import ArgumentParser
from dataclasses import replace
from typing import Callable, TextIO

from timeln.annotator import AnnotationStyle, color_supported
from timeln.channel import SnapshotChannel
from timeln.config import TimelnConfig, config_from_args
from timeln.errors import TimelnError
from timeln.finalizer import Finalizer
from timeln.interrupt import InterruptCoordinator, terminate
from timeln.loop import LineTimer
from timeln.models import FinalizeReason
from timeln.pattern import build_filter
from timeln.reader import LineSource, StreamLineSource
from timeln.state import TimingState
from timeln.summarizer import SummaryStyle
from timeln.time_format import TimeFormat

logger = logging.getLogger("timeln")


def setup_logging(level: str = "WARNING") -> None:
    """Configure logging on stderr so stdout stays pipeable."""
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser."""
    parser = ArgumentParser(
        prog="timeln",
        description="A utility that times lines/regex from stdin.",
    )
    parser.add_argument(
        "-c", "--color",
        action="store_true",
        help="Colorize the timing prefix and highlight matches",
    )
    parser.add_argument(
        "-r", "--regex",
        help="Only time and print lines matching this pattern",
    )
    parser.add_argument(
        "-p", "--plot",
        action="store_true",
        help="Write deltas.png and elapsed.png charts on exit",
    )
    parser.add_argument(
        "--plot-dir",
        help="Directory for chart files (default: $TIMELN_PLOT_DIR or .)",
    )
    parser.add_argument(
        "-f", "--format",
        choices=[f.value for f in TimeFormat],
        default=TimeFormat.SECONDS.value,
        help="Duration format (default: seconds)",
    )
    parser.add_argument(
        "--style",
        choices=[s.value for s in AnnotationStyle],
        default=AnnotationStyle.SIMPLE.value,
        help="Annotation prefix style (default: simple)",
    )
    parser.add_argument(
        "-s", "--summary",
        choices=[s.value for s in SummaryStyle],
        default=SummaryStyle.SIMPLE.value,
        help="Summary style (default: simple)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: $TIMELN_LOG_LEVEL or WARNING)",
    )
    return parser


def execute(
    config: TimelnConfig,
    source: LineSource | None = None,
    output: TextIO | None = None,
    exit_func: Callable[[int], None] = terminate,
    handle_signals: bool = True,
) -> bool:
    """
    Run one timing session: filter, loop, then finalize.

    Returns:
        True if the end-of-stream path ran the finalize body, False if an
        interrupt had already done it.

    Raises:
        TimelnError: Any fatal condition. No summary is printed for
            failures raised by the loop.
    """
    start_time = time.monotonic()
    # Invalid patterns fail before anything is read
    pattern_filter = build_filter(config.regex)

    channel = SnapshotChannel()
    finalizer = Finalizer(config, start_time, output=output)
    state = TimingState(channel, finalizer)
    coordinator = InterruptCoordinator(state, exit_func=exit_func)
    timer = LineTimer(
        config,
        source if source is not None else StreamLineSource(),
        state,
        channel,
        start_time,
        pattern_filter=pattern_filter,
        output=output,
    )

    state.start()
    try:
        if handle_signals:
            coordinator.install()
        qualifying = timer.run()
        logger.debug("End of stream after %d qualifying lines", qualifying)
        return state.finalize(FinalizeReason.END_OF_STREAM)
    finally:
        if coordinator.installed:
            coordinator.uninstall()
        state.stop()


def main() -> None:
    """Entry point for the timeln command."""
    parser = build_parser()
    args = parser.parse_args()
    config = config_from_args(args)
    setup_logging(config.log_level)
    if config.color and not color_supported():
        logger.debug("Color requested but stdout does not support it")
        config = replace(config, color=False)
    logger.debug("Config: %s", config)

    try:
        execute(config)
    except TimelnError as e:
        print(f"timeln: error: {e}", file=sys.stderr)
        sys.exit(e.exit_code)
    except (KeyboardInterrupt, BrokenPipeError):
        sys.exit(0)


if __name__ == "__main__":
    main()
