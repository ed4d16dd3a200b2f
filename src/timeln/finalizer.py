"""Summary and chart output, run once per process."""

import logging
import sys
import time
from typing import Callable, TextIO

from timeln.config import TimelnConfig
from timeln.errors import PlotError
from timeln.models import Counters, FinalizeReason, TimeSnapshot
from timeln.plot import write_plots
from timeln.summarizer import summarize

logger = logging.getLogger(__name__)


class Finalizer:
    """Prints the summary line and, if enabled, writes the charts."""

    def __init__(
        self,
        config: TimelnConfig,
        start_time: float,
        output: TextIO | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the Finalizer.

        Args:
            config: Summary, color and plot options.
            start_time: Clock reading the total time is measured from.
            output: Summary destination, stdout by default.
            clock: Monotonic clock in seconds.
        """
        self._config = config
        self._start_time = start_time
        self._output = output
        self._clock = clock

    def __call__(
        self,
        counters: Counters,
        snapshots: list[TimeSnapshot],
        reason: FinalizeReason,
    ) -> None:
        """Print the summary and write charts if enabled."""
        total_elapsed = self._clock() - self._start_time
        summary = summarize(
            counters.total_lines,
            counters.total_matches,
            total_elapsed,
            time_format=self._config.time_format,
            style=self._config.summary_style,
            color=self._config.color,
        )
        print(summary, file=self._output or sys.stdout, flush=True)

        if not self._config.plot:
            return
        try:
            paths = write_plots(snapshots, self._config.plot_dir)
        except (OSError, ValueError) as e:
            raise PlotError(f"failed to write plots: {e}") from e
        logger.info(
            "Wrote %s (%d points, %s)",
            ", ".join(str(p) for p in paths),
            len(snapshots),
            reason.value,
        )
