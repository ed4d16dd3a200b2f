"""The line processing loop."""

import sys
import time
from typing import Callable, TextIO

from timeln.annotator import format_line, highlight_match
from timeln.channel import SnapshotChannel
from timeln.config import TimelnConfig
from timeln.models import TimeSnapshot
from timeln.pattern import PatternFilter
from timeln.reader import LineSource
from timeln.state import TimingState


class LineTimer:
    """
    Reads lines, timestamps the qualifying ones and prints them annotated.

    Every read line is counted. With a filter, only matching lines are
    counted as matches, snapshotted and printed.
    """

    def __init__(
        self,
        config: TimelnConfig,
        source: LineSource,
        state: TimingState,
        channel: SnapshotChannel,
        start_time: float,
        pattern_filter: PatternFilter | None = None,
        output: TextIO | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the LineTimer.

        Args:
            config: Color, format and style options.
            source: Where lines come from.
            state: Owner of the line and match counters.
            channel: Receives one snapshot per qualifying line.
            start_time: Clock reading all elapsed times are measured from.
            pattern_filter: Only matching lines qualify when set.
            output: Annotated line destination, stdout by default.
            clock: Monotonic clock in seconds.
        """
        self._config = config
        self._source = source
        self._state = state
        self._channel = channel
        self._start_time = start_time
        self._filter = pattern_filter
        self._output = output
        self._clock = clock

    def run(self) -> int:
        """
        Process the source until end of stream.

        Returns:
            Number of qualifying lines.

        Raises:
            InputError: Reading failed.
            ChannelError: The snapshot channel was closed.
        """
        output = self._output or sys.stdout
        last_time = self._start_time
        qualifying = 0

        while True:
            bytes_read, text = self._source.read_line()
            if bytes_read == 0:
                break
            self._state.increment_lines()
            now = self._clock()

            match = None
            if self._filter is not None:
                match = self._filter.search(text)
                if match is None:
                    continue
                self._state.increment_matches()

            snapshot = TimeSnapshot(delta=now - last_time, elapsed=now - self._start_time)
            last_time = now
            self._channel.send(snapshot)
            qualifying += 1

            line = highlight_match(text.strip(), match, self._config.color)
            annotated = format_line(
                line,
                snapshot.elapsed,
                snapshot.delta,
                color=self._config.color,
                time_format=self._config.time_format,
                style=self._config.annotation_style,
            )
            # Flushed per line; an interrupt ends the process without unwinding
            print(annotated, file=output, flush=True)

        return qualifying
