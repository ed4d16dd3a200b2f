"""Tests for the LineTimer processing loop."""

import io

import pytest

from timeln.channel import SnapshotChannel
from timeln.config import TimelnConfig
from timeln.errors import ChannelError, InputError
from timeln.loop import LineTimer
from timeln.models import Counters, TimeSnapshot
from timeln.pattern import PatternFilter
from timeln.reader import FixtureLineSource
from timeln.state import TimingState


class FakeClock:
    """Clock returning preset readings."""

    def __init__(self, *readings: float) -> None:
        self._readings = list(readings)

    def __call__(self) -> float:
        return self._readings.pop(0)


class FailingSource:
    """Source that fails after a number of good lines."""

    def __init__(self, good_lines: int) -> None:
        self._remaining = good_lines

    def read_line(self) -> tuple[int, str]:
        if self._remaining == 0:
            raise InputError("read failed")
        self._remaining -= 1
        return 2, "a\n"


@pytest.fixture
def channel():
    return SnapshotChannel()


@pytest.fixture
def state(channel):
    state = TimingState(channel, lambda counters, snapshots, reason: None)
    state.start()
    yield state
    state.stop()


def make_timer(config, source, state, channel, clock, pattern=None):
    output = io.StringIO()
    timer = LineTimer(
        config,
        source,
        state,
        channel,
        start_time=0.0,
        pattern_filter=PatternFilter(pattern) if pattern else None,
        output=output,
        clock=clock,
    )
    return timer, output


class TestLineTimer:
    """Tests for LineTimer."""

    def test_every_line_is_annotated(self, state, channel):
        """Test each line gets its elapsed and delta times."""
        timer, output = make_timer(
            TimelnConfig(), FixtureLineSource("a\nb\nc\n"), state, channel, FakeClock(1.0, 3.0, 6.0)
        )

        assert timer.run() == 3
        assert output.getvalue().splitlines() == [
            "[time: 1.00 s, delta: 1.00 s] a",
            "[time: 3.00 s, delta: 2.00 s] b",
            "[time: 6.00 s, delta: 3.00 s] c",
        ]

    def test_snapshots_match_lines(self, state, channel):
        """Test one snapshot per line, in order."""
        timer, _ = make_timer(
            TimelnConfig(), FixtureLineSource("a\nb\nc\n"), state, channel, FakeClock(1.0, 3.0, 6.0)
        )
        timer.run()

        assert channel.drain() == [
            TimeSnapshot(delta=1.0, elapsed=1.0),
            TimeSnapshot(delta=2.0, elapsed=3.0),
            TimeSnapshot(delta=3.0, elapsed=6.0),
        ]

    def test_first_delta_equals_elapsed(self, state, channel):
        """Test the first delta is measured from the start time."""
        timer, _ = make_timer(TimelnConfig(), FixtureLineSource("a\n"), state, channel, FakeClock(0.75))
        timer.run()

        (snapshot,) = channel.drain()
        assert snapshot.delta == snapshot.elapsed == 0.75

    def test_deltas_sum_to_elapsed(self, state, channel):
        """Test the deltas add up to the last elapsed time."""
        timer, _ = make_timer(
            TimelnConfig(),
            FixtureLineSource("1\n2\n3\n4\n"),
            state,
            channel,
            FakeClock(0.1, 0.35, 0.4, 1.25),
        )
        timer.run()

        snapshots = channel.drain()
        assert sum(s.delta for s in snapshots) == pytest.approx(snapshots[-1].elapsed)

    def test_counts_lines_without_filter(self, state, channel):
        """Test all lines are counted and no matches without a filter."""
        timer, _ = make_timer(
            TimelnConfig(), FixtureLineSource("a\nb\nc\n"), state, channel, FakeClock(1.0, 2.0, 3.0)
        )
        timer.run()

        assert state.read() == Counters(total_lines=3, total_matches=0)

    def test_filter_skips_non_matching_lines(self, state, channel):
        """Test only matching lines are timed, counted and printed."""
        timer, output = make_timer(
            TimelnConfig(regex="x"),
            FixtureLineSource("x1\ny2\nx3\n"),
            state,
            channel,
            FakeClock(1.0, 2.0, 4.0),
            pattern="x",
        )

        assert timer.run() == 2
        assert output.getvalue().splitlines() == [
            "[time: 1.00 s, delta: 1.00 s] x1",
            "[time: 4.00 s, delta: 3.00 s] x3",
        ]
        assert state.read() == Counters(total_lines=3, total_matches=2)
        assert channel.drain() == [
            TimeSnapshot(delta=1.0, elapsed=1.0),
            TimeSnapshot(delta=3.0, elapsed=4.0),
        ]

    def test_filter_highlights_with_color(self, state, channel):
        """Test matched text is highlighted when color is on."""
        timer, output = make_timer(
            TimelnConfig(color=True, regex="err"),
            FixtureLineSource("an err here\n"),
            state,
            channel,
            FakeClock(1.0),
            pattern="err",
        )
        timer.run()

        line = output.getvalue()
        assert "\x1b[31merr" in line
        assert "\x1b[32m[time: 1.00 s, delta: 1.00 s]" in line

    def test_lines_are_trimmed(self, state, channel):
        """Test surrounding whitespace is trimmed from the printed line."""
        timer, output = make_timer(
            TimelnConfig(), FixtureLineSource("   padded  \r\n"), state, channel, FakeClock(1.0)
        )
        timer.run()

        assert output.getvalue() == "[time: 1.00 s, delta: 1.00 s] padded\n"

    def test_empty_input(self, state, channel):
        """Test empty input produces nothing."""
        timer, output = make_timer(TimelnConfig(), FixtureLineSource(""), state, channel, FakeClock())

        assert timer.run() == 0
        assert output.getvalue() == ""
        assert state.read() == Counters()

    def test_read_failure_propagates(self, state, channel):
        """Test an InputError aborts the loop."""
        timer, output = make_timer(TimelnConfig(), FailingSource(good_lines=1), state, channel, FakeClock(1.0))

        with pytest.raises(InputError):
            timer.run()
        assert len(output.getvalue().splitlines()) == 1

    def test_closed_channel_is_fatal(self, state, channel):
        """Test a closed channel aborts the loop with ChannelError."""
        channel.close()
        timer, output = make_timer(TimelnConfig(), FixtureLineSource("a\n"), state, channel, FakeClock(1.0))

        with pytest.raises(ChannelError):
            timer.run()
        assert output.getvalue() == ""
