"""Data models for timeln."""

from dataclasses import dataclass
from enum import Enum


@dataclass(slots=True, frozen=True)
class TimeSnapshot:
    """Immutable timing record for one qualifying line."""

    delta: float  # Seconds since the previous qualifying line
    elapsed: float  # Seconds since start


@dataclass(slots=True, frozen=True)
class Counters:
    """Line and match totals at a point in time."""

    total_lines: int = 0
    total_matches: int = 0

    def with_line(self) -> "Counters":
        """Return a copy with one more processed line."""
        return Counters(self.total_lines + 1, self.total_matches)

    def with_match(self) -> "Counters":
        """Return a copy with one more match."""
        return Counters(self.total_lines, self.total_matches + 1)


class FinalizeReason(Enum):
    """What triggered finalization."""

    END_OF_STREAM = "end-of-stream"
    INTERRUPT = "interrupt"
