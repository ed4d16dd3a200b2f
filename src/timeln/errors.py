"""Error taxonomy for timeln.

Every fatal condition has exactly one exception class and one ``ErrorKind``.
``timeln.app`` turns them into a diagnostic on stderr and a non-zero exit.
"""

from enum import Enum


class ErrorKind(Enum):
    """Closed set of failure kinds."""

    INPUT = "input"
    PATTERN = "pattern"
    CHANNEL = "channel"
    STATE_ACCESS = "state-access"
    PLOT = "plot"


class TimelnError(Exception):
    """Base class for all timeln errors."""

    kind: ErrorKind
    exit_code: int = 1


class InputError(TimelnError):
    """Reading from the line source failed."""

    kind = ErrorKind.INPUT


class PatternError(TimelnError):
    """The filter pattern is not a valid regular expression."""

    kind = ErrorKind.PATTERN
    exit_code = 2


class ChannelError(TimelnError):
    """A snapshot could not be delivered because the channel is closed."""

    kind = ErrorKind.CHANNEL


class StateAccessError(TimelnError):
    """The state owner did not answer in time."""

    kind = ErrorKind.STATE_ACCESS


class PlotError(TimelnError):
    """Writing chart files failed during finalization."""

    kind = ErrorKind.PLOT
