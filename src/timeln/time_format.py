"""Duration formatting."""

from enum import Enum


class TimeFormat(Enum):
    """Supported duration formats."""

    SECONDS = "seconds"
    MILLISECONDS = "milliseconds"
    MINUTES = "minutes"

    def format(self, seconds: float) -> str:
        """Format a duration given in seconds."""
        if self is TimeFormat.MILLISECONDS:
            return f"{seconds * 1e3:.2f} ms"
        if self is TimeFormat.MINUTES:
            whole = int(seconds)
            return f"{whole // 60}m {whole % 60}s"
        return f"{seconds:.2f} s"
