"""Optional regular-expression line filter."""

import re

from timeln.errors import PatternError


class PatternFilter:
    """Compiled filter; construction fails before any input is read."""

    def __init__(self, pattern: str) -> None:
        """Compile pattern; PatternError if it is invalid."""
        try:
            self._regex = re.compile(pattern)
        except re.error as e:
            raise PatternError(f"invalid regex {pattern!r}: {e}") from e

    @property
    def pattern(self) -> str:
        """Get the source pattern."""
        return self._regex.pattern

    def search(self, line: str) -> re.Match | None:
        """Return the first match in the line, if any."""
        return self._regex.search(line)


def build_filter(pattern: str | None) -> PatternFilter | None:
    """Build a filter, or None when no pattern was given."""
    if pattern is None:
        return None
    return PatternFilter(pattern)
