"""Line sources for the processing loop."""

import io
import sys
from typing import Protocol, TextIO

from timeln.errors import InputError


class LineSource(Protocol):
    """Anything that hands out lines until a zero-byte read."""

    def read_line(self) -> tuple[int, str]:
        """Return ``(bytes_read, text)``; zero bytes means end of stream."""
        ...


class StreamLineSource:
    """Reads lines from a text stream, standard input by default."""

    def __init__(self, stream: TextIO | None = None) -> None:
        """Initialize with a stream, standard input if None."""
        self._stream = stream if stream is not None else sys.stdin

    def read_line(self) -> tuple[int, str]:
        """Read one line; InputError on I/O or decode failure."""
        try:
            text = self._stream.readline()
        except (OSError, UnicodeDecodeError) as e:
            raise InputError(f"failed to read input: {e}") from e
        return len(text.encode("utf-8", errors="surrogateescape")), text


class FixtureLineSource(StreamLineSource):
    """Serves lines from a fixed in-memory string."""

    def __init__(self, data: str) -> None:
        """Initialize with the full fixture text."""
        super().__init__(io.StringIO(data))
