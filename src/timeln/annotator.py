"""Line annotation with elapsed and delta times."""

import re
from enum import Enum
from typing import TextIO

from rich.color import ColorSystem
from rich.console import Console
from rich.style import Style

from timeln.time_format import TimeFormat

PREFIX_STYLE = Style(color="green")
MATCH_STYLE = Style(color="red")


class AnnotationStyle(Enum):
    """Prefix layouts for annotated lines."""

    SIMPLE = "simple"
    UNICODE = "unicode"

    def prefix(self, elapsed: str, delta: str) -> str:
        """Build the bracketed timing prefix."""
        if self is AnnotationStyle.UNICODE:
            return f"[Τ: {elapsed}, Δ: {delta}]"
        return f"[time: {elapsed}, delta: {delta}]"


def colorize(text: str, style: Style) -> str:
    """Render text with an ANSI style."""
    return style.render(text, color_system=ColorSystem.STANDARD)


def color_supported(stream: TextIO | None = None) -> bool:
    """
    Check whether ANSI colors should be written to stream (stdout by default).

    Follows rich's console detection: no colors when the stream is not a
    terminal, when NO_COLOR is set or for dumb terminals; FORCE_COLOR turns
    them back on for pipes.
    """
    console = Console(file=stream)
    return console.color_system is not None and not console.no_color


def highlight_match(line: str, match: re.Match | None, color: bool) -> str:
    """Highlight every occurrence of the matched text within the line."""
    if match is None or not color:
        return line
    found = match.group(0)
    if not found:
        return line
    return line.replace(found, colorize(found, MATCH_STYLE))


def format_line(
    line: str,
    elapsed: float,
    delta: float,
    color: bool = False,
    time_format: TimeFormat = TimeFormat.SECONDS,
    style: AnnotationStyle = AnnotationStyle.SIMPLE,
) -> str:
    """
    Annotate a line with its elapsed and delta times.

    Args:
        line: Line text, already trimmed and highlighted.
        elapsed: Seconds since start.
        delta: Seconds since the previous qualifying line.
        color: Render the prefix in green.
        time_format: How durations are rendered.
        style: Prefix layout.
    """
    prefix = style.prefix(time_format.format(elapsed), time_format.format(delta))
    if color:
        prefix = colorize(prefix, PREFIX_STYLE)
    return f"{prefix} {line}"
