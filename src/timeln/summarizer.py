"""End-of-run summary lines."""

from enum import Enum

from timeln.annotator import PREFIX_STYLE, colorize
from timeln.time_format import TimeFormat


class SummaryStyle(Enum):
    """Summary policies."""

    SIMPLE = "simple"
    DETAILED = "detailed"


def average_per_line(total_lines: int, total_elapsed: float) -> float:
    """Average seconds per processed line, zero when nothing was read."""
    if total_lines > 0:
        return total_elapsed / total_lines
    return 0.0


def summarize(
    total_lines: int,
    total_matches: int,
    total_elapsed: float,
    time_format: TimeFormat = TimeFormat.SECONDS,
    style: SummaryStyle = SummaryStyle.SIMPLE,
    color: bool = False,
) -> str:
    """Build the summary line for a run."""
    time_str = time_format.format(total_elapsed)
    if style is SummaryStyle.DETAILED:
        avg_str = time_format.format(average_per_line(total_lines, total_elapsed))
        summary = (
            f"Processed {total_lines} lines in {time_str} with {total_matches} matches. "
            f"Average time per line: {avg_str}"
        )
    else:
        summary = (
            f"[Processed Lines: {total_lines}, Matches: {total_matches}, "
            f"Total Time: {time_str}]"
        )
    if color:
        return colorize(summary, PREFIX_STYLE)
    return summary
