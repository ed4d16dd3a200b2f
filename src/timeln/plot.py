"""Time-series charts of measured deltas and elapsed times."""

from pathlib import Path
from typing import Sequence

from matplotlib.figure import Figure

from timeln.models import TimeSnapshot

DELTAS_FILENAME = "deltas.png"
ELAPSED_FILENAME = "elapsed.png"


def plot_series(
    values: Sequence[float],
    path: Path,
    title: str,
    ylabel: str,
    color: str,
) -> None:
    """Draw values against their index and save the chart to path."""
    fig = Figure(figsize=(6.4, 4.8))
    ax = fig.subplots()
    ax.plot(range(len(values)), values, color=color)
    ax.set_xlim(0, max(len(values), 1))
    # Flat or empty series still need a non-degenerate y range
    ax.set_ylim(0, max(values, default=0.0) or 1.0)
    ax.set_title(title)
    ax.set_xlabel("Line number")
    ax.set_ylabel(ylabel)
    ax.grid(True, linestyle="--", alpha=0.5)
    fig.tight_layout()
    fig.savefig(path)


def plot_deltas(deltas: Sequence[float], path: Path) -> None:
    """Chart time deltas against line number."""
    plot_series(deltas, path, "Line number vs Time delta", "Time delta (seconds)", "tab:red")


def plot_elapsed(times: Sequence[float], path: Path) -> None:
    """Chart elapsed times against line number."""
    plot_series(times, path, "Line number vs Time elapsed", "Time elapsed (seconds)", "tab:blue")


def write_plots(snapshots: Sequence[TimeSnapshot], directory: str | Path = ".") -> list[Path]:
    """Write the delta and elapsed charts into directory and return their paths."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    deltas_path = directory / DELTAS_FILENAME
    elapsed_path = directory / ELAPSED_FILENAME
    plot_deltas([s.delta for s in snapshots], deltas_path)
    plot_elapsed([s.elapsed for s in snapshots], elapsed_path)
    return [deltas_path, elapsed_path]
