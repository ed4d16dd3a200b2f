"""Runtime configuration for timeln."""

import os
from dataclasses import dataclass
from typing import Mapping

from timeln.annotator import AnnotationStyle
from timeln.summarizer import SummaryStyle
from timeln.time_format import TimeFormat


@dataclass(frozen=True)
class TimelnConfig:
    """Options for one timeln run, resolved once at startup."""

    color: bool = False
    regex: str | None = None
    plot: bool = False
    plot_dir: str = "."
    time_format: TimeFormat = TimeFormat.SECONDS
    annotation_style: AnnotationStyle = AnnotationStyle.SIMPLE
    summary_style: SummaryStyle = SummaryStyle.SIMPLE
    log_level: str = "WARNING"


def config_from_args(args, environ: Mapping[str, str] | None = None) -> TimelnConfig:
    """Build TimelnConfig from parsed CLI args, falling back to environment variables."""
    env = os.environ if environ is None else environ
    return TimelnConfig(
        color=bool(getattr(args, "color", False)),
        regex=getattr(args, "regex", None),
        plot=bool(getattr(args, "plot", False)),
        plot_dir=getattr(args, "plot_dir", None) or env.get("TIMELN_PLOT_DIR", "."),
        time_format=TimeFormat(getattr(args, "format", None) or "seconds"),
        annotation_style=AnnotationStyle(getattr(args, "style", None) or "simple"),
        summary_style=SummaryStyle(getattr(args, "summary", None) or "simple"),
        log_level=(getattr(args, "log_level", None) or env.get("TIMELN_LOG_LEVEL", "WARNING")).upper(),
    )
