"""Tests for configuration and argument parsing."""

import pytest

from timeln.annotator import AnnotationStyle
from timeln.app import build_parser
from timeln.config import TimelnConfig, config_from_args
from timeln.summarizer import SummaryStyle
from timeln.time_format import TimeFormat


def parse(*argv: str, environ=None) -> TimelnConfig:
    args = build_parser().parse_args(list(argv))
    return config_from_args(args, environ or {})


class TestConfigFromArgs:
    """Tests for config_from_args."""

    def test_defaults(self):
        """Test no flags gives the default config."""
        assert parse() == TimelnConfig()

    def test_short_flags(self):
        """Test the short flags."""
        config = parse("-c", "-r", "x+", "-p")

        assert config.color is True
        assert config.regex == "x+"
        assert config.plot is True

    def test_long_flags(self):
        """Test the long flags."""
        config = parse("--color", "--regex", "err", "--plot")

        assert config.color is True
        assert config.regex == "err"
        assert config.plot is True

    def test_styles_and_format(self):
        """Test enum options are resolved once."""
        config = parse("-f", "milliseconds", "--style", "unicode", "-s", "detailed")

        assert config.time_format is TimeFormat.MILLISECONDS
        assert config.annotation_style is AnnotationStyle.UNICODE
        assert config.summary_style is SummaryStyle.DETAILED

    def test_invalid_choice_exits(self):
        """Test an unknown format is rejected by the parser."""
        with pytest.raises(SystemExit) as exc_info:
            parse("--format", "hours")
        assert exc_info.value.code == 2

    def test_environment_fallbacks(self):
        """Test environment variables fill in unset options."""
        config = parse(environ={"TIMELN_PLOT_DIR": "/tmp/charts", "TIMELN_LOG_LEVEL": "debug"})

        assert config.plot_dir == "/tmp/charts"
        assert config.log_level == "DEBUG"

    def test_flags_override_environment(self):
        """Test CLI options win over environment variables."""
        config = parse(
            "--plot-dir", "out", "--log-level", "INFO",
            environ={"TIMELN_PLOT_DIR": "/tmp/charts", "TIMELN_LOG_LEVEL": "DEBUG"},
        )

        assert config.plot_dir == "out"
        assert config.log_level == "INFO"

    def test_config_is_frozen(self):
        """Test TimelnConfig is immutable."""
        config = TimelnConfig()
        with pytest.raises(AttributeError):
            config.color = True
