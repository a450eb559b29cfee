"""Tests for evidencefilter logging setup."""

import logging
from pathlib import Path

import pytest

from evidencefilter.utils.logging import (
    PACKAGE_LOGGER,
    TRACE_LOGGER,
    log_duration,
    setup_logging,
)


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    setup_logging()


class TestSetupLogging:
    """Tests for setup_logging."""

    @pytest.mark.parametrize(
        "verbosity,level",
        [(0, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG)],
    )
    def test_console_level(self, verbosity, level) -> None:
        """Verbosity picks the package logger level."""
        setup_logging(verbosity=verbosity)

        package = logging.getLogger(PACKAGE_LOGGER)
        assert package.level == level
        assert len(package.handlers) == 1

    def test_repeated_setup_replaces_handlers(self, tmp_path: Path) -> None:
        """Calling setup twice does not stack handlers."""
        setup_logging(log_file=tmp_path / "run.log", trace_file=tmp_path / "trace.log")
        setup_logging(log_file=tmp_path / "run.log", trace_file=tmp_path / "trace.log")

        assert len(logging.getLogger(PACKAGE_LOGGER).handlers) == 2
        assert len(logging.getLogger(TRACE_LOGGER).handlers) == 1

    def test_trace_file_gets_only_trace(self, tmp_path: Path) -> None:
        """The trace file holds bare trace messages, the log file everything."""
        log_file = tmp_path / "run.log"
        trace_file = tmp_path / "trace.log"
        setup_logging(verbosity=0, log_file=log_file, trace_file=trace_file)

        logging.getLogger("evidencefilter.io.gff").warning("Skipping aln9")
        logging.getLogger(TRACE_LOGGER).debug("match:EST1 accept:YES")

        assert trace_file.read_text().splitlines() == ["match:EST1 accept:YES"]
        log_text = log_file.read_text()
        assert "Skipping aln9" in log_text
        assert "match:EST1 accept:YES" in log_text

    def test_trace_off_without_file(self) -> None:
        """Without a trace file the trace follows the package level."""
        setup_logging(verbosity=1)

        assert not logging.getLogger(TRACE_LOGGER).isEnabledFor(logging.DEBUG)


class TestLogDuration:
    """Tests for log_duration."""

    def test_logs_step(self, caplog) -> None:
        """The step name and elapsed time are logged at INFO."""
        caplog.set_level(logging.INFO, logger=PACKAGE_LOGGER)
        logger = logging.getLogger("evidencefilter.cli")

        with log_duration("Filtering", logger):
            pass

        assert any(
            r.levelno == logging.INFO and r.getMessage().startswith("Filtering took ")
            for r in caplog.records
        )
