"""Logging setup for evidencefilter.

Two loggers matter here:

- ``evidencefilter``: progress and warnings, shown on a rich console.
- ``evidencefilter.trace``: one ``match:`` line per ranked candidate, emitted
  by the filter at DEBUG level. It can be routed to its own file, written
  bare so the file reads like the aligner filter's classic decision trace.

Example:
    >>> from evidencefilter.utils.logging import setup_logging
    >>> setup_logging(verbosity=1, trace_file="decisions.log")
"""

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from rich.logging import RichHandler

PACKAGE_LOGGER = "evidencefilter"
TRACE_LOGGER = "evidencefilter.trace"

FILE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def _level_for(verbosity: int) -> int:
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(
    verbosity: int = 1,
    log_file: Path | str | None = None,
    trace_file: Path | str | None = None,
) -> None:
    """Route evidencefilter logging to the console and optional files.

    Args:
        verbosity: 0 shows warnings, 1 progress, 2 also the decision trace.
        log_file: File receiving every record at DEBUG level.
        trace_file: File receiving only the decision trace, one bare line
            per candidate.
    """
    console_level = _level_for(verbosity)

    package = logging.getLogger(PACKAGE_LOGGER)
    for handler in package.handlers:
        handler.close()
    package.handlers.clear()
    package.setLevel(logging.DEBUG if log_file is not None else console_level)

    console = RichHandler(rich_tracebacks=True, show_time=False, show_path=False)
    console.setLevel(console_level)
    package.addHandler(console)

    if log_file is not None:
        full_log = logging.FileHandler(log_file)
        full_log.setFormatter(logging.Formatter(FILE_FORMAT))
        package.addHandler(full_log)

    trace = logging.getLogger(TRACE_LOGGER)
    for handler in trace.handlers:
        handler.close()
    trace.handlers.clear()
    trace.setLevel(logging.NOTSET)
    if trace_file is not None:
        trace.setLevel(logging.DEBUG)
        trace_handler = logging.FileHandler(trace_file, mode="w")
        trace_handler.setFormatter(logging.Formatter("%(message)s"))
        trace.addHandler(trace_handler)


@contextmanager
def log_duration(step: str, logger: logging.Logger) -> Iterator[None]:
    """Log how long the enclosed block took, at INFO level."""
    started = time.perf_counter()
    yield
    logger.info(f"{step} took {time.perf_counter() - started:.2f}s")
