"""Utility functions for evidencefilter.

Example:
    >>> from evidencefilter.utils import setup_logging
    >>> setup_logging(verbosity=2)
"""

from evidencefilter.utils.logging import log_duration, setup_logging

__all__ = [
    "log_duration",
    "setup_logging",
]
