"""
Logging Configuration

Crawler diagnostics go to stderr (and optionally a log file) so stdout
stays reserved for the run summary. Records carry the worker thread name,
since catalog cells are resolved concurrently.
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(levelname)-8s [%(threadName)s] %(name)s: %(message)s"

# Chatty third-party loggers, kept at WARNING unless running verbose
NOISY_LOGGERS = ("urllib3", "charset_normalizer")


def setup_logging(verbose: bool = False, quiet: bool = False,
                  log_file: Optional[str] = None) -> None:
    """
    Configure the price_crawler logger.

    Args:
        verbose: If True, set level to DEBUG (including HTTP connection logs)
        quiet: If True, set level to WARNING
        log_file: Optional path; records are appended there as well
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    formatter = logging.Formatter(LOG_FORMAT)
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logger = logging.getLogger("price_crawler")
    logger.setLevel(level)

    # Re-running replaces the handlers rather than stacking them
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)
