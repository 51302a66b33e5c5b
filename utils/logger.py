"""Logging setup for the PR monitor."""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Libraries that log every HTTP connection; only shown when debugging
NOISY_LOGGERS = ("urllib3", "httpx")


def setup_logger(log_level: str = "INFO", name: str = "pr_monitor") -> logging.Logger:
    """
    Configure logging once for the process and return the named logger.

    Both the server and the CLI log to stdout in the same plain format.
    Connection-level chatter from the HTTP libraries is suppressed unless
    the level is DEBUG.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        name: Logger name (default: pr_monitor)

    Returns:
        logging.Logger: Configured logger instance
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )

    library_level = logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(library_level)

    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)
    return logger
