"""Logging setup for semver-calc.

All loggers live below the ``semver_calc`` namespace. Library code only
calls :func:`get_logger`; the CLI calls :func:`setup_logging` once with the
verbosity requested on the command line.
"""

import logging
import sys
from typing import IO

ROOT_LOGGER_NAME = "semver_calc"

DEFAULT_FORMAT = "%(levelname)s: %(message)s"
DEBUG_FORMAT = "%(levelname)s [%(name)s] %(message)s"


def verbosity_to_level(verbosity: int) -> int:
    """Map a CLI verbosity count to a logging level.

    Args:
        verbosity: Number of ``-v`` flags, or -1 for quiet mode

    Returns:
        Logging level constant
    """
    if verbosity < 0:
        return logging.ERROR
    if verbosity == 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(verbosity: int = 0, stream: IO[str] | None = None) -> None:
    """Configure the semver_calc logger hierarchy.

    Safe to call repeatedly; existing handlers are replaced.

    Args:
        verbosity: Number of ``-v`` flags, or -1 for quiet mode
        stream: Output stream (default: stderr)
    """
    level = verbosity_to_level(verbosity)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.setLevel(level)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    fmt = DEBUG_FORMAT if level <= logging.DEBUG else DEFAULT_FORMAT
    handler.setFormatter(logging.Formatter(fmt))

    root_logger.addHandler(handler)
    root_logger.propagate = False

    root_logger.info("Informational logging is active.")
    root_logger.debug("Debug logging is active.")


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger within the semver_calc namespace.

    Args:
        name: Logger name, usually ``__name__``

    Returns:
        Logger instance under the ``semver_calc`` hierarchy
    """
    if not name or name == ROOT_LOGGER_NAME:
        logger = logging.getLogger(ROOT_LOGGER_NAME)
    elif name.startswith(f"{ROOT_LOGGER_NAME}."):
        logger = logging.getLogger(name)
    else:
        logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")

    # Stay silent until the application configures logging
    if not logger.handlers and (not logger.parent or not logger.parent.handlers):
        logger.addHandler(logging.NullHandler())

    return logger
