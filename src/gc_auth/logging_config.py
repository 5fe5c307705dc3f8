"""Logging configuration for gc-auth.

All modules log through children of the ``gc_auth`` logger, which gets a
single stderr handler. The HTTP client libraries are held at WARNING so
token endpoint traffic only shows up through our own redacted records.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gc_auth.config import Config

LOGGER_NAME = "gc_auth"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

# httpcore traces carry request bodies, including the code verifier
QUIET_LOGGERS = ("httpx", "httpcore")

_logging_configured = False


def setup_logging(config: Config) -> None:
    """Attach the stderr handler and apply the configured level.

    Safe to call again, e.g. after reloading configuration: later calls
    only move the level.

    Args:
        config: Application configuration containing log_level setting
    """
    global _logging_configured

    level = getattr(logging, config.log_level.value)
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if _logging_configured:
        for handler in package_logger.handlers:
            handler.setLevel(level)
        return

    package_logger.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    package_logger.addHandler(handler)

    # stdout is reserved for CLI output such as the access token
    package_logger.propagate = False

    _logging_configured = True
    package_logger.debug("Logging configured with level %s", config.log_level.value)


def get_logger(name: str) -> logging.Logger:
    """Return ``name`` as a logger under the ``gc_auth`` hierarchy."""
    if name.startswith(LOGGER_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def reset_logging() -> None:
    """Undo setup_logging so tests start from a clean logger."""
    global _logging_configured
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.propagate = True
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET)
    _logging_configured = False
