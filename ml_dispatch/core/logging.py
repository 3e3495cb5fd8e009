"""
Logging configuration for ml-dispatch.

The package only emits records; applications decide where they go.
Scripts and examples call setup_logging() to print them.
"""
import logging
import sys
from typing import Optional, TextIO

PACKAGE_LOGGER = "ml_dispatch"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Silent unless the application configures logging
logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


class _SetupHandler(logging.StreamHandler):
    """Marks the handler installed by setup_logging so it can be replaced."""
    pass


def setup_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Print ml_dispatch records to a stream (stdout by default).

    Only the package logger is touched, never the root logger. Calling it
    again replaces the previous handler instead of stacking a second one.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, _SetupHandler):
            logger.removeHandler(handler)

    handler = _SetupHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper()))

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance.

    The name is the logging context; components pass their own
    (e.g. "model_client.resolver") so records show where they came from.
    """
    if name:
        return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
    return logging.getLogger(PACKAGE_LOGGER)
