"""Logging helpers using Rich."""

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT = "gnuish"

_configured = False


def configure(level=logging.WARNING, /):
    """
    install a RichHandler on the package logger (idempotent) and set its level.

    the handler writes to stderr so command output on stdout stays clean.
    """
    global _configured
    logger = logging.getLogger(ROOT)
    if not _configured:
        handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
        _configured = True
    logger.setLevel(level)
    return logger


def get_logger(name, /):
    """Return a logger below the package logger."""
    if name != ROOT and not name.startswith(ROOT + "."):
        name = "%s.%s" % (ROOT, name)
    return logging.getLogger(name)


__all__ = (
    "configure",
    "get_logger",
)
