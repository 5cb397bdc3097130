"""Logging utilities for ignore-audit.

Stdlib logging routed through the active reporter, or through
``rich.logging.RichHandler`` when the rich reporter is selected.
"""

from __future__ import annotations

import logging
from typing import Optional

from rich.logging import RichHandler

from .reporting import RichReporter, get_reporter

_LOGGER_NAME = "ignore_audit"

__all__ = ["get_logger", "configure_logging"]


def get_logger() -> logging.Logger:
    return logging.getLogger(_LOGGER_NAME)


class _ReporterHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:  # noqa: D401
        rep = get_reporter()
        msg = record.getMessage()
        lvl = record.levelno
        if lvl >= logging.ERROR:
            rep.error(msg)
        elif lvl >= logging.WARNING:
            rep.warning(msg)
        elif lvl >= logging.INFO:
            rep.status(msg)
        else:
            rep.verbose(msg, level=2)


def configure_logging(verbosity: int = 0, *, use_rich: Optional[bool] = None) -> None:
    """Attach one handler to the package logger.

    ``-v`` shows INFO records, ``-vv`` adds DEBUG (walk pruning, git
    command lines).
    """
    logger = get_logger()
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logger.setLevel(level)
    logger.propagate = False

    for h in list(logger.handlers):
        logger.removeHandler(h)

    rep = get_reporter()
    if use_rich is None:
        use_rich = isinstance(rep, RichReporter)

    handler: logging.Handler
    if use_rich and isinstance(rep, RichReporter):
        handler = RichHandler(
            console=rep.err_console,
            show_time=False,
            show_path=False,
            markup=False,
        )
    else:
        handler = _ReporterHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
