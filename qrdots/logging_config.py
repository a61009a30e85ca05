"""
Logging setup for the ``qrdots`` package.

Modules log through ``logging.getLogger(__name__)`` and never configure
handlers themselves; applications call ``setup_logging`` once.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Attach console (and optionally file) handlers to the package logger.

    Parameters
    ----------
    level : int, optional
        Level applied to the logger and its handlers. The default is
        ``logging.INFO``.
    log_file : str, optional
        If given, log records are also written to this file, which is
        truncated first. The default is None.

    Returns
    -------
    logging.Logger
        The ``qrdots`` logger.

    Notes
    -----
    Handlers installed by an earlier call are removed, so calling this
    repeatedly does not duplicate output.
    """
    logger = logging.getLogger("qrdots")
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("Logging to %d handler(s) at level %s",
                 len(handlers), logging.getLevelName(level))
    return logger
