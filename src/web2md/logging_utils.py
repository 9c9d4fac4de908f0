#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/web2md/logging_utils.py
"""Logging setup for the web2md command line.

Library modules only create loggers (``logging.getLogger(__name__)``); they
never install handlers. The CLI calls ``configure_logging`` once at startup.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PLAIN_FORMAT = "%(levelname)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(log_level: int | str) -> int:
    """Turn a level name such as "debug" or a number into a logging level."""
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(
    log_level: int | str = logging.WARNING,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Install stderr (and optional file) handlers on the root logger.

    Parameters
    ----------
    log_level : int | str, default WARNING
        Numeric logging level or level name
    log_file : str, optional
        Also append log records to this file
    trace_mode : bool, default False
        Log everything at DEBUG with timestamps and logger names

    Returns
    -------
    logging.Logger
        The configured root logger

    """
    resolved_level = logging.DEBUG if trace_mode else resolve_level(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved_level)
    root_logger.handlers.clear()

    formatter = logging.Formatter(TRACE_FORMAT if trace_mode else PLAIN_FORMAT, datefmt=TRACE_DATE_FORMAT)

    console: logging.Handler
    if sys.stderr.isatty() and not trace_mode:
        console = RichHandler(console=Console(stderr=True), show_time=False, show_path=False)
        console.setFormatter(logging.Formatter("%(message)s"))
    else:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(formatter)
    console.setLevel(resolved_level)
    root_logger.addHandler(console)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            root_logger.warning("Could not open log file %s: %s", log_file, exc)
        else:
            file_handler.setLevel(resolved_level)
            file_handler.setFormatter(logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT))
            root_logger.addHandler(file_handler)
            root_logger.debug("Logging to file: %s", log_file)

    return root_logger


__all__ = ["configure_logging", "resolve_level"]
