#!/usr/bin/env python
"""
logging_helper.py – per-module loggers for tiermaker.

Every module does

    from tiermaker.utils.logging_helper import get_logger
    log = get_logger()

and gets ``tiermaker.<module>`` writing the full record to
``<root>/logs/<module>.log`` plus a short ``[LEVEL] message`` line on stdout.
The CLI calls configure_levels() once settings are known, because the ranking
screen owns the terminal and log chatter would scroll the question away.
"""

from __future__ import annotations
import inspect, logging, sys, os
from pathlib import Path

from .paths import LOG_DIR

FILE_FMT    = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
FILE_DATE   = "%Y-%m-%d %H:%M:%S"
CONSOLE_FMT = "[%(levelname)s] %(message)s"
NAMESPACE   = "tiermaker"


def _caller_name(frame_info: inspect.FrameInfo) -> str:
    module = inspect.getmodule(frame_info.frame)
    if module and module.__name__ != "__main__":
        return module.__name__.rsplit(".", 1)[-1]
    # run as a script (python -m tiermaker.bin.rank): use the file stem
    return os.path.splitext(os.path.basename(frame_info.filename))[0]


def get_logger(level: int = logging.INFO,
               log_dir: str | Path = LOG_DIR) -> logging.Logger:
    """Return the ``tiermaker.<caller>`` logger, creating its handlers once."""
    name = _caller_name(inspect.stack()[1])
    logger = logging.getLogger(f"{NAMESPACE}.{name}")
    if logger.handlers:
        return logger

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    to_file = logging.FileHandler(log_dir / f"{name}.log", encoding="utf-8")
    to_file.setFormatter(logging.Formatter(FILE_FMT, FILE_DATE))

    to_console = logging.StreamHandler(sys.stdout)
    to_console.setFormatter(logging.Formatter(CONSOLE_FMT))

    for handler in (to_file, to_console):
        handler.setLevel(level)
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def configure_levels(file_level: int, console_level: int) -> None:
    """Re-level the handlers of every tiermaker logger created so far."""
    for name, logger in logging.Logger.manager.loggerDict.items():
        if not name.startswith(NAMESPACE + ".") or not isinstance(logger, logging.Logger):
            continue
        logger.setLevel(min(file_level, console_level))
        for handler in logger.handlers:
            # FileHandler subclasses StreamHandler, so test it first
            if isinstance(handler, logging.FileHandler):
                handler.setLevel(file_level)
            elif isinstance(handler, logging.StreamHandler):
                handler.setLevel(console_level)
