# === FILE: vgo2nix/logger.py ===
"""Logging setup for **vgo2nix**.

Progress lines (``goPackagePath ... has rev ...``, ``Fetching ...``,
``Wrote ...``) are written to stdout while the run proceeds, so a long batch
of prefetches can be followed live. Warnings and errors (skipped modules,
``Encountered error: ...``) go to stderr, which keeps them visible when stdout
is redirected. An optional rotating log file receives everything.

Usage::

    from vgo2nix.logger import logger
    logger.info("Fetching %s@%s", path, rev)
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "vgo2nix"

_LevelT = Union[int, str]


class _BelowWarning(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.WARNING


def _console_handlers(fmt: str) -> List[logging.Handler]:
    formatter = logging.Formatter(fmt)

    progress = logging.StreamHandler(sys.stdout)
    progress.addFilter(_BelowWarning())
    progress.setFormatter(formatter)

    problems = logging.StreamHandler(sys.stderr)
    problems.setLevel(logging.WARNING)
    problems.setFormatter(formatter)
    return [progress, problems]


def _file_handler(file: Path | str, fmt: str) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        filename=str(file),
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """(Re)configure the ``vgo2nix`` logger.

    Parameters
    ----------
    level
        Numeric or textual logging level (e.g. ``"DEBUG"``).
    log_file
        Optional logfile, rotated at 5 MiB with three backups.
    log_format
        Format string shared by all handlers.
    replace_handlers
        Close and drop the handlers installed by a previous call.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)

    if replace_handlers:
        for handler in list(lg.handlers):
            lg.removeHandler(handler)
            handler.close()

    for handler in _console_handlers(log_format):
        lg.addHandler(handler)
    if log_file is not None:
        lg.addHandler(_file_handler(log_file, log_format))

    lg.propagate = False
    return lg


def init_logging(
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Entry point for the CLI: fresh handlers at *level*."""
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "DEFAULT_FORMAT", "LOGGER_NAME"]
