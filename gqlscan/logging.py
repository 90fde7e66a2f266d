"""Logging utilities for gqlscan commands.

Progress is narrated on the console as plain lines (``Found 3 files ...``,
``   • pages/home/Home.jsx``, ``Waiting 10 seconds ...``). Anything other than
INFO carries a ``[gqlscan] LEVEL`` tag.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "gqlscan"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class NarrationFormatter(logging.Formatter):
    """Plain text for INFO narration, ``[gqlscan] LEVEL`` tags for everything else."""

    def __init__(self) -> None:
        super().__init__("%(message)s")
        self._tagged = logging.Formatter(f"[{_LOGGER_NAME}] %(levelname)s %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno == logging.INFO:
            return super().format(record)
        return self._tagged.format(record)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the gqlscan hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the gqlscan logger with console narration and an optional file sink.

    The console follows ``verbose``; the file sink always records DEBUG detail
    such as prompt sizes and error bodies.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG if log_file is not None else level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(NarrationFormatter())
    logger.addHandler(console)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


__all__ = ["NarrationFormatter", "configure_logging", "get_logger"]
