"""Logging utilities for usingstats commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "usingstats"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the usingstats hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, quiet: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the usingstats logger with stderr output and optional file sink.

    ``quiet`` drops the INFO phase records ("Loading ...", "Walking ...") from
    stderr so that only the table and fatal messages remain; the file sink
    still receives them. ``verbose`` wins over ``quiet``.
    """
    file_level = logging.DEBUG if verbose else logging.INFO
    if verbose:
        stream_level = logging.DEBUG
    elif quiet:
        stream_level = logging.WARNING
    else:
        stream_level = logging.INFO

    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(file_level if log_file is not None else stream_level)
    logger.propagate = False

    # The CLI may run several times in one process (tests); start from a clean slate.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # stdout belongs to the result table.
    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(stream_level)
    stream_handler.setFormatter(logging.Formatter("[usingstats] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger"]
