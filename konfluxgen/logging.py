"""Logging setup for konflux-gen runs.

Console output carries progress (configs found, manifests written); the
optional log file always records DEBUG so a CI job can keep the per-file
trace (parsed configs, excluded images, replaced components) without
flooding its console.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .errors import ConfigurationError

_LOGGER_NAME = "konfluxgen"

CONSOLE_FORMAT = "[konflux-gen] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the konfluxgen hierarchy."""
    return logging.getLogger(f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME)


def console_level(*, verbose: bool = False, quiet: bool = False) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def configure_logging(
    *, verbose: bool = False, quiet: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Attach a console handler and, when ``log_file`` is set, a DEBUG file handler."""
    logger = logging.getLogger(_LOGGER_NAME)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    level = console_level(verbose=verbose, quiet=quiet)
    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            sink = logging.FileHandler(log_file, encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"cannot open log file {log_file}: {exc}") from exc
        sink.setLevel(logging.DEBUG)
        sink.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(sink)
        level = logging.DEBUG

    logger.setLevel(level)
    return logger


__all__ = ["configure_logging", "console_level", "get_logger"]
