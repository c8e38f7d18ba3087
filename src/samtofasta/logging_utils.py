"""Logging utilities for samtofasta."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

PACKAGE_LOGGER = "samtofasta"
DEFAULT_LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_log_level(level: Union[int, str]) -> int:
    """Translate a level name such as ``"debug"`` into its numeric value."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def _file_handler(log_file: Union[str, Path], formatter: logging.Formatter) -> logging.FileHandler:
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_path)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: Union[int, str] = logging.INFO,
    fmt: str = DEFAULT_LOG_FORMAT,
    datefmt: str = DEFAULT_DATE_FORMAT,
    log_file: Optional[Union[str, Path]] = None,
    reconfigure: bool = False,
) -> None:
    """
    Configure the samtofasta package logger.

    Called once by the CLI entrypoint. Repeated calls only adjust the level
    and add a missing file handler unless ``reconfigure`` is set, in which case
    existing handlers are closed and rebuilt.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    level = resolve_log_level(level)
    formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

    if logger.handlers and not reconfigure:
        if log_file is not None:
            log_path = Path(log_file)
            has_file_handler = any(
                isinstance(handler, logging.FileHandler)
                and Path(getattr(handler, "baseFilename", "")) == log_path.absolute()
                for handler in logger.handlers
            )
            if not has_file_handler:
                logger.addHandler(_file_handler(log_path, formatter))
        logger.setLevel(level)
        return

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # Console handler (stderr)
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_file is not None:
        logger.addHandler(_file_handler(log_file, formatter))

    logger.setLevel(level)
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
