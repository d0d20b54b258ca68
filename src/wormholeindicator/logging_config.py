"""
Logging Configuration
=====================
Console and file logging for the 'wormholeindicator' namespace.

The frame loop never logs per frame; what shows up here are state
transitions, session resets, alert changes and failures. Alert polls run on
worker threads, so every record carries the thread name.
"""
import logging
import sys
from typing import IO, Optional, Union

LOGGER_NAME = "wormholeindicator"
LOG_FORMAT = "%(asctime)s - %(threadName)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"


def level_from_name(name: str) -> int:
    """Map a CLI level name ('debug', 'INFO', ...) to a logging level."""
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level '{name}'.")
    return level


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """
    Configure the package logger and return it.

    Args:
        level: A logging level or its name ('debug', 'info', ...).
        log_file: Optional path; the file is truncated on every start.
        stream: Console stream, stdout by default.
    """
    if isinstance(level, str):
        level = level_from_name(level)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    # records stop here; the host's root logger keeps its own setup
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug(f"Logging initialized at {logging.getLevelName(level)}"
                 f"{' with file ' + log_file if log_file else ''}.")
    return logger
