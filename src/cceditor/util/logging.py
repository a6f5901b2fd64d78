"""Logging configuration and utilities.

Centralized logging setup with appropriate formatters
and handlers for the CC editor.
"""

import logging
import sys
from typing import Optional, Union

ROOT_LOGGER_NAME = 'cceditor'
LOG_FORMATTER = logging.Formatter('%(asctime)s %(levelname)-7s [%(name)s] %(message)s',
                                  datefmt='%H:%M:%S')


def resolve_level(level: Union[int, str]) -> int:
    """Turn a level name from the config file into a logging level.

    Args:
        level: Numeric level or name such as "DEBUG"

    Returns:
        Numeric logging level (INFO when the name is unknown)
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """Attach console (and optionally file) output to the 'cceditor' logger.

    Calling it again replaces the handlers from the previous call, so the
    config file can be re-applied without duplicating output.

    Args:
        level: Logging level or level name from the config file
        log_file: Optional file that receives the same records as stdout

    Returns:
        The package root logger
    """
    level = resolve_level(level)
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    root.handlers.clear()

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))
    for handler in handlers:
        handler.setFormatter(LOG_FORMATTER)
        root.addHandler(handler)
    return root


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a specific module.

    Args:
        name: Module name for the logger

    Returns:
        Logger instance
    """
    return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')
