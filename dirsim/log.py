#!/usr/bin/env python3
"""Logging setup for the dirsim command line."""

import logging
import sys
from typing import Dict, Optional, TextIO, Union

LOGGER_NAME = 'dirsim'
DEFAULT_FORMAT = '%(levelname)s | %(name)s | %(message)s'

# Marks handlers installed here so reconfiguring replaces only our own
_HANDLER_TAG_ATTR = '_dirsim_handler'

_LEVEL_MAP: Dict[str, int] = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'WARN': logging.WARNING,
    'ERROR': logging.ERROR,
}


def _parse_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    return _LEVEL_MAP.get(level.upper(), logging.WARNING)


def setup_logging(level: Union[str, int] = logging.WARNING,
                  stream: Optional[TextIO] = None,
                  fmt: str = DEFAULT_FORMAT) -> logging.Logger:
    """
    Attach a single stream handler to the package logger.

    Calling it again swaps the handler rather than stacking a second one.
    Log output goes to stderr by default so it never mixes with command
    output on stdout.
    """
    logger = logging.getLogger(LOGGER_NAME)
    level_int = _parse_level(level)

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_TAG_ATTR, False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    handler.setLevel(level_int)
    setattr(handler, _HANDLER_TAG_ATTR, True)

    logger.addHandler(handler)
    logger.setLevel(level_int)
    logger.propagate = False
    return logger
