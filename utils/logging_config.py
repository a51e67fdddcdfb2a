"""
Configure simple logging for the command line and examples.
"""

import logging
import sys
from typing import Optional, TextIO, Union

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _level(value: Union[int, str]) -> int:
    if isinstance(value, int):
        return value
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: Union[int, str] = logging.INFO, stream: Optional[TextIO] = None) -> logging.Handler:
    """
    Send every record at or above ``level`` (a number or a name such as
    ``"debug"``) to a single handler on stdout, replacing existing handlers.
    """
    root = logging.getLogger()
    root.setLevel(_level(level))
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.handlers = [handler]
    return handler
