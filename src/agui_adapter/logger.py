"""
Logging setup for the adapter.

All modules obtain their logger through ``get_logger(__name__)``; output
goes through loguru so sinks and levels are configured in one place.
"""

import os
import sys
from typing import Optional

from loguru import logger as _logger

LOG_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
)

_logger.configure(extra={"name": "agui_adapter"})


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    """
    Replace the default loguru sinks.

    Args:
        level: Minimum level for the stderr sink.
        log_file: Optional path for a rotating DEBUG-level file sink.
    """
    _logger.remove()
    _logger.add(sys.stderr, level=level, format=LOG_FORMAT)

    if log_file:
        _logger.add(log_file, rotation="10 MB", retention=2, level="DEBUG")

    os.environ["LOGURU_LEVEL"] = level


def get_logger(name: str):
    """Return a loguru logger bound to the given module name."""
    return _logger.bind(name=name)
