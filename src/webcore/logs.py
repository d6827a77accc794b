"""
Logging setup for webcore.

Every module logs through a namespaced logger (logging.getLogger(__name__)),
so the whole package can be tuned from one place:

    logging.getLogger("webcore").setLevel(logging.DEBUG)
    logging.getLogger("webcore.session").addHandler(file_handler)

configure_logging() is a convenience for applications that don't have
their own logging configuration yet.
"""

import logging
from typing import Optional

from .config import WebConfig


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(config: Optional[WebConfig] = None) -> logging.Logger:
    """
    Configure logging based on config.

    Args:
        config: Settings to read log_level from (defaults to WebConfig())

    Returns:
        The "webcore" package logger
    """
    config = config or WebConfig()
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    # No-op if the root logger already has handlers
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )

    package_logger = logging.getLogger("webcore")
    package_logger.setLevel(level)
    return package_logger
