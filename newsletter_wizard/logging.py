"""
Logging setup for applications embedding newsletter-wizard.

The runtime logs through loguru. setup_logging() is opt-in: it installs one
sink tagged with the service name and routes the HTTP libraries' stdlib
loggers into loguru. It leaves the root stdlib logger alone unless asked.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

from loguru import logger

from newsletter_wizard.config import Settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<magenta>{extra[service]}</magenta> | <cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Loggers of the libraries the transport is built on
HTTP_LOGGERS = ("httpx", "httpcore")


class InterceptHandler(logging.Handler):
    """Forward stdlib log records to loguru, keeping the original caller."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(
    settings: Settings | None = None,
    level: str | None = None,
    sink: TextIO | Any = sys.stderr,
    intercept_root: bool = False,
) -> int:
    """Install a loguru sink for the invocation runtime.

    Args:
        settings: Source of SERVICE_NAME and LOG_LEVEL. Defaults to Settings().
        level: Overrides settings.LOG_LEVEL.
        sink: Where log lines go (stream, path or callable).
        intercept_root: Also route every stdlib logger into loguru.

    Returns:
        The loguru sink id, for logger.remove().
    """
    settings = settings or Settings()
    level = (level or settings.LOG_LEVEL).upper()

    logger.remove()
    logger.configure(extra={"service": settings.SERVICE_NAME})
    colorize = sink in (sys.stdout, sys.stderr)
    sink_id = logger.add(sink, format=LOG_FORMAT, level=level, colorize=colorize)

    if intercept_root:
        logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    # httpx logs every request at INFO; only surface that when debugging
    for name in HTTP_LOGGERS:
        http_logger = logging.getLogger(name)
        http_logger.handlers = [InterceptHandler()]
        http_logger.propagate = False
        http_logger.setLevel(logging.DEBUG if level == "DEBUG" else logging.WARNING)

    logger.debug(f"Logging initialized for {settings.SERVICE_NAME} at {level}")
    return sink_id
