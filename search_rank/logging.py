"""Structured logging helpers."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

# Request logs from these libraries include the full URL, API key included.
QUIET_LOGGERS = ("httpx", "httpcore")


def build_stdlib_handler(file: TextIO | None = None) -> logging.Handler:
    handler = logging.StreamHandler(file if file is not None else sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(),
            ],
            foreign_pre_chain=[
                structlog.stdlib.add_logger_name,
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
            ],
        )
    )
    return handler


def configure_logging(level: int | str = logging.INFO, file: TextIO | None = None) -> None:
    """Emit JSON events to ``file`` (stdout when omitted).

    Stdlib records are rendered to JSON through the same stream.
    """

    if isinstance(level, str):
        level = logging.getLevelNamesMapping()[level.upper()]
    logging.basicConfig(level=level, handlers=[build_stdlib_handler(file)])
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.set_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file),
        cache_logger_on_first_use=True,
    )


logger = structlog.get_logger()

__all__ = ["QUIET_LOGGERS", "build_stdlib_handler", "configure_logging", "logger"]
