"""Structured logging setup shared by the pipeline and the CLI"""

import logging
import sys

import structlog

from postindex.config import Settings


def setup_logging(settings: Settings) -> None:
    """Configure structlog on top of stdlib logging.

    Console rendering by default; JSON lines when settings.log_json is set.
    Log output goes to stderr so command output on stdout stays clean.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=settings.log_level.upper(),
        force=True,
    )

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=shared_processors + [renderer],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str):
    """Return a logger bound with the module name"""
    return structlog.get_logger(name)
