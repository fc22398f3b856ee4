"""Structured logging configuration.

Uses structlog with ISO timestamps. Console rendering by default, JSON lines
when running under a log collector.
"""

from __future__ import annotations

import logging
import sys

import structlog

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _stderr_logger(*_args) -> structlog.PrintLogger:
    # resolved per call so a swapped sys.stderr is always honoured
    return structlog.PrintLogger(sys.stderr)


def configure_logging(level: str = "info", *, json: bool = False) -> None:
    """Configure structlog processors. Later calls replace earlier ones."""
    if json:
        renderers = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        renderers = [structlog.dev.ConsoleRenderer()]
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            *renderers,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _LEVELS.get(level, logging.INFO)
        ),
        context_class=dict,
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a structlog logger bound with *name*."""
    return structlog.get_logger(logger_name=name)
