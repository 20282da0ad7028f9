"""Structlog configuration shared by the API process and the worker."""

import logging

import structlog

from gatekeeper.config import Settings


def configure_logging(settings: Settings) -> None:
    """Configure structlog for the current process.

    JSON lines are emitted in production; elsewhere the console renderer
    is used.

    Args:
        settings: Application settings (log level and environment)
    """
    level = logging.getLevelNamesMapping().get(settings.log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            (
                structlog.processors.JSONRenderer()
                if settings.is_production
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
