"""Logging setup for the T20 attribute calculator."""

import logging
import sys

import structlog

from t20ac.config import Settings, get_settings


def configure_logging(settings: Settings | None = None) -> None:
    """
    Configure structlog output from settings.

    Events go to stderr, rendered for the console or as JSON, and events
    below settings.log_level are dropped.
    """
    if settings is None:
        settings = get_settings()

    level = logging.getLevelNamesMapping().get(settings.log_level.upper(), logging.INFO)
    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=False,
    )


def ensure_logging(settings: Settings | None = None) -> None:
    """Configure logging unless the host application already has."""
    if not structlog.is_configured():
        configure_logging(settings)
