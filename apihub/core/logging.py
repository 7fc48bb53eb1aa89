"""Structured logging configuration for the API hub.

Uses structlog for JSON-formatted, production-ready logging with context management.
"""

import logging

import structlog

from apihub.config import config


def configure_logging():
    """Configure structured logging with JSON output for production observability."""
    level = getattr(logging, config.log_level(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return structlog.get_logger()


# Global logger instance
logger = configure_logging()


def get_logger():
    """Get the configured logger instance."""
    return logger
