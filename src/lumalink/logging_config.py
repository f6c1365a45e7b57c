"""Unified logging configuration for lumalink.

This module provides a centralized logging configuration that ensures all log
entries (from both the library and uvicorn) include timestamps and follow
a consistent format.

Usage:
    At application startup:
    >>> from lumalink.logging_config import configure_logging
    >>> configure_logging()

    When starting uvicorn:
    >>> from lumalink.logging_config import get_uvicorn_log_config
    >>> uvicorn.run(app, log_config=get_uvicorn_log_config())

Configuration:
    - Log level: Set via LUMALINK_LOG_LEVEL environment variable (default: INFO)
    - Access logs: Shown at the log level only when LUMALINK_VERBOSE_LOGGING is set
    - Transport loggers: LUMALINK_TRANSPORT_LOG_LEVEL (default: the log level)
    - Format: "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"
    - Date format: "%Y-%m-%d %H:%M:%S"
"""

import logging
import logging.config
import os
from typing import Any, Dict

from .utils import get_env_bool

LOG_LEVEL_ENV = "LUMALINK_LOG_LEVEL"
VERBOSE_LOGGING_ENV = "LUMALINK_VERBOSE_LOGGING"
TRANSPORT_LOG_LEVEL_ENV = "LUMALINK_TRANSPORT_LOG_LEVEL"

LOG_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_log_level() -> str:
    """Get the log level from environment variable with fallback."""
    return (os.getenv(LOG_LEVEL_ENV, "INFO") or "INFO").upper()


def get_transport_log_level(default: str) -> str:
    """Get the level for the transport loggers.

    Retry attempts and settle-window waits are logged per device on every
    poll, so they can be silenced or opened up without touching the rest.
    """
    return (os.getenv(TRANSPORT_LOG_LEVEL_ENV, default) or default).upper()


def get_logging_config() -> Dict[str, Any]:
    """Generate a unified logging configuration dictionary.

    Access logs (every device poll from an automation layer) are only shown
    in verbose mode; otherwise they are limited to warnings.
    """
    log_level = get_log_level()
    transport_log_level = get_transport_log_level(log_level)
    access_log_level = log_level if get_env_bool(VERBOSE_LOGGING_ENV, False) else "WARNING"

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": LOG_FORMAT,
                "datefmt": DATE_FORMAT,
            },
            "access": {
                "format": LOG_FORMAT,
                "datefmt": DATE_FORMAT,
            },
        },
        "handlers": {
            "default": {
                "formatter": "default",
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
            },
            "access": {
                "formatter": "access",
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "uvicorn": {
                "handlers": ["default"],
                "level": log_level,
                "propagate": False,
            },
            "uvicorn.error": {
                "handlers": ["default"],
                "level": log_level,
                "propagate": False,
            },
            "uvicorn.access": {
                "handlers": ["access"],
                "level": access_log_level,
                "propagate": False,
            },
            "lumalink": {
                "handlers": ["default"],
                "level": log_level,
                "propagate": False,
            },
            # No handlers: records reach the "lumalink" handler by propagation
            "lumalink.transports": {
                "level": transport_log_level,
            },
        },
        "root": {
            "level": log_level,
            "handlers": ["default"],
        },
    }


def configure_logging() -> None:
    """Configure logging for the entire application.

    Call once at startup, before other logging configuration.
    """
    logging.config.dictConfig(get_logging_config())


def get_uvicorn_log_config() -> Dict[str, Any]:
    """Get uvicorn-specific log configuration.

    Same dictionary as :func:`get_logging_config` so uvicorn and the library
    share one format.
    """
    return get_logging_config()
