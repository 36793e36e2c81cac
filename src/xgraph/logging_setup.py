"""Logging configuration for XGraph.

Provides consistent structured logging setup across the CLI and MCP server.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, Dict, List

import structlog

PROFILE_ENV_VAR = "XGRAPH_LOG_PROFILE"


def configure_logging(
    level: str = "INFO",
    enable_colors: bool = True,
    enable_json: bool = False,
    extra_processors: List[Any] | None = None,
) -> None:
    """Configure structured logging for XGraph.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        enable_colors: Enable colored output for console
        enable_json: Use JSON output format
        extra_processors: Additional structlog processors
    """
    if level.upper() not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {level}")

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=LOG_LEVELS[level.upper()],
    )

    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="ISO"),
    ]

    if extra_processors:
        processors.extend(extra_processors)

    if enable_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(colors=enable_colors and sys.stderr.isatty())
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVELS[level.upper()]),
        logger_factory=structlog.WriteLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def configure_profile(profile: str | None = None) -> str:
    """Apply one of the predefined CONFIGS profiles.

    Args:
        profile: Profile name; falls back to ``$XGRAPH_LOG_PROFILE``,
            then to ``development``

    Returns:
        Name of the applied profile
    """
    name = profile or os.environ.get(PROFILE_ENV_VAR) or "development"
    if name not in CONFIGS:
        raise ValueError(f"Unknown logging profile: {name}. Use one of {', '.join(CONFIGS)}")
    configure_logging(**CONFIGS[name])
    return name


def get_logger(name: str = __name__) -> structlog.BoundLogger:
    return structlog.get_logger(name)


LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Default configuration for different environments
CONFIGS: Dict[str, Dict[str, Any]] = {
    "development": {
        "level": "DEBUG",
        "enable_colors": True,
        "enable_json": False,
    },
    "production": {
        "level": "INFO",
        "enable_colors": False,
        "enable_json": True,
    },
    "testing": {
        "level": "WARNING",
        "enable_colors": False,
        "enable_json": False,
    },
}
