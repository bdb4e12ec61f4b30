"""
Logging utilities for PyGNSS-SINEX.

Uses structlog for structured logging with optional JSON output. Events
are emitted through the standard library ``pygnss_sinex`` logger, so an
application that already configures logging sees them without calling
setup_logging(). setup_logging() only attaches handlers to that package
logger and leaves the root logger alone.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from pygnss_sinex.core.config import LoggingConfig


PACKAGE_LOGGER = "pygnss_sinex"
LOG_FILENAME = "pygnss_sinex.log"

# Handlers installed by setup_logging(), replaced on the next call
_installed_handlers: list[logging.Handler] = []


def _build_handlers(
    log_dir: Path | str | None,
    log_to_file: bool,
    log_to_console: bool,
) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []
    if log_to_console:
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_to_file and log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path / LOG_FILENAME))
    return handlers


def setup_logging(
    level: str = "INFO",
    log_dir: Path | str | None = None,
    log_to_file: bool = False,
    log_to_console: bool = True,
    json_format: bool = False,
) -> None:
    """Configure logging of SINEX reader events.

    Calling this again replaces the handlers from the previous call.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for the log file
        log_to_file: Whether to log to file
        log_to_console: Whether to log to stderr
        json_format: Use JSON format for logs
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in _installed_handlers:
        package_logger.removeHandler(handler)
        handler.close()
    _installed_handlers[:] = _build_handlers(log_dir, log_to_file, log_to_console)

    formatter = logging.Formatter("%(message)s")
    for handler in _installed_handlers:
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
    package_logger.setLevel(log_level)
    # Events go to the installed handlers only
    package_logger.propagate = not _installed_handlers

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]
    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def setup_logging_from_config(config: LoggingConfig) -> None:
    """Configure logging from a LoggingConfig section."""
    setup_logging(
        level=config.level,
        log_dir=config.log_dir,
        log_to_file=config.log_to_file,
        log_to_console=config.log_to_console,
        json_format=config.json_format,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return structlog.get_logger(name)
