"""
ModWatch Structured Logging Module.

Provides consistent, structured logging throughout the library.
Requires Python 3.11+.
"""

import logging
import os
import sys
from typing import IO, Any

import structlog
from structlog.types import Processor

from utils.config import get_settings

# Handle opened for LOG_FILE_PATH; replaced and closed on reconfiguration
_log_file: IO[str] | None = None


def _add_app_context(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add application name, version and process id to all log entries."""
    settings = get_settings()
    event_dict["app"] = settings.app_name
    event_dict["version"] = settings.app_version
    event_dict["pid"] = os.getpid()
    return event_dict


def _open_log_file() -> IO[str] | None:
    global _log_file

    if _log_file is not None:
        _log_file.close()
        _log_file = None

    file_path = get_settings().logging.file_path
    if file_path is not None:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        _log_file = file_path.open("at", encoding="utf-8")
    return _log_file


def configure_logging() -> None:
    """
    Configure structured logging for the application.

    Call this at application startup. Library code never calls it;
    it only asks for loggers. Calling it again applies changed settings
    and closes any log file opened by the previous call.
    """
    settings = get_settings()
    level = getattr(logging, settings.logging.level.upper())
    log_file = _open_log_file()

    # Common processors for all output formats
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
        _add_app_context,
    ]

    if settings.logging.format == "json":
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(
                colors=log_file is None,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    logger_factory: Any
    if log_file is not None:
        logger_factory = structlog.WriteLoggerFactory(file=log_file)
    else:
        logger_factory = structlog.PrintLoggerFactory()

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=logger_factory,
        # Off so a reconfiguration never leaves loggers on a closed file
        cache_logger_on_first_use=False,
    )

    # Configure standard library logging for third-party output
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


class LoggerMixin:
    """
    Mixin class to add logging capability to any class.

    Usage:
        class MyClass(LoggerMixin):
            def my_method(self):
                self.log.info("doing something", key="value")
    """

    @property
    def log(self) -> structlog.stdlib.BoundLogger:
        """Get logger bound to this class name."""
        if not hasattr(self, "_logger"):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger
