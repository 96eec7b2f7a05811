"""Logging helpers for femtologging integration.

Reconciliation code logs pre-formatted messages through these helpers so
every lifecycle line reads the same regardless of the caller.

Example:
>>> from repokeeper.logging import get_logger, log_debug
>>> logger = get_logger(__name__)
>>> log_debug(logger, "read github repository %s/%s", "octo", "reef")

"""

from __future__ import annotations

import enum
import os
import typing as typ

from femtologging import basicConfig, get_logger

LOG_LEVEL_ENV_VAR = "REPOKEEPER_LOG_LEVEL"


class LogLevel(enum.StrEnum):
    """Log levels accepted by femtologging."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def normalize_log_level(level: str | None) -> tuple[str, bool]:
    """Normalize a log level string and report invalid inputs.

    Parameters
    ----------
    level : str | None
        Raw log level string to normalize.

    Returns
    -------
    tuple[str, bool]
        The normalized log level and a flag indicating invalid input.

    """
    if not level:
        return (LogLevel.INFO.value, True)

    normalized = level.strip().upper()
    if normalized in LogLevel.__members__:
        return (normalized, False)

    return (LogLevel.INFO.value, True)


def configure_logging(
    level: str | None = None, *, force: bool = False
) -> tuple[str, bool]:
    """Configure femtologging and return the normalized level.

    When ``level`` is ``None`` the value of ``REPOKEEPER_LOG_LEVEL`` is used.
    An unset variable is not treated as invalid.
    """
    if level is None:
        raw = os.environ.get(LOG_LEVEL_ENV_VAR, "")
        if not raw.strip():
            basicConfig(level=LogLevel.INFO.value, force=force)
            return (LogLevel.INFO.value, False)
        level = raw

    normalized, invalid = normalize_log_level(level)
    basicConfig(level=normalized, force=force)
    return (normalized, invalid)


def format_log_message(template: str, *args: object) -> str:
    """Format a log message using percent-style interpolation."""
    return template % args if args else template


class _SupportsLog(typ.Protocol):
    """Protocol for femtologging-compatible loggers."""

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str | None: ...


def _emit(
    logger: _SupportsLog,
    level: LogLevel,
    template: str,
    args: tuple[object, ...],
    exc_info: object | None,
) -> None:
    logger.log(
        level.value,
        format_log_message(template, *args),
        exc_info=exc_info,
        stack_info=False,
    )


def log_debug(logger: _SupportsLog, template: str, *args: object) -> None:
    """Log a DEBUG message with percent-style formatting."""
    _emit(logger, LogLevel.DEBUG, template, args, None)


def log_info(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log an INFO message with percent-style formatting."""
    _emit(logger, LogLevel.INFO, template, args, exc_info)


def log_warning(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log a WARNING message with percent-style formatting.

    Parameters
    ----------
    logger : _SupportsLog
        Logger that receives the formatted message.
    template : str
        Message template using percent-style placeholders.
    *args : object
        Values to interpolate into the template.
    exc_info : object | None, optional
        Exception information to attach to the log record.

    """
    _emit(logger, LogLevel.WARNING, template, args, exc_info)


def log_error(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log an ERROR message with percent-style formatting.

    Parameters
    ----------
    logger : _SupportsLog
        Logger that receives the formatted message.
    template : str
        Message template using percent-style placeholders.
    *args : object
        Values to interpolate into the template.
    exc_info : object | None, optional
        Exception information to attach to the log record.

    """
    _emit(logger, LogLevel.ERROR, template, args, exc_info)


__all__ = [
    "LOG_LEVEL_ENV_VAR",
    "LogLevel",
    "configure_logging",
    "format_log_message",
    "get_logger",
    "log_debug",
    "log_error",
    "log_info",
    "log_warning",
    "normalize_log_level",
]
