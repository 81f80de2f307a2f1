"""femtologging helpers shared by every Gaffer module.

femtologging's ``log`` call takes a finished string, so call sites pass a
``%``-style template and arguments and the helpers here do the formatting.
Webhook handling, assignment, and chat delivery therefore share one shape.

Example:
>>> from gaffer.logging import get_logger, log_info
>>> logger = get_logger(__name__)
>>> log_info(logger, "Assigned %s to %s", "42!7", "Alice")

"""

from __future__ import annotations

import enum
import typing as typ

from femtologging import basicConfig, get_logger


class LogLevel(enum.StrEnum):
    """Level names femtologging accepts, including the ``WARN`` alias."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


_FALLBACK_LEVEL = LogLevel.INFO.value


def normalize_log_level(level: str | None) -> tuple[str, bool]:
    """Return ``(level, invalid)`` for a raw ``GAFFER_LOG_LEVEL`` value.

    Blank and unrecognised values fall back to ``INFO`` with ``invalid`` set,
    so the caller can warn about them once logging is configured.
    """
    candidate = (level or "").strip().upper()
    if candidate in LogLevel.__members__:
        return (candidate, False)
    return (_FALLBACK_LEVEL, True)


def configure_logging(level: str, *, force: bool = False) -> tuple[str, bool]:
    """Install femtologging's root configuration at the normalized level.

    Returns
    -------
    tuple[str, bool]
        The level applied and whether ``level`` had to be replaced.

    """
    normalized, invalid = normalize_log_level(level)
    basicConfig(level=normalized, force=force)
    return (normalized, invalid)


def format_log_message(template: str, *args: object) -> str:
    """Interpolate ``args`` into ``template``; without args it is returned as is."""
    return template % args if args else template


class _SupportsLog(typ.Protocol):
    """The part of a femtologging logger these helpers call."""

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
    logger: _SupportsLog, level: str, message: str, exc_info: object | None
) -> None:
    logger.log(level, message, exc_info=exc_info, stack_info=False)


def log_debug(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log at DEBUG; see :func:`log_info`."""
    _emit(logger, "DEBUG", format_log_message(template, *args), exc_info)


def log_info(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Format ``template`` with ``args`` and log it at INFO.

    Parameters
    ----------
    logger : _SupportsLog
        femtologging logger, usually the module's ``logger``.
    template : str
        Message with ``%`` placeholders.
    *args : object
        Values for the placeholders.
    exc_info : object | None, optional
        Exception to attach to the record.

    """
    _emit(logger, "INFO", format_log_message(template, *args), exc_info)


def log_warning(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log at WARNING; see :func:`log_info`."""
    _emit(logger, "WARNING", format_log_message(template, *args), exc_info)


def log_error(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log at ERROR; see :func:`log_info`."""
    _emit(logger, "ERROR", format_log_message(template, *args), exc_info)


def log_exception(logger: _SupportsLog, message: str, exc: BaseException) -> None:
    """Log the already-formatted ``message`` at ERROR with ``exc`` attached."""
    _emit(logger, "ERROR", message, exc)


__all__ = [
    "LogLevel",
    "configure_logging",
    "format_log_message",
    "get_logger",
    "log_debug",
    "log_error",
    "log_exception",
    "log_info",
    "log_warning",
    "normalize_log_level",
]
