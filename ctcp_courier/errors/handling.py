from __future__ import annotations

import logging
from collections.abc import Mapping

from ..logs.logger import logger
from .internal import CtcpError, NoEventLoopError, SchedulerClosedError, TransportError


def classify_error(error: BaseException) -> str:
    """Return a short category name used to tag logged errors."""
    if isinstance(error, TransportError | OSError | ConnectionError):
        return "transport"
    if isinstance(error, SchedulerClosedError | NoEventLoopError):
        return "lifecycle"
    if isinstance(error, CtcpError):
        return "internal"
    return "handler"


def log_error(
    message: str,
    error: BaseException,
    context: Mapping[str, object] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Log an error message with the associated exception details.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging. ``connection``
            and ``target`` keys are rendered in the log line prefix.
        level: Logging level (default: ERROR).
    """
    error_type = classify_error(error)
    fields: dict[str, object] = dict(context or {})
    if isinstance(error, CtcpError):
        for key, value in error.data.items():
            fields.setdefault(key, value)
    logger.log_event(
        "error",
        "logged",
        level=level,
        error_type=error_type.upper(),
        message=f"{message}: {type(error).__name__}: {error}",
        **fields,
    )
