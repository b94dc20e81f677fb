"""Internal error hierarchy and error logging helpers."""

from .handling import classify_error, log_error  # noqa: F401
from .internal import (  # noqa: F401
    CtcpError,
    NoEventLoopError,
    SchedulerClosedError,
    TransportError,
)

__all__ = [
    "CtcpError",
    "NoEventLoopError",
    "SchedulerClosedError",
    "TransportError",
    "classify_error",
    "log_error",
]
