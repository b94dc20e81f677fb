"""CTCP subsystem package.

Contains the codec, handler registry, reply scheduler and listener.
"""

from .codec import (  # noqa: F401
    ENCODED_COMMANDS,
    build_message,
    extract,
    is_ctcp,
    quote,
    unquote,
)
from .listener import CtcpListener  # noqa: F401
from .models import CtcpEvent, CtcpToken, ReplyEntry, Sender  # noqa: F401
from .protocols import CtcpHandler, CtcpTransport  # noqa: F401
from .registry import HandlerRegistry  # noqa: F401
from .scheduler import ReplyScheduler, ReplySchedulerRegistry  # noqa: F401

__all__ = [
    "ENCODED_COMMANDS",
    "CtcpEvent",
    "CtcpHandler",
    "CtcpListener",
    "CtcpToken",
    "CtcpTransport",
    "HandlerRegistry",
    "ReplyEntry",
    "ReplyScheduler",
    "ReplySchedulerRegistry",
    "Sender",
    "build_message",
    "extract",
    "is_ctcp",
    "quote",
    "unquote",
]
