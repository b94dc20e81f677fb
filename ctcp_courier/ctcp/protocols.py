"""Protocol definitions for the connection objects the CTCP layer talks to.

A connection only needs to know how to send a NOTICE and a PRIVMSG. Either
method may be a plain function or a coroutine function; callers await the
result when it is awaitable.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:  # pragma: no cover
    from .models import CtcpEvent


class CtcpTransport(Protocol):
    """Protocol for the per-connection transmit primitives."""

    def notice(self, recipient: str, text: str) -> Awaitable[None] | None:
        """Send ``text`` to ``recipient`` as a NOTICE (used for replies)."""
        ...

    def privmsg(self, recipient: str, text: str) -> Awaitable[None] | None:
        """Send ``text`` to ``recipient`` as a PRIVMSG (used for requests)."""
        ...


CtcpHandler = Callable[["CtcpEvent"], Any]
"""A request or response handler; may return an awaitable."""
