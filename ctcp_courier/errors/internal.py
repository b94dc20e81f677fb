"""Centralized internal error hierarchy.

Nothing in the CTCP path lets these escape to the transport layer; they exist
so transports and lifecycle code can signal failures with structured context
that the delivery worker and dispatcher log before moving on.

Classes:
  CtcpError            – Base for all internal errors.
  TransportError       – The connection could not transmit a line.
  SchedulerClosedError – A stopped reply scheduler was asked to start again.
  NoEventLoopError     – A reply scheduler was needed but no loop was open.
"""

from __future__ import annotations

from collections.abc import Mapping


class CtcpError(Exception):
    """Base class for all internal errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class TransportError(CtcpError):
    """Raised by a connection when a NOTICE or PRIVMSG could not be written."""


class SchedulerClosedError(CtcpError):
    """Raised when starting a reply scheduler that has already been stopped."""


class NoEventLoopError(CtcpError):
    """Raised when no open event loop is known to run a reply worker on."""


__all__ = ["CtcpError", "TransportError", "SchedulerClosedError", "NoEventLoopError"]
