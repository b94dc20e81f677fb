"""Shared CTCP data models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover
    from .listener import CtcpListener


@dataclass(frozen=True, slots=True)
class Sender:
    """Identity of the user a message came from (``nick!user@host``)."""

    nick: str
    user: str | None = None
    host: str | None = None

    def __str__(self) -> str:
        return self.nick


@dataclass(frozen=True, slots=True)
class CtcpToken:
    command: str
    args: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ReplyEntry:
    recipient: str
    message: str


@dataclass(frozen=True, slots=True)
class CtcpEvent:
    """A decoded CTCP request or response as seen by handlers.

    ``listener`` is the listener that decoded the token; built-in handlers use
    it to answer only the requests their own listener parsed.
    """

    command: str
    listener: CtcpListener
    connection: Any
    sender: Sender
    args: tuple[str, ...] = ()


def resolve_recipient(recipient: str | Sender | Mapping[str, Any]) -> str:
    """Reduce a recipient given as a sender record to its nickname."""
    if isinstance(recipient, Sender):
        return recipient.nick
    if isinstance(recipient, Mapping):
        return str(recipient["nick"])
    return recipient
