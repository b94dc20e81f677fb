"""Raw IRC line dispatch into a CTCP listener."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..ctcp.scheduler import connection_label
from ..logs.logger import logger
from .parser import ChatMessage, build_chat_message, parse_irc_message

if TYPE_CHECKING:  # pragma: no cover
    from ..ctcp.listener import CtcpListener


class IRCDispatcher:
    """Splits incoming data into lines and routes PRIVMSG/NOTICE text.

    The dispatcher owns no socket: the transport hands it whatever it read and
    keeps the returned remainder for the next call.
    """

    def __init__(self, listener: CtcpListener, connection: Any) -> None:
        self.listener = listener
        self.connection = connection
        self.label = connection_label(connection)

    async def process_incoming_data(self, buffer: str, new_data: str) -> str:
        buffer += new_data
        while "\r\n" in buffer:
            line, buffer = buffer.split("\r\n", 1)
            if line.strip():
                await self.handle_line(line)
        return buffer

    async def handle_line(self, raw_line: str) -> None:
        logger.log_event(
            "irc", "raw", level=logging.DEBUG, connection=self.label, raw=raw_line
        )
        parsed = parse_irc_message(raw_line)
        if parsed.command is None:
            logger.log_event(
                "irc",
                "unparsable_line",
                level=logging.DEBUG,
                connection=self.label,
                raw=raw_line,
            )
            return
        chat = build_chat_message(parsed)
        if chat is None:
            return
        await self._route(chat)

    async def _route(self, chat: ChatMessage) -> None:
        logger.log_event(
            "irc",
            "chat_message",
            level=logging.DEBUG,
            connection=self.label,
            kind=chat.kind,
            sender=chat.sender.nick,
            target=chat.target,
        )
        if chat.kind == "PRIVMSG":
            await self.listener.on_privmsg(self.connection, chat.sender, chat.text)
        else:
            await self.listener.on_notice(self.connection, chat.sender, chat.text)
