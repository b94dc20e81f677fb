"""IRC line adapter package.

Parses raw PRIVMSG/NOTICE lines and hands their text to a CTCP listener.
"""

from .dispatcher import IRCDispatcher  # noqa: F401
from .parser import (  # noqa: F401
    ChatMessage,
    IRCMessage,
    build_chat_message,
    parse_irc_message,
    parse_sender,
)

__all__ = [
    "ChatMessage",
    "IRCDispatcher",
    "IRCMessage",
    "build_chat_message",
    "parse_irc_message",
    "parse_sender",
]
