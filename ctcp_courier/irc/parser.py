"""IRC message parsing utilities."""

from __future__ import annotations

from dataclasses import dataclass

from ..ctcp.models import Sender


@dataclass
class IRCMessage:
    raw: str
    prefix: str | None
    command: str | None
    params: str
    tags: dict[str, str]


def parse_irc_message(raw_line: str) -> IRCMessage:
    tags: dict[str, str] = {}
    prefix: str | None = None
    params = ""
    command: str | None = None

    original = raw_line

    if raw_line.startswith("@"):
        if " " in raw_line:
            tags_part, raw_line = raw_line.split(" ", 1)
        else:
            tags_part, raw_line = raw_line, ""
        tags = _parse_tags(tags_part[1:])

    if raw_line.startswith(":"):
        remainder = raw_line[1:]
        if " " in remainder:
            prefix, raw_line = remainder.split(" ", 1)
        else:  # malformed; treat whole remainder as prefix and leave rest empty
            prefix = remainder
            raw_line = ""

    if " :" in raw_line:
        raw_line, params = raw_line.split(" :", 1)

    parts = raw_line.split()
    if parts:
        command = parts[0].upper()
        if len(parts) > 1:
            middle = parts[1:]
            params = " ".join(middle) + (f" {params}" if params else "")

    return IRCMessage(
        raw=original, prefix=prefix, command=command, params=params, tags=tags
    )


def _parse_tags(raw_tags: str) -> dict[str, str]:
    tags: dict[str, str] = {}
    for tag in raw_tags.split(";"):
        if "=" in tag:
            k, v = tag.split("=", 1)
        else:
            k, v = tag, ""
        tags[k] = v
    return tags


def parse_sender(prefix: str) -> Sender:
    """Split a ``nick!user@host`` prefix; user and host are optional."""
    nick, _, rest = prefix.partition("!")
    user, _, host = rest.partition("@")
    if not rest and "@" in nick:
        nick, _, host = nick.partition("@")
    return Sender(nick=nick, user=user or None, host=host or None)


@dataclass
class ChatMessage:
    kind: str
    sender: Sender
    target: str
    text: str
    tags: dict[str, str]


def build_chat_message(parsed: IRCMessage) -> ChatMessage | None:
    """Return the PRIVMSG/NOTICE carried by ``parsed``, or None for anything else."""
    if parsed.command not in ("PRIVMSG", "NOTICE") or not parsed.prefix:
        return None
    params = parsed.params.split(" ", 1)
    if len(params) < 2:
        return None
    target, text = params
    return ChatMessage(
        kind=parsed.command,
        sender=parse_sender(parsed.prefix),
        target=target,
        text=text,
        tags=parsed.tags,
    )
