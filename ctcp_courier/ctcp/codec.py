"""CTCP message codec.

Embedded CTCP messages look like ``\\x01COMMAND ARG ARG\\x01`` inside the text
of a PRIVMSG or NOTICE. Arguments of the commands in ``ENCODED_COMMANDS`` use
the low-level quoting table below; every other command carries plaintext.

    NUL -> \\0    SOH -> \\1    LF -> \\n    CR -> \\r    space -> \\@    \\ -> \\\\
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator

from .models import CtcpToken

CTCP_DELIMITER = "\x01"
CTCP_PATTERN = re.compile(r"\x01(.+?)\x01")
ENCODED_COMMANDS = frozenset({"VERSION", "PING"})

_QUOTE_TABLE = {
    "\0": "\\0",
    "\x01": "\\1",
    "\n": "\\n",
    "\r": "\\r",
    " ": "\\@",
    "\\": "\\\\",
}
_UNQUOTE_TABLE = {escaped[1]: char for char, escaped in _QUOTE_TABLE.items()}
_UNQUOTE_PATTERN = re.compile(r"\\([01nr@\\])")


def is_encoded(command: str) -> bool:
    return command.upper() in ENCODED_COMMANDS


def quote(text: str) -> str:
    return "".join(_QUOTE_TABLE.get(char, char) for char in text)


def unquote(text: str) -> str:
    """Reverse :func:`quote`.

    A single left-to-right pass so an unescaped backslash is never read again
    as the start of another sequence. Unknown sequences are left as they are.
    """
    return _UNQUOTE_PATTERN.sub(lambda m: _UNQUOTE_TABLE[m.group(1)], text)


def is_ctcp(text: str) -> bool:
    return CTCP_PATTERN.search(text) is not None


def parse_token(body: str) -> CtcpToken | None:
    """Decode the text found between two delimiters, or None if it has no command."""
    parts = [part for part in body.split(" ") if part]
    if not parts:
        return None
    command, args = parts[0], parts[1:]
    if is_encoded(command):
        args = [unquote(arg) for arg in args]
    return CtcpToken(command=command, args=tuple(args))


def extract(line: str) -> Iterator[CtcpToken]:
    """Yield every CTCP token embedded in ``line``, in order of appearance.

    An unterminated delimiter is not an error; that segment is simply skipped.
    """
    for match in CTCP_PATTERN.finditer(line):
        token = parse_token(match.group(1))
        if token is not None:
            yield token


def build_message(command: str, args: Iterable[str] = ()) -> str:
    """Wrap ``command`` and ``args`` in delimiters, quoting encoded commands."""
    args = list(args)
    if is_encoded(command):
        args = [quote(arg) for arg in args]
    return CTCP_DELIMITER + " ".join([command, *args]) + CTCP_DELIMITER


__all__ = [
    "CTCP_DELIMITER",
    "ENCODED_COMMANDS",
    "build_message",
    "extract",
    "is_ctcp",
    "is_encoded",
    "parse_token",
    "quote",
    "unquote",
]
