from __future__ import annotations

from ctcp_courier.ctcp.models import Sender
from ctcp_courier.irc.parser import build_chat_message, parse_irc_message, parse_sender


def test_parse_malformed_missing_spaces():  # type: ignore[no-untyped-def]
    raw = ":nick!user@hostPRIVMSG#chan:hello"  # missing space before command
    msg = parse_irc_message(raw)
    assert msg.raw == raw
    assert msg.command is None
    assert build_chat_message(msg) is None


def test_parse_tags_and_params():  # type: ignore[no-untyped-def]
    raw = "@time=2024-01-01T00:00:00Z;flag :nick!u@h PRIVMSG #room :Hello there"
    msg = parse_irc_message(raw)
    assert msg.tags == {"time": "2024-01-01T00:00:00Z", "flag": ""}
    assert msg.command == "PRIVMSG"
    chat = build_chat_message(msg)
    assert chat is not None
    assert chat.kind == "PRIVMSG"
    assert chat.sender == Sender(nick="nick", user="u", host="h")
    assert chat.target == "#room"
    assert chat.text == "Hello there"


def test_ctcp_payload_survives_parsing():  # type: ignore[no-untyped-def]
    msg = parse_irc_message(":bob!b@host NOTICE me :\x01VERSION client 1.0\x01")
    chat = build_chat_message(msg)
    assert chat is not None
    assert chat.kind == "NOTICE"
    assert chat.text == "\x01VERSION client 1.0\x01"


def test_lowercase_command_is_normalized():  # type: ignore[no-untyped-def]
    msg = parse_irc_message(":bob!b@host privmsg me :hi")
    assert msg.command == "PRIVMSG"


def test_build_chat_message_other_command():  # type: ignore[no-untyped-def]
    assert build_chat_message(parse_irc_message(":nick!u@h PING :pong")) is None
    assert build_chat_message(parse_irc_message(":irc.example.org 001 me :Welcome")) is None


def test_build_chat_message_missing_params():  # type: ignore[no-untyped-def]
    assert build_chat_message(parse_irc_message(":nick!u@h PRIVMSG #room")) is None


def test_build_chat_message_requires_prefix():  # type: ignore[no-untyped-def]
    assert build_chat_message(parse_irc_message("PRIVMSG #room :hi")) is None


def test_parse_sender_variants():  # type: ignore[no-untyped-def]
    assert parse_sender("nick!user@host") == Sender("nick", "user", "host")
    assert parse_sender("nick") == Sender("nick")
    assert parse_sender("nick@host") == Sender("nick", None, "host")
    assert str(parse_sender("nick!user@host")) == "nick"


def test_tags_only_line_does_not_crash():  # type: ignore[no-untyped-def]
    msg = parse_irc_message("@a=b")
    assert msg.tags == {"a": "b"}
    assert msg.command is None
