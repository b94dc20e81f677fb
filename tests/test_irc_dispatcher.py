import asyncio
from typing import Any

import pytest

from ctcp_courier.ctcp.models import CtcpEvent
from ctcp_courier.irc.dispatcher import IRCDispatcher


@pytest.mark.asyncio
async def test_privmsg_request_is_answered(listener, connection):
    disp = IRCDispatcher(listener, connection)
    buf = await disp.process_incoming_data(
        "", ":alice!al@example.org PRIVMSG me :\x01PING 99\x01\r\n"
    )
    assert buf == ""
    await listener.schedulers.get_or_create(connection).drain()
    assert connection.notices == [("alice", "\x01PING 99\x01")]


@pytest.mark.asyncio
async def test_partial_lines_are_buffered(listener, connection):
    seen: list[CtcpEvent] = []
    listener.registry.on_any_request(seen.append)
    disp = IRCDispatcher(listener, connection)
    buf = await disp.process_incoming_data("", ":alice!a@h PRIVMSG me :\x01FING")
    assert buf == ":alice!a@h PRIVMSG me :\x01FING"
    assert seen == []
    buf = await disp.process_incoming_data(buf, "ER\x01\r\n:bob!b@h PRIVMSG #c :plain\r\n")
    assert buf == ""
    assert [(event.command, event.sender.nick) for event in seen] == [("FINGER", "alice")]


@pytest.mark.asyncio
async def test_notice_goes_to_response_handlers(listener, connection):
    responses: list[CtcpEvent] = []
    listener.registry.on_response("VERSION", responses.append)
    disp = IRCDispatcher(listener, connection)
    await disp.process_incoming_data("", ":bob!b@h NOTICE me :\x01VERSION x\x01\r\n")
    await asyncio.sleep(0.02)
    assert [event.args for event in responses] == [("x",)]
    assert connection.notices == []


@pytest.mark.asyncio
async def test_unparsable_and_unrelated_lines_are_ignored(listener, connection, monkeypatch):
    disp = IRCDispatcher(listener, connection)
    seen: list[str] = []

    from ctcp_courier.logs.logger import logger as ctcp_logger

    original_log_event = ctcp_logger.log_event

    def capture(domain: str, action: str, **kwargs: Any) -> None:  # noqa: D401
        seen.append(action)
        original_log_event(domain, action, **kwargs)

    monkeypatch.setattr(ctcp_logger, "log_event", capture)

    buf = await disp.process_incoming_data(
        "", ":server\r\nPING :irc.example.org\r\n   \r\n"
    )
    assert buf == ""
    assert "unparsable_line" in seen
    assert "chat_message" not in seen
