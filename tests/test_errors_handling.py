import logging
from typing import Any

from ctcp_courier.errors.handling import classify_error, log_error
from ctcp_courier.errors.internal import (
    CtcpError,
    NoEventLoopError,
    SchedulerClosedError,
    TransportError,
)


def test_ctcp_error_copies_data():
    data = {"connection": "net"}
    err = CtcpError("boom", data=data)
    data["connection"] = "changed"
    assert err.data == {"connection": "net"}
    assert CtcpError("plain").data == {}


def test_classify_error():
    assert classify_error(TransportError("x")) == "transport"
    assert classify_error(ConnectionResetError()) == "transport"
    assert classify_error(SchedulerClosedError("x")) == "lifecycle"
    assert classify_error(NoEventLoopError("x")) == "lifecycle"
    assert classify_error(CtcpError("x")) == "internal"
    assert classify_error(RuntimeError("x")) == "handler"


def test_log_error_merges_error_data(monkeypatch):
    calls: list[tuple[str, str, dict[str, Any]]] = []

    from ctcp_courier.logs.logger import logger as ctcp_logger

    def capture(domain: str, action: str, **kwargs: Any) -> None:
        calls.append((domain, action, kwargs))

    monkeypatch.setattr(ctcp_logger, "log_event", capture)

    log_error(
        "send failed",
        TransportError("socket closed", data={"connection": "net", "attempt": 1}),
        context={"target": "bob"},
        level=logging.WARNING,
    )
    assert len(calls) == 1
    domain, action, kwargs = calls[0]
    assert (domain, action) == ("error", "logged")
    assert kwargs["level"] == logging.WARNING
    assert kwargs["error_type"] == "TRANSPORT"
    assert kwargs["message"] == "send failed: TransportError: socket closed"
    assert kwargs["connection"] == "net"
    assert kwargs["target"] == "bob"
    assert kwargs["attempt"] == 1
