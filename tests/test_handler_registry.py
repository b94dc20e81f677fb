from ctcp_courier.ctcp.registry import HandlerRegistry


def _noop(event):  # type: ignore[no-untyped-def]
    return None


def _other(event):  # type: ignore[no-untyped-def]
    return None


class TestHandlerRegistry:
    """Test class for HandlerRegistry functionality."""

    def setup_method(self):
        self.registry = HandlerRegistry()

    def test_commands_are_normalized_to_uppercase(self):
        self.registry.on_request("version", _noop, "Describes the client.")
        assert self.registry.request_handlers("VERSION") == [_noop]
        assert self.registry.request_handlers("Version") == [_noop]
        assert self.registry.description("vErSiOn") == "Describes the client."

    def test_multiple_handlers_keep_registration_order(self):
        self.registry.on_request("PING", _noop)
        self.registry.on_request("PING", _other)
        assert self.registry.request_handlers("PING") == [_noop, _other]

    def test_requests_and_responses_are_separate(self):
        self.registry.on_request("PING", _noop)
        self.registry.on_response("PING", _other)
        assert self.registry.request_handlers("PING") == [_noop]
        assert self.registry.response_handlers("PING") == [_other]

    def test_request_commands_sorted(self):
        for command in ("TIME", "clientinfo", "PING"):
            self.registry.on_request(command, _noop)
        self.registry.on_response("VERSION", _noop)
        assert self.registry.request_commands() == ["CLIENTINFO", "PING", "TIME"]

    def test_missing_command_returns_empty(self):
        assert self.registry.request_handlers("NOPE") == []
        assert self.registry.response_handlers("NOPE") == []
        assert self.registry.description("NOPE") is None

    def test_returned_lists_are_copies(self):
        self.registry.on_request("PING", _noop)
        self.registry.request_handlers("PING").append(_other)
        assert self.registry.request_handlers("PING") == [_noop]

    def test_unregister_removes_handler_everywhere(self):
        self.registry.on_request("FINGER", _noop, "Returns the user name.")
        self.registry.on_request("PING", _noop)
        self.registry.on_request("PING", _other)
        self.registry.on_response("PING", _noop)
        self.registry.on_any_request(_noop)
        self.registry.on_any_response(_noop)

        self.registry.unregister(_noop)

        assert self.registry.request_handlers("PING") == [_other]
        assert self.registry.request_handlers("FINGER") == []
        assert self.registry.description("FINGER") is None
        assert self.registry.response_handlers("PING") == []
        assert self.registry.any_request_handlers() == []
        assert self.registry.any_response_handlers() == []
        assert self.registry.request_commands() == ["PING"]
