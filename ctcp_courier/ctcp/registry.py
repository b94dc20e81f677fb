"""Explicit command -> handler registry used by the CTCP listener."""

from __future__ import annotations

import threading

from .protocols import CtcpHandler


class HandlerRegistry:
    """Maps uppercase CTCP command names to request and response handlers.

    Several handlers may be registered for the same command; all of them are
    invoked, in registration order. Request commands can carry a one-line
    description that CLIENTINFO reports.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._requests: dict[str, list[CtcpHandler]] = {}
        self._responses: dict[str, list[CtcpHandler]] = {}
        self._any_request: list[CtcpHandler] = []
        self._any_response: list[CtcpHandler] = []
        self._descriptions: dict[str, str] = {}

    def on_request(
        self, command: str, handler: CtcpHandler, description: str | None = None
    ) -> None:
        """Register ``handler`` for CTCP requests named ``command``.

        Args:
            command: Command name, matched case-insensitively.
            handler: Callable taking a :class:`CtcpEvent`; it may return an
                awaitable, which the listener awaits.
            description: One-line text reported by ``CLIENTINFO <command>``.
                A later description for the same command replaces it.
        """
        key = command.upper()
        with self._lock:
            self._requests.setdefault(key, []).append(handler)
            if description:
                self._descriptions[key] = description

    def on_response(self, command: str, handler: CtcpHandler) -> None:
        """Register ``handler`` for CTCP responses (NOTICE) named ``command``."""
        with self._lock:
            self._responses.setdefault(command.upper(), []).append(handler)

    def on_any_request(self, handler: CtcpHandler) -> None:
        with self._lock:
            self._any_request.append(handler)

    def on_any_response(self, handler: CtcpHandler) -> None:
        with self._lock:
            self._any_response.append(handler)

    def unregister(self, handler: CtcpHandler) -> None:
        """Remove ``handler`` from every command and catch-all it was added to.

        Commands left without request handlers also lose their description.
        """
        with self._lock:
            for table in (self._requests, self._responses):
                for command in list(table):
                    table[command] = [h for h in table[command] if h != handler]
                    if not table[command]:
                        del table[command]
            self._any_request = [h for h in self._any_request if h != handler]
            self._any_response = [h for h in self._any_response if h != handler]
            for command in list(self._descriptions):
                if command not in self._requests:
                    del self._descriptions[command]

    def request_handlers(self, command: str) -> list[CtcpHandler]:
        with self._lock:
            return list(self._requests.get(command.upper(), ()))

    def response_handlers(self, command: str) -> list[CtcpHandler]:
        with self._lock:
            return list(self._responses.get(command.upper(), ()))

    def any_request_handlers(self) -> list[CtcpHandler]:
        with self._lock:
            return list(self._any_request)

    def any_response_handlers(self) -> list[CtcpHandler]:
        with self._lock:
            return list(self._any_response)

    def description(self, command: str) -> str | None:
        with self._lock:
            return self._descriptions.get(command.upper())

    def request_commands(self) -> list[str]:
        with self._lock:
            return sorted(self._requests)
