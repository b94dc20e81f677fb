"""CTCP listener: inbound dispatch, outbound helpers and built-in replies.

Feed the listener the text of every PRIVMSG and NOTICE a connection receives.
CTCP tokens found in a PRIVMSG are requests and go to the registry's request
handlers; tokens found in a NOTICE are responses and go to its response
handlers. Responses are never answered.

Built-in request handlers (CLIENTINFO, VERSION, PING, TIME, SOURCE) are
registered on construction. They only answer requests decoded by the listener
that registered them, so several listeners can share one registry and one
connection without answering the same request twice.
"""

from __future__ import annotations

import inspect
import logging
import platform
from collections.abc import Mapping
from email.utils import formatdate
from typing import Any

from ..config.model import CtcpSettings
from ..errors.handling import log_error
from ..errors.internal import CtcpError, TransportError
from ..logs.logger import logger
from .codec import build_message, extract
from .models import CtcpEvent, CtcpToken, Sender, resolve_recipient
from .protocols import CtcpHandler, CtcpTransport
from .registry import HandlerRegistry
from .scheduler import ReplySchedulerRegistry, connection_label

CLIENTINFO_DESCRIPTION = (
    "Returns a list of valid CTCP commands, or information on a specific CTCP command."
)
VERSION_DESCRIPTION = "Returns information on this IRC client."
PING_DESCRIPTION = "Returns a PING response."
TIME_DESCRIPTION = "Returns the current client time, in RFC 822 format."
SOURCE_DESCRIPTION = "Returns the URL where this client can be downloaded."


class CtcpListener:
    """Decodes CTCP traffic for one or more connections.

    Args:
        registry: Handler table to dispatch into; a private one by default.
        schedulers: Reply schedulers used by :meth:`send_ctcp_reply`. A new
            registry built from ``settings`` is used when omitted.
        settings: Client name, version and source URL for the built-in
            replies. Defaults to ``schedulers.settings`` when schedulers are
            given, else to settings read from the environment.
        builtins: Register the CLIENTINFO/VERSION/PING/TIME/SOURCE handlers.
    """

    def __init__(
        self,
        registry: HandlerRegistry | None = None,
        schedulers: ReplySchedulerRegistry | None = None,
        settings: CtcpSettings | None = None,
        *,
        builtins: bool = True,
    ) -> None:
        if settings is None:
            settings = schedulers.settings if schedulers is not None else CtcpSettings()
        self.settings = settings
        self.registry = registry if registry is not None else HandlerRegistry()
        self.schedulers = (
            schedulers if schedulers is not None else ReplySchedulerRegistry(settings)
        )
        if builtins:
            self.register_builtins()

    # ------------------------------------------------------------------ #
    # Inbound
    # ------------------------------------------------------------------ #
    async def on_privmsg(self, connection: Any, sender: Sender, text: str) -> None:
        """Dispatch every CTCP request embedded in a PRIVMSG."""
        for token in extract(text):
            logger.log_event(
                "ctcp",
                "request_received",
                level=logging.DEBUG,
                connection=connection_label(connection),
                command=token.command.upper(),
                sender=sender.nick,
                args=token.args,
            )
            event = self._event(token, connection, sender)
            handlers = self.registry.request_handlers(event.command)
            if not handlers:
                self._log_unhandled(event)
            await self._dispatch(event, handlers + self.registry.any_request_handlers())

    async def on_notice(self, connection: Any, sender: Sender, text: str) -> None:
        """Dispatch every CTCP response embedded in a NOTICE."""
        for token in extract(text):
            logger.log_event(
                "ctcp",
                "response_received",
                level=logging.DEBUG,
                connection=connection_label(connection),
                command=token.command.upper(),
                sender=sender.nick,
                args=token.args,
            )
            event = self._event(token, connection, sender)
            handlers = self.registry.response_handlers(event.command)
            await self._dispatch(event, handlers + self.registry.any_response_handlers())

    def _event(self, token: CtcpToken, connection: Any, sender: Sender) -> CtcpEvent:
        return CtcpEvent(
            command=token.command.upper(),
            listener=self,
            connection=connection,
            sender=sender,
            args=token.args,
        )

    def _log_unhandled(self, event: CtcpEvent) -> None:
        logger.log_event(
            "ctcp",
            "no_handler",
            level=logging.DEBUG,
            connection=connection_label(event.connection),
            command=event.command,
        )

    async def _dispatch(self, event: CtcpEvent, handlers: list[CtcpHandler]) -> None:
        for handler in handlers:
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:  # noqa: BLE001
                logger.log_event(
                    "ctcp",
                    "handler_error",
                    level=logging.ERROR,
                    connection=connection_label(event.connection),
                    command=event.command,
                    error=str(e),
                    error_type=type(e).__name__,
                )

    # ------------------------------------------------------------------ #
    # Outbound
    # ------------------------------------------------------------------ #
    def send_ctcp_reply(
        self,
        connection: Any,
        recipient: str | Sender | Mapping[str, Any],
        command: str,
        *args: str,
    ) -> None:
        """Queue a throttled CTCP reply (sent as a NOTICE).

        Returns immediately; the reply is dropped (and logged) rather than
        raising when it cannot be queued.

        Args:
            connection: Connection the reply is sent through.
            recipient: Nickname, :class:`Sender` or mapping with ``"nick"``.
            command: CTCP command of the reply.
            *args: Reply arguments, quoted if the command is encoded.
        """
        self.schedulers.enqueue(connection, recipient, command, *args)

    async def send_ctcp_request(
        self,
        connection: CtcpTransport,
        recipient: str | Sender | Mapping[str, Any],
        command: str,
        *args: str,
    ) -> None:
        """Send a CTCP request right away as a PRIVMSG; requests are not throttled.

        Args:
            connection: Connection the request is sent through.
            recipient: Nickname, :class:`Sender` or mapping with ``"nick"``.
            command: CTCP command to request.
            *args: Request arguments.

        Raises:
            TransportError: The connection failed to send the PRIVMSG. A
                :class:`CtcpError` raised by the connection is re-raised as is.
        """
        target = resolve_recipient(recipient)
        try:
            result = connection.privmsg(target, build_message(command, args))
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            log_error(
                f"CTCP {command.upper()} request could not be sent",
                e,
                context={"connection": connection_label(connection), "target": target},
            )
            if isinstance(e, CtcpError):
                raise
            raise TransportError(
                f"Could not send CTCP {command.upper()} request to {target}",
                data={"connection": connection_label(connection)},
            ) from e
        logger.log_event(
            "ctcp",
            "request_sent",
            level=logging.DEBUG,
            connection=connection_label(connection),
            target=target,
            command=command.upper(),
            recipient=target,
        )

    # ------------------------------------------------------------------ #
    # Built-in request handlers
    # ------------------------------------------------------------------ #
    def register_builtins(self) -> None:
        self.registry.on_request("CLIENTINFO", self.handle_clientinfo, CLIENTINFO_DESCRIPTION)
        self.registry.on_request("VERSION", self.handle_version, VERSION_DESCRIPTION)
        self.registry.on_request("PING", self.handle_ping, PING_DESCRIPTION)
        self.registry.on_request("TIME", self.handle_time, TIME_DESCRIPTION)
        self.registry.on_request("SOURCE", self.handle_source, SOURCE_DESCRIPTION)

    def handle_clientinfo(self, event: CtcpEvent) -> None:
        if event.listener is not self:
            return
        if len(event.args) == 1:
            description = self.registry.description(event.args[0])
            if description:
                self.send_ctcp_reply(event.connection, event.sender, "CLIENTINFO", description)
                return
        commands = ", ".join(self.registry.request_commands())
        self.send_ctcp_reply(
            event.connection, event.sender, "CLIENTINFO", f"Supported commands: {commands}"
        )

    def handle_version(self, event: CtcpEvent) -> None:
        """Reply with the client name and version, the platform and the source URL."""
        if event.listener is not self:
            return
        self.send_ctcp_reply(
            event.connection,
            event.sender,
            "VERSION",
            f"{self.settings.client_name} {self.settings.client_version}",
            platform.platform(),
            self.settings.source_url,
        )

    def handle_ping(self, event: CtcpEvent) -> None:
        if event.listener is not self:
            return
        self.send_ctcp_reply(event.connection, event.sender, "PING", *event.args)

    def handle_time(self, event: CtcpEvent) -> None:
        if event.listener is not self:
            return
        self.send_ctcp_reply(
            event.connection, event.sender, "TIME", formatdate(localtime=True)
        )

    def handle_source(self, event: CtcpEvent) -> None:
        if event.listener is not self:
            return
        self.send_ctcp_reply(
            event.connection, event.sender, "SOURCE", self.settings.source_url
        )
