"""
Per-connection reply scheduling.

Servers disconnect clients that send many messages in a short period, so CTCP
replies are not written directly. Each connection gets a bounded FIFO of
pending replies drained by a single worker task that sends one NOTICE, then
waits ``reply_rate`` seconds before the next one. Replies offered while the
queue is full are dropped.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
from collections.abc import Mapping
from typing import Any

from ..config.model import CtcpSettings
from ..errors.internal import NoEventLoopError, SchedulerClosedError
from ..logs.logger import logger
from .codec import build_message
from .models import ReplyEntry, Sender, resolve_recipient
from .protocols import CtcpTransport


def connection_label(connection: Any) -> str:
    name = getattr(connection, "name", None)
    if isinstance(name, str) and name:
        return name
    return f"{type(connection).__name__}@{id(connection):x}"


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class ReplyScheduler:
    """Bounded reply queue plus the single worker that delivers it.

    At most one reply is in flight at a time, and two consecutive sends are at
    least ``rate`` seconds apart. The worker runs until :meth:`stop`.
    """

    def __init__(
        self,
        connection: CtcpTransport,
        *,
        queue_size: int,
        rate: float,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.connection = connection
        self.queue_size = queue_size
        self.rate = rate
        self.label = connection_label(connection)
        self._loop = loop or asyncio.get_running_loop()
        self._queue: asyncio.Queue[ReplyEntry] = asyncio.Queue(maxsize=queue_size)
        self._task: asyncio.Task[None] | None = None
        self._state_lock = threading.Lock()
        self._started = False
        self._closed = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    @property
    def loop_closed(self) -> bool:
        return self._loop.is_closed()

    def start(self) -> None:
        """Start the delivery worker; calling it again is a no-op."""
        with self._state_lock:
            if self._closed:
                raise SchedulerClosedError(
                    "Reply scheduler was stopped and cannot be restarted",
                    data={"connection": self.label},
                )
            if self._started:
                return
            self._started = True
        if self._on_loop_thread():
            self._spawn_worker()
        else:
            self._loop.call_soon_threadsafe(self._spawn_worker)

    def _spawn_worker(self) -> None:
        if self._closed or self._task is not None:
            return
        self._task = self._loop.create_task(
            self._run(), name=f"ctcp-replies-{self.label}"
        )
        logger.log_event(
            "ctcp",
            "scheduler_started",
            level=logging.DEBUG,
            connection=self.label,
            queue_size=self.queue_size,
            rate=self.rate,
        )

    def submit(self, entry: ReplyEntry) -> None:
        """Offer ``entry`` from any thread; the outcome is not reported back.

        Args:
            entry: The reply to queue. It is dropped and logged if the queue is
                full, the scheduler is stopped or its event loop has closed.
        """
        if self._on_loop_thread():
            self.offer(entry)
            return
        try:
            self._loop.call_soon_threadsafe(self.offer, entry)
        except RuntimeError:
            # call_soon_threadsafe raises once the loop is closed
            logger.log_event(
                "ctcp",
                "reply_dropped_loop_closed",
                level=logging.WARNING,
                connection=self.label,
                target=entry.recipient,
                recipient=entry.recipient,
            )

    def offer(self, entry: ReplyEntry) -> bool:
        """Queue ``entry`` unless the queue is full. Must run on the loop thread.

        Returns:
            True if the entry was queued, False if it was dropped.
        """
        if self._closed:
            logger.log_event(
                "ctcp",
                "scheduler_closed_enqueue",
                level=logging.DEBUG,
                connection=self.label,
                recipient=entry.recipient,
            )
            return False
        try:
            self._queue.put_nowait(entry)
        except asyncio.QueueFull:
            logger.log_event(
                "ctcp",
                "reply_dropped",
                level=logging.DEBUG,
                connection=self.label,
                target=entry.recipient,
                recipient=entry.recipient,
                queue_size=self.queue_size,
            )
            return False
        logger.log_event(
            "ctcp",
            "reply_queued",
            level=logging.DEBUG,
            connection=self.label,
            target=entry.recipient,
            recipient=entry.recipient,
            pending=self._queue.qsize(),
        )
        return True

    async def drain(self) -> None:
        """Wait until every queued reply has been handed to the connection."""
        await self._queue.join()

    async def stop(self) -> None:
        """Stop the worker and discard whatever is still queued."""
        with self._state_lock:
            if self._closed:
                return
            self._closed = True
        discarded = self._discard_pending()
        task = self._task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        logger.log_event(
            "ctcp",
            "scheduler_stopped",
            level=logging.DEBUG,
            connection=self.label,
            discarded=discarded,
        )

    def _discard_pending(self) -> int:
        discarded = 0
        while True:
            try:
                self._queue.get_nowait()
            except asyncio.QueueEmpty:
                return discarded
            self._queue.task_done()
            discarded += 1

    async def _run(self) -> None:
        while True:
            entry = await self._queue.get()
            try:
                await self._transmit(entry)
            except Exception as e:  # noqa: BLE001
                logger.log_event(
                    "ctcp",
                    "reply_send_failed",
                    level=logging.WARNING,
                    connection=self.label,
                    target=entry.recipient,
                    recipient=entry.recipient,
                    error=str(e),
                    error_type=type(e).__name__,
                )
            finally:
                self._queue.task_done()
            await asyncio.sleep(self.rate)

    async def _transmit(self, entry: ReplyEntry) -> None:
        result = self.connection.notice(entry.recipient, entry.message)
        if inspect.isawaitable(result):
            await result
        logger.log_event(
            "ctcp",
            "reply_sent",
            level=logging.DEBUG,
            connection=self.label,
            target=entry.recipient,
            recipient=entry.recipient,
        )

    def _on_loop_thread(self) -> bool:
        try:
            return asyncio.get_running_loop() is self._loop
        except RuntimeError:
            return False


class ReplySchedulerRegistry:
    """Process-wide map of connection -> :class:`ReplyScheduler`.

    Connections are keyed by identity. The first reply for a connection creates
    its scheduler and starts the worker; the map is guarded by a lock so
    concurrent first use from several threads still yields a single worker.

    Workers run on ``loop`` when given, otherwise on the loop that was running
    when the registry was built, otherwise on the first running loop that asks
    for a scheduler. Schedulers whose loop has since been closed are replaced.
    """

    def __init__(
        self,
        settings: CtcpSettings | None = None,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.settings = settings if settings is not None else CtcpSettings()
        self._loop = loop if loop is not None else _running_loop()
        self._lock = threading.Lock()
        self._schedulers: dict[int, ReplyScheduler] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._schedulers)

    def get(self, connection: Any) -> ReplyScheduler | None:
        with self._lock:
            return self._schedulers.get(id(connection))

    def get_or_create(self, connection: Any) -> ReplyScheduler:
        """Return the scheduler for ``connection``, creating and starting it once.

        Safe to call from any thread. A scheduler bound to a closed event loop
        is dropped and a new one is created on the current loop.

        Args:
            connection: The connection replies will be sent through.

        Returns:
            The connection's running (or starting) :class:`ReplyScheduler`.

        Raises:
            NoEventLoopError: No open event loop is known to run the worker.
        """
        with self._lock:
            key = id(connection)
            scheduler = self._schedulers.get(key)
            if scheduler is not None and not scheduler.loop_closed:
                return scheduler
            loop = self._event_loop()
            if loop is None:
                raise NoEventLoopError(
                    "No running event loop for the reply scheduler",
                    data={"connection": connection_label(connection)},
                )
            if scheduler is not None:
                logger.log_event(
                    "ctcp",
                    "scheduler_replaced",
                    level=logging.DEBUG,
                    connection=scheduler.label,
                )
            scheduler = ReplyScheduler(
                connection,
                queue_size=self.settings.reply_queue_size,
                rate=self.settings.reply_rate,
                loop=loop,
            )
            self._schedulers[key] = scheduler
            scheduler.start()
            return scheduler

    def _event_loop(self) -> asyncio.AbstractEventLoop | None:
        if self._loop is None or self._loop.is_closed():
            self._loop = _running_loop()
        return self._loop

    def enqueue(
        self,
        connection: Any,
        recipient: str | Sender | Mapping[str, Any],
        command: str,
        *args: str,
    ) -> None:
        """Queue a CTCP reply for ``recipient`` on ``connection``.

        The reply is sent later as a NOTICE by the connection's worker. This
        never raises for delivery reasons: a full queue, a stopped scheduler
        or a missing event loop drops the reply and logs it.

        Args:
            connection: The connection the reply goes out on.
            recipient: A nickname, a :class:`Sender`, or a mapping with a
                ``"nick"`` key.
            command: CTCP command name; encoded commands get their
                arguments quoted.
            *args: Reply arguments.
        """
        entry = ReplyEntry(
            recipient=resolve_recipient(recipient),
            message=build_message(command, args),
        )
        try:
            scheduler = self.get_or_create(connection)
        except NoEventLoopError:
            logger.log_event(
                "ctcp",
                "reply_dropped_no_loop",
                level=logging.WARNING,
                connection=connection_label(connection),
                target=entry.recipient,
                recipient=entry.recipient,
            )
            return
        scheduler.submit(entry)

    async def close(self, connection: Any) -> None:
        with self._lock:
            scheduler = self._schedulers.pop(id(connection), None)
        if scheduler is not None:
            await scheduler.stop()

    async def close_all(self) -> None:
        with self._lock:
            schedulers = list(self._schedulers.values())
            self._schedulers.clear()
        for scheduler in schedulers:
            await scheduler.stop()
